"""Routing, state, derived views and directory orchestration."""
