"""Command line entry point (python -m report_ingest.cli)."""
