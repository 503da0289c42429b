"""Retail report workbook ingestion: parse Excel exports into normalized per-family rows."""

__version__ = "0.1.0"
