"""Per-report-family workbook parsers.

Each module exposes ``parse(workbook, file_name)`` returning the family's
result dataclass, or ``None`` when the workbook lacks the family's sheets.
"""
