"""Workbook reading, cell coercion and header/section location."""
