"""sheetmerge: merge same-layout spreadsheets and flatten template sheets."""

__version__ = "0.1.0"
