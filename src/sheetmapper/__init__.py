"""SheetMapper - spreadsheet header classification and schema mapping."""

__version__ = "0.1.0"
