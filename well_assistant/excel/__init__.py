from .reader import (
    SUPPORTED_EXTENSIONS,
    EmptyFileError,
    MalformedFileError,
    NoDataRowsError,
    NoWorksheetsError,
    SheetData,
    SpreadsheetError,
    UnsupportedFormatError,
    read_spreadsheet,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "EmptyFileError",
    "MalformedFileError",
    "NoDataRowsError",
    "NoWorksheetsError",
    "SheetData",
    "SpreadsheetError",
    "UnsupportedFormatError",
    "read_spreadsheet",
]
