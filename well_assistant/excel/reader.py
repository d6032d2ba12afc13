from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

import numpy as np
import pandas as pd

"""Spreadsheet reader for drilling data uploads.

- Only ``.xlsx`` (openpyxl) and ``.xls`` (xlrd) are accepted.
- The first non-blank row is the header row; every following non-blank row is
  a data row keyed by header name.
- Only the first worksheet is read; further sheets are ignored.

Decoding is pure: the caller owns the uploaded file and its cleanup.
"""

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "SheetData",
    "SpreadsheetError",
    "UnsupportedFormatError",
    "MalformedFileError",
    "NoWorksheetsError",
    "EmptyFileError",
    "NoDataRowsError",
    "read_spreadsheet",
]

# extension -> pandas engine
SUPPORTED_EXTENSIONS: dict[str, str] = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


class SpreadsheetError(Exception):
    """Base class for user-correctable spreadsheet decode failures.

    ``error`` is the short headline, ``detail`` the remediation hint shown to
    the user.
    """
    error_type = "SPREADSHEET_ERROR"
    error = "Invalid Excel file structure"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class UnsupportedFormatError(SpreadsheetError):
    error_type = "UNSUPPORTED_FORMAT"
    error = "Only Excel files are allowed"


class MalformedFileError(SpreadsheetError):
    error_type = "MALFORMED_FILE"
    error = "Invalid Excel file format"


class NoWorksheetsError(SpreadsheetError):
    error_type = "NO_WORKSHEETS"


class EmptyFileError(SpreadsheetError):
    error_type = "EMPTY_FILE"


class NoDataRowsError(SpreadsheetError):
    error_type = "NO_DATA_ROWS"


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[dict[str, Any]]  # header name -> cell value (None for empty cells)


def _resolve_extension(source: Any, extension: str | None) -> str:
    if extension is None:
        if isinstance(source, (str, Path)):
            extension = Path(source).suffix
        else:
            extension = ""
    ext = extension.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def _native(value: Any) -> Any:
    """Convert a cell value to a plain Python scalar; empty cells become None."""
    if value is None:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, np.generic):
        value = value.item()
        if isinstance(value, float) and np.isnan(value):
            return None
    if value is pd.NaT:
        return None
    return value


def read_spreadsheet(
    source: str | Path | bytes | BinaryIO,
    extension: str | None = None,
) -> SheetData:
    """Decode the first worksheet of an uploaded Excel file.

    Parameters
    ----------
    source: ファイルパス / 生バイト列 / バイナリファイルオブジェクト
    extension: 申告拡張子 (None ならパスの suffix を使用)

    Raises
    ------
    UnsupportedFormatError: extension is not .xlsx / .xls
    MalformedFileError: the workbook cannot be decoded
    NoWorksheetsError: the workbook has no sheets
    EmptyFileError: the first sheet has no content rows
    NoDataRowsError: header row present but no data rows below it
    """
    ext = _resolve_extension(source, extension)
    engine = SUPPORTED_EXTENSIONS.get(ext)
    if engine is None:
        raise UnsupportedFormatError("Please upload a file with .xlsx or .xls extension")

    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        xls = pd.ExcelFile(source, engine=engine)
    except Exception as e:
        raise MalformedFileError(
            f"Please ensure you are uploading a valid Excel file (.xlsx or .xls): {e}"
        ) from e

    with xls:
        if not xls.sheet_names:
            raise NoWorksheetsError("Excel file contains no worksheets")
        sheet_name = str(xls.sheet_names[0])
        try:
            # ヘッダなしで生読み (1行目をヘッダとして後で適用)
            df = xls.parse(xls.sheet_names[0], header=None, dtype=object)
        except Exception as e:
            raise MalformedFileError(f"Unable to read worksheet data: {e}") from e

    # 全セル空の行は除外 (途中・末尾とも)
    df = df.dropna(how="all")
    if df.shape[0] == 0:
        raise EmptyFileError("Excel file is empty or contains no data")

    header = [_native(c) for c in df.iloc[0].tolist()]
    # ヘッダ名は前後空白も含めそのまま保持
    columns = [str(c) if c is not None else None for c in header]
    data_part = df.iloc[1:]
    if data_part.shape[0] == 0:
        raise NoDataRowsError("Excel file must contain at least a header row and one data row")

    rows: list[dict[str, Any]] = []
    for _, raw in data_part.iterrows():
        row_dict: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            if col is None:
                continue
            row_dict[col] = _native(val)
        rows.append(row_dict)

    return SheetData(
        sheet_name=sheet_name,
        columns=[c for c in columns if c is not None],
        rows=rows,
    )
