# src/betlog/ingest/loaders.py
# -----------------------------------------------------------------------------
# File -> Document loaders (the only place that touches the filesystem).
#
# load_document(path, sheet=0)
#   .xlsx / .xlsm / .xls : pandas.read_excel (openpyxl), cells kept as objects
#                          so ints stay ints and date cells stay datetimes
#   .csv                 : pandas.read_csv, every cell as text, "" kept
#   .xml                 : raw bytes wrapped in XmlTableDocument
# -----------------------------------------------------------------------------
from __future__ import annotations

from pathlib import Path

import pandas as pd

from betlog.common.errors import DocumentDecodeError
from betlog.ingest.extract import Document, XmlTableDocument

SPREADSHEET_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def load_document(path: Path, sheet: str | int = 0) -> Document:
    """
    Read a betting-history export from disk.

    Raises
    ------
    FileNotFoundError   : path does not exist
    ValueError          : unsupported file suffix
    DocumentDecodeError : the reader could not decode the file
    """
    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(p)
    suffix = p.suffix.lower()

    if suffix == ".xml":
        return XmlTableDocument(p.read_bytes())

    try:
        if suffix in SPREADSHEET_SUFFIXES:
            return pd.read_excel(p, sheet_name=sheet, dtype=object)
        if suffix == ".csv":
            return pd.read_csv(p, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (OSError, ValueError) as e:
        raise DocumentDecodeError(f"could not read {p.name}: {e}") from e

    raise ValueError(f"unsupported file type {suffix!r}; expected .xlsx, .xls, .csv or .xml")
