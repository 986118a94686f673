# src/betlog/ingest/extract.py
# -----------------------------------------------------------------------------
# Row extraction: decode a source document into flat RawRows (column -> text).
#
# Supported documents
# -------------------
# - TabularDocument(header, rows) or a plain sequence of sequences whose first
#   row is the header (decoded spreadsheet / CSV cells)
# - pandas.DataFrame (columns are the header; NaN cells are missing)
# - sequence of mappings (rows already keyed by column name)
# - XmlTableDocument(text): flat SpreadsheetML table (Row / Cell / Data),
#   matched on local tag names so the namespace prefix does not matter
#
# Contract
# --------
# - Header-to-cell mapping is positional; a missing cell is an *absent key*,
#   a present cell without text is "" (present-but-empty).
# - No rows at all -> [] ; rows but no usable header -> MissingHeaderError.
# - Datetime cells (already decoded by a spreadsheet reader) are rendered back
#   to the sportsbook timestamp text so downstream classification sees one
#   format.
# -----------------------------------------------------------------------------
from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

import pandas as pd

from betlog.common.errors import DocumentDecodeError, MissingHeaderError
from betlog.ingest.timestamps import format_timestamp

RawRow = dict[str, str]

_SS_NS = "urn:schemas-microsoft-com:office:spreadsheet"


@dataclass(frozen=True)
class TabularDocument:
    header: Sequence[Any]
    rows: Sequence[Sequence[Any]]


@dataclass(frozen=True)
class XmlTableDocument:
    text: str | bytes


Document = Union[
    TabularDocument,
    XmlTableDocument,
    pd.DataFrame,
    Sequence[Mapping[str, Any]],
    Sequence[Sequence[Any]],
]


def _cell_text(value: Any) -> str | None:
    """Cell value -> text; None for missing (None/NaN/NaT)."""
    if value is None or value is pd.NaT or value is pd.NA:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, datetime):
        return format_timestamp(value)
    return str(value).strip()


def _header_names(header: Sequence[Any]) -> list[str]:
    names = [(_cell_text(h) or "") for h in header]
    if not any(names):
        raise MissingHeaderError("header row is empty; expected column names")
    return names


def _map_row(names: Sequence[str], cells: Sequence[Any]) -> RawRow:
    row: RawRow = {}
    for name, value in zip(names, cells):
        if not name or name in row:
            continue
        text = _cell_text(value)
        if text is not None:
            row[name] = text
    return row


def extract_tabular(doc: TabularDocument) -> list[RawRow]:
    if doc.header is None or len(doc.header) == 0:
        if doc.rows:
            raise MissingHeaderError("tabular document has rows but no header row")
        return []
    names = _header_names(doc.header)
    return [_map_row(names, r) for r in doc.rows]


def extract_frame(df: pd.DataFrame) -> list[RawRow]:
    if len(df.columns) == 0:
        if len(df.index):
            raise MissingHeaderError("frame has rows but no columns")
        return []
    names = _header_names([str(c) if not str(c).startswith("Unnamed:") else "" for c in df.columns])
    return [_map_row(names, list(values)) for values in df.itertuples(index=False, name=None)]


def extract_mappings(rows: Sequence[Mapping[str, Any]]) -> list[RawRow]:
    out: list[RawRow] = []
    for r in rows:
        row: RawRow = {}
        for k, v in r.items():
            text = _cell_text(v)
            if k and text is not None:
                row[str(k).strip()] = text
        out.append(row)
    return out


# ---------------------------- SpreadsheetML ---------------------------------


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag.split(":")[-1]


def _cell_index(cell: ET.Element) -> int | None:
    """1-based ss:Index of a sparse cell, if present."""
    for key in (f"{{{_SS_NS}}}Index", "Index", "ss:Index"):
        raw = cell.get(key)
        if raw is not None:
            try:
                return int(raw)
            except ValueError:
                return None
    return None


def _xml_row_cells(row: ET.Element) -> list[str | None]:
    cells: list[str | None] = []
    for cell in row:
        if _local(cell.tag) != "Cell":
            continue
        idx = _cell_index(cell)
        if idx is not None and idx - 1 > len(cells):
            cells.extend([None] * (idx - 1 - len(cells)))
        data = next((c for c in cell if _local(c.tag) == "Data"), None)
        cells.append("" if data is None else "".join(data.itertext()).strip())
    return cells


def extract_xml_table(doc: XmlTableDocument) -> list[RawRow]:
    text = doc.text
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise DocumentDecodeError(f"XML table could not be parsed: {e}") from e

    # First Table wins when the workbook carries several worksheets
    table = next((el for el in root.iter() if _local(el.tag) == "Table"), root)
    rows = [el for el in table.iter() if _local(el.tag) == "Row"]
    if not rows:
        return []

    names = _header_names(_xml_row_cells(rows[0]))
    return [_map_row(names, _xml_row_cells(r)) for r in rows[1:]]


def extract_rows(document: Document) -> list[RawRow]:
    """
    Decode any supported document into RawRows in source order.

    Raises
    ------
    MissingHeaderError   : data rows without a header row
    DocumentDecodeError  : XML that cannot be parsed
    TypeError            : unsupported document type
    """
    if isinstance(document, XmlTableDocument):
        return extract_xml_table(document)
    if isinstance(document, TabularDocument):
        return extract_tabular(document)
    if isinstance(document, pd.DataFrame):
        return extract_frame(document)
    if isinstance(document, (str, bytes)):
        raise TypeError("wrap XML text in XmlTableDocument(text) before extraction")
    if isinstance(document, Sequence):
        if len(document) == 0:
            return []
        first = document[0]
        if isinstance(first, Mapping):
            return extract_mappings(document)  # type: ignore[arg-type]
        rows = list(document)
        return extract_tabular(TabularDocument(header=rows[0], rows=rows[1:]))
    raise TypeError(f"unsupported document type: {type(document).__name__}")
