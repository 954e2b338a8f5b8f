"""XLSX export of decoded EDID sources.

Every decoded source contributes one row to each table sheet:

- ``Sources``: name, path, size, remaining bytes, checksum status
- ``Header``: vendor, product, serial, manufacture date, version
- ``Display``: basic display parameters
- ``Timings``: one row per detailed timing descriptor
- ``Descriptors``: one row per descriptor slot (kind, text, raw payload)

Each of these sheets holds a single Excel Table (none when it has no
rows), with a ``source`` column pointing back to the row in ``Sources``.
A ``Summary`` sheet lists a few counts as key/value pairs and has no
table.

Nested dataclasses are flattened into ``parent_field`` columns and bytes
are written as hex strings.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import is_dataclass
from pathlib import Path
from typing import Any, Iterable, List, Sequence, Tuple, cast

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo
from openpyxl.worksheet.worksheet import Worksheet

from edidparse.parser.descriptor import (
    DetailedTimingDescriptor,
    OpaqueDescriptor,
    TextDescriptor,
    Unknown,
)
from edidparse.source import EdidSource

logger = logging.getLogger(__name__)

Row = dict[str, Any]


def _cell_value(value: Any) -> Any:
    """Map a Python value to something openpyxl can store."""

    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, str):
        # Descriptor text may carry control characters Excel rejects.
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return str(value)


def _flatten(prefix: str, value: Any, out: Row) -> None:
    """Flatten ``value`` into ``out`` using ``prefix`` for column names.

    Dataclasses expand to ``prefix_field`` columns and tuples to
    ``prefix_i`` columns; everything else becomes a single cell.
    """

    if is_dataclass(value) and not isinstance(value, type):
        for fld in dataclasses.fields(value):
            name = f"{prefix}_{fld.name}" if prefix else fld.name
            _flatten(name, getattr(value, fld.name), out)
        return

    if isinstance(value, tuple):
        for idx, item in enumerate(value):
            _flatten(f"{prefix}_{idx}", item, out)
        return

    out[prefix] = _cell_value(value)


def _source_row(index: int, source: EdidSource) -> Row:
    return {
        "idx": index,
        "name": source.name,
        "path": source.path.as_posix(),
        "size": len(source.data),
        "remaining": source.remaining,
        "extensions": source.edid.extension_count,
        "checksum": source.edid.checksum,
        "checksum_ok": source.checksum_ok,
    }


def _header_row(index: int, source: EdidSource) -> Row:
    header = source.edid.header
    row: Row = {"source": index, "vendor_id": header.vendor_id}
    _flatten("", header, row)
    row["full_year"] = header.full_year
    return row


def _display_row(index: int, source: EdidSource) -> Row:
    display = source.edid.display
    row: Row = {"source": index}
    _flatten("", display, row)
    row["gamma_value"] = display.gamma_value()
    return row


def _timing_rows(index: int, source: EdidSource) -> List[Row]:
    rows: List[Row] = []
    for slot, desc in enumerate(source.edid.descriptors):
        if not isinstance(desc, DetailedTimingDescriptor):
            continue
        row: Row = {"source": index, "slot": slot}
        _flatten("", desc.timing, row)
        row["refresh_rate"] = desc.timing.refresh_rate()
        rows.append(row)
    return rows


def _descriptor_rows(index: int, source: EdidSource) -> List[Row]:
    rows: List[Row] = []
    for slot, desc in enumerate(source.edid.descriptors):
        row: Row = {
            "source": index,
            "slot": slot,
            "kind": desc.kind,
            "tag": None,
            "text": None,
            "data": None,
        }
        if isinstance(desc, TextDescriptor):
            row["text"] = _cell_value(desc.text)
        elif isinstance(desc, OpaqueDescriptor):
            row["data"] = desc.data.hex()
        elif isinstance(desc, Unknown):
            row["tag"] = desc.tag
            row["data"] = desc.data.hex()
        rows.append(row)
    return rows


def _write_table_sheet(wb: Workbook, title: str, rows: List[Row]) -> None:
    """Create a worksheet named ``title`` holding one Excel table.

    Columns keep the order in which they first appear in ``rows``. Floats
    get a 3-decimal number format.
    """

    ws = wb.create_sheet(title)

    columns: List[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    if not columns:
        columns = ["idx"]

    ws.append(columns)
    for row in rows:
        ws.append([row.get(col) for col in columns])

    for col_idx, col_name in enumerate(columns, start=1):
        if not any(isinstance(r.get(col_name), float) for r in rows):
            continue
        for cells in ws.iter_cols(
            min_col=col_idx, max_col=col_idx, min_row=2
        ):
            for cell in cells:
                cell.number_format = "0.000"

    if not rows:
        return

    ref = f"A1:{get_column_letter(ws.max_column)}{ws.max_row}"
    table = Table(displayName=f"Tbl_{title}", ref=ref)
    table.tableStyleInfo = TableStyleInfo(
        name="TableStyleMedium2",
        showFirstColumn=False,
        showLastColumn=False,
        showRowStripes=True,
        showColumnStripes=False,
    )
    ws.add_table(table)


def _write_summary(ws: Worksheet, rows: Iterable[Tuple[str, Any]]) -> None:
    for row_idx, (key, value) in enumerate(rows, start=1):
        ws.cell(row=row_idx, column=1, value=key)
        ws.cell(row=row_idx, column=2, value=_cell_value(value))


def _auto_size_columns(ws: Worksheet) -> None:
    """Auto-size columns based on content width (simple heuristic)."""

    for col_idx in range(1, int(ws.max_column or 0) + 1):
        width = 0
        for cells in ws.iter_cols(min_col=col_idx, max_col=col_idx):
            for cell in cells:
                if cell.value is not None:
                    width = max(width, len(str(cell.value)))
        letter = get_column_letter(col_idx)
        ws.column_dimensions[letter].width = min(60, max(8, width + 2))


#
# Public API
#


def export_to_xlsx(sources: Sequence[EdidSource], xlsx_path: Path) -> None:
    """Export decoded ``sources`` into an XLSX file at ``xlsx_path``.

    The file is created or overwritten.
    """

    wb = Workbook()
    # Remove default sheet to keep only named ones
    wb.remove(cast(Worksheet, wb.active))

    _write_table_sheet(
        wb, "Sources", [_source_row(i, s) for i, s in enumerate(sources)]
    )
    _write_table_sheet(
        wb, "Header", [_header_row(i, s) for i, s in enumerate(sources)]
    )
    _write_table_sheet(
        wb, "Display", [_display_row(i, s) for i, s in enumerate(sources)]
    )
    _write_table_sheet(
        wb,
        "Timings",
        [r for i, s in enumerate(sources) for r in _timing_rows(i, s)],
    )
    _write_table_sheet(
        wb,
        "Descriptors",
        [r for i, s in enumerate(sources) for r in _descriptor_rows(i, s)],
    )

    _write_summary(
        wb.create_sheet("Summary"),
        [
            ("sources", len(sources)),
            ("checksum_failures", sum(not s.checksum_ok for s in sources)),
            ("extension_bytes", sum(s.remaining for s in sources)),
        ],
    )

    for sheet in wb.worksheets:
        _auto_size_columns(sheet)

    logger.debug("Writing %d source(s) to %s", len(sources), xlsx_path)
    wb.save(xlsx_path.as_posix())


__all__ = ["export_to_xlsx"]
