"""
Row decoding for Core Reporting API results

The v3 API returns every report as a list of positional rows
(``[dimension..., metric...]``), with the ``rows`` key missing entirely when
the report is empty. These helpers give each query shape a typed decoder with
bounds checks so callers never index raw rows directly.
"""
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

Number = Union[int, float]
Rows = Optional[Sequence[Sequence[Any]]]


@dataclass(frozen=True)
class DimensionRow:
    """One ``[dimension, metric]`` row"""
    dimension: str
    value: Number


def to_number(value: Any) -> Number:
    """Return value as a number, or 0 when it is not numeric"""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
        if not math.isfinite(number):
            return 0
        return int(number) if number.is_integer() else number
    return 0


def cell(rows: Rows, row_index: int, column_index: int) -> Any:
    """Value at rows[row_index][column_index], or None when out of range"""
    if not rows or row_index >= len(rows):
        return None
    row = rows[row_index]
    if not isinstance(row, (list, tuple)) or column_index >= len(row):
        return None
    return row[column_index]


def metric_at(rows: Rows, row_index: int, column_index: int) -> Number:
    """Numeric value at a fixed position, defaulting to 0"""
    return to_number(cell(rows, row_index, column_index))


def decode_total(rows: Rows) -> Number:
    """Single-metric report without dimensions: first row, first column"""
    return metric_at(rows, 0, 0)


def decode_dimension_rows(rows: Rows) -> List[DimensionRow]:
    """Decode ``[dimension, metric]`` rows, preserving the remote order"""
    decoded = []
    for index in range(len(rows or [])):
        dimension = cell(rows, index, 0)
        decoded.append(DimensionRow(
            dimension="" if dimension is None else str(dimension),
            value=metric_at(rows, index, 1),
        ))
    return decoded


def format_ga_date(value: str) -> str:
    """Reformat a ``yyyymmdd`` date dimension as ``yyyy-mm-dd``"""
    value = str(value)
    return f"{value[0:4]}-{value[4:6]}-{value[6:8]}"
