"""
Nullable accessors over GA4 report responses.

A report may come back without rows, a row may have fewer values than
requested, and a value may be empty. Each accessor returns ``None`` for
"not there" so callers decide the fallback explicitly.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def rows_of(response: Any) -> Sequence[Any]:
    """All rows of a response, or an empty sequence."""
    rows = getattr(response, "rows", None)
    return rows if rows else ()


def row_at(response: Any, index: int = 0) -> Optional[Any]:
    rows = rows_of(response)
    if 0 <= index < len(rows):
        return rows[index]
    return None


def _value_at(values: Any, index: int) -> Optional[str]:
    if not values or not 0 <= index < len(values):
        return None
    value = getattr(values[index], "value", None)
    return value if value not in (None, "") else None


def dimension_value(row: Optional[Any], index: int = 0) -> Optional[str]:
    if row is None:
        return None
    return _value_at(getattr(row, "dimension_values", None), index)


def metric_value(row: Optional[Any], index: int = 0) -> Optional[str]:
    if row is None:
        return None
    return _value_at(getattr(row, "metric_values", None), index)


def parse_count(value: Optional[str]) -> int:
    """Leading base-10 integer (``"12.5"`` gives 12); no digits or negative gives 0."""
    m = _LEADING_INT_RE.match(value) if value is not None else None
    if not m:
        return 0
    n = int(m.group(1), 10)
    return n if n > 0 else 0


def first_metric(response: Any) -> int:
    """Metric 0 of row 0, coerced to a non-negative int."""
    return parse_count(metric_value(row_at(response, 0), 0))
