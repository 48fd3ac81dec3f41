"""Output modes for select() and the shaping of cursor results into them."""

from dataclasses import dataclass
from typing import Any, Dict, List, Union

from sqlalchemy.engine import CursorResult


@dataclass(frozen=True)
class Build:
    """Return the compiled statement without executing it."""


@dataclass(frozen=True)
class Prepare:
    """Return a prepared statement handle without executing it."""


@dataclass(frozen=True)
class Indexed:
    """Return every row in a dict keyed by the value of `field`."""
    field: str


@dataclass(frozen=True)
class Scalar:
    """Return the value of `field` in the first row, or None."""
    field: str


@dataclass(frozen=True)
class Rows:
    """Return every row as a list of dicts."""


OutputMode = Union[Build, Prepare, Indexed, Scalar, Rows]


def shape(result: CursorResult, mode: OutputMode) -> Any:
    """Consume `result` according to an executing output mode."""
    if isinstance(mode, Indexed):
        return fetch_indexed(result, mode.field)
    if isinstance(mode, Scalar):
        return fetch_value(result, mode.field)
    if isinstance(mode, Rows):
        return fetch_rows(result)
    raise TypeError(f'{type(mode).__name__} does not consume a result')


def fetch_rows(result: CursorResult) -> List[Dict[str, Any]]:
    return [dict(row) for row in result.mappings().all()]


def fetch_indexed(result: CursorResult, field: str) -> Dict[Any, Dict[str, Any]]:
    """Key rows by `field`; a later row with the same key replaces an earlier one."""
    indexed = {}
    for row in result.mappings():
        indexed[row[field]] = dict(row)
    return indexed


def fetch_value(result: CursorResult, field: str) -> Any:
    row = result.mappings().first()
    if row is None:
        return None
    return row.get(field)
