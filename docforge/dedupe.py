"""
Duplicate Row Detection

Finds rows that repeat an earlier row under a chosen criterion and either
drops them or flags them for highlighting. Works on plain in-memory tables
(a list of rows, each a list of cell values); reading and writing
spreadsheets is left to the spreadsheet converter.
"""

import json
from datetime import date, time, timedelta
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union


class InvalidPolicy(Exception):
    """Raised when a duplicate policy names an unknown criterion or action."""
    pass


class Criterion(Enum):
    """How a comparison key is derived from a row."""
    FULL_ROW = "row"
    FIRST_COLUMN = "col1"


class Action(Enum):
    """What to do with rows judged to be duplicates."""
    REMOVE = "remove"
    HIGHLIGHT = "highlight"


@dataclass(frozen=True)
class HighlightStyle:
    """Cell styling applied to every cell of a highlighted row."""
    fill_color: str = "FFFF00"  # yellow
    border_color: str = "000000"
    border_style: str = "thin"
    font_color: str = "000000"
    bold: bool = False


DEFAULT_HIGHLIGHT = HighlightStyle()


@dataclass(frozen=True)
class DuplicatePolicy:
    """Criterion plus action for a duplicate pass."""
    criterion: Criterion = Criterion.FULL_ROW
    action: Action = Action.REMOVE

    @classmethod
    def from_options(
        cls,
        criterion: Union[Criterion, str] = Criterion.FULL_ROW,
        action: Union[Action, str] = Action.REMOVE,
    ) -> "DuplicatePolicy":
        """
        Build a policy from enum members or their wire values.

        Raises:
            InvalidPolicy: If either value is not recognized.
        """
        return cls(
            criterion=_coerce(Criterion, criterion, "criterion"),
            action=_coerce(Action, action, "action"),
        )


@dataclass
class Table:
    """
    Rows produced by a duplicate pass.

    ``highlights`` maps an output row index to the style it should be
    rendered with. ``duplicates`` holds the input indices judged to be
    repeats, whether or not they were removed or highlighted.
    """
    rows: list[list] = field(default_factory=list)
    highlights: dict[int, HighlightStyle] = field(default_factory=dict)
    duplicates: tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)


def row_key(row: Sequence, criterion: Criterion) -> str:
    """
    Compute the comparison key of a row.

    An empty string means the row has nothing to compare and can never be
    a duplicate.
    """
    if criterion is Criterion.FULL_ROW:
        values = [_plain(cell) for cell in row]
        while values and values[-1] == "":
            values.pop()
        if not values:
            return ""
        return json.dumps(values, ensure_ascii=False, separators=(",", ":"), default=_typed)

    if criterion is Criterion.FIRST_COLUMN:
        if not row:
            return ""
        return str(_plain(row[0])).strip().lower()

    raise InvalidPolicy(f"Unknown duplicate criterion: {criterion!r}")


def find_duplicates(rows: Sequence[Sequence], criterion: Criterion) -> list[int]:
    """Return the indices of rows whose key already appeared earlier."""
    seen = set()
    duplicates = []
    for i, row in enumerate(rows):
        key = row_key(row, criterion)
        if not key:
            continue
        if key in seen:
            duplicates.append(i)
        else:
            seen.add(key)
    return duplicates


def detect(
    rows: Sequence[Sequence],
    policy: DuplicatePolicy,
    style: Optional[HighlightStyle] = None,
) -> Table:
    """
    Remove or highlight duplicate rows.

    The header row (index 0) takes part in key tracking but is never
    highlighted. The input is left untouched; the returned table holds
    copies of the rows.

    Args:
        rows: Table rows, header first. Rows may differ in length.
        policy: Criterion and action to apply.
        style: Highlight styling (defaults to yellow fill, thin black border).

    Returns:
        A new Table.

    Raises:
        InvalidPolicy: If the policy holds an unknown criterion or action.
    """
    if not isinstance(policy.criterion, Criterion):
        raise InvalidPolicy(f"Unknown duplicate criterion: {policy.criterion!r}")
    if not isinstance(policy.action, Action):
        raise InvalidPolicy(f"Unknown duplicate action: {policy.action!r}")

    if not rows:
        return Table()

    duplicates = find_duplicates(rows, policy.criterion)
    dup_set = set(duplicates)

    if policy.action is Action.REMOVE:
        kept = [list(row) for i, row in enumerate(rows) if i not in dup_set]
        return Table(rows=kept, duplicates=tuple(duplicates))

    style = style or DEFAULT_HIGHLIGHT
    highlights = {i: style for i in duplicates if i != 0}
    return Table(
        rows=[list(row) for row in rows],
        highlights=highlights,
        duplicates=tuple(duplicates),
    )


def _plain(value):
    """Normalize a cell value for key comparison."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _typed(value) -> dict:
    """Key form of a non-JSON cell value (dates, times) tagged with its type."""
    if isinstance(value, timedelta):
        return {"t": "timedelta", "v": value.total_seconds()}
    if isinstance(value, (date, time)):
        return {"t": type(value).__name__, "v": value.isoformat()}
    return {"t": type(value).__name__, "v": str(value)}


def _coerce(enum_cls, value, label: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            pass
    raise InvalidPolicy(f"Unknown duplicate {label}: {value!r}")
