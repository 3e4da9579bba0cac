"""Cell, header, and action rendering for the data table engine.

Raw field values are classified once into a small tagged union
(:class:`NullValue`, :class:`BoolValue`, :class:`NumberValue`,
:class:`TextValue`, :class:`OtherValue`) and then formatted in a fixed
order.  A column's own ``render`` / ``header_render`` always takes
precedence over the defaults here.
"""

import datetime
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Union

from reflex_data_table.models import (
    Action,
    ActionView,
    CellView,
    Column,
    HeaderView,
    SortConfig,
)

PLACEHOLDER_GLYPH: str = "—"
ELLIPSIS: str = "..."
TEXT_TRUNCATE_LENGTH: int = 50
OTHER_TRUNCATE_LENGTH: int = 30
BOOLEAN_LABELS: tuple[str, str] = ("Yes", "No")

SORT_INDICATORS: dict[str, str] = {
    "none": "↕",
    "asc": "↑",
    "desc": "↓",
}


# ---------------------------------------------------------------------------
# Value classification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NullValue:
    pass


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class NumberValue:
    value: int | float


@dataclass(frozen=True)
class TextValue:
    value: str


@dataclass(frozen=True)
class OtherValue:
    value: Any


CellValue = Union[NullValue, BoolValue, NumberValue, TextValue, OtherValue]


def classify_value(value: Any) -> CellValue:
    """Classify a raw field value for default formatting.

    ``bool`` is checked before numbers since it is a subclass of ``int``.
    """
    if value is None:
        return NullValue()
    if isinstance(value, bool):
        return BoolValue(value)
    if isinstance(value, (int, float)):
        return NumberValue(value)
    if isinstance(value, str):
        return TextValue(value)
    return OtherValue(value)


# ---------------------------------------------------------------------------
# Stringification
# ---------------------------------------------------------------------------

def format_number(value: int | float) -> str:
    """Format a number with thousands separators.

    Floats keep at most three fraction digits, without trailing zeros::

        1234567   -> "1,234,567"
        1234.5    -> "1,234.5"
        2.0       -> "2"
    """
    if isinstance(value, int):
        return f"{value:,}"
    text = f"{value:,.3f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def stringify_value(value: Any) -> str:
    """Return the plain string form of *value* used for search and display.

    ``None`` becomes ``""``, booleans become ``"true"``/``"false"``,
    mappings and sequences are compact JSON (``["a","b"]``, the same text
    :func:`~reflex_data_table.polars_utils.apply_search` matches against in
    server mode), dates use ISO-8601.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, Mapping) or (
        isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray))
    ):
        return json.dumps(value, default=str, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def truncate_text(text: str, limit: int) -> tuple[str, str]:
    """Truncate *text* to *limit* characters.

    Returns:
        A ``(display, title)`` tuple.  ``title`` holds the full text when it
        was truncated and is empty otherwise.
    """
    if len(text) <= limit:
        return text, ""
    return text[:limit] + ELLIPSIS, text


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

def format_value(value: Any) -> CellView:
    """Default, type-driven formatting of a raw field value."""
    classified = classify_value(value)

    if isinstance(classified, NullValue):
        return CellView(kind="placeholder", text=PLACEHOLDER_GLYPH)

    if isinstance(classified, BoolValue):
        yes, no = BOOLEAN_LABELS
        if classified.value:
            return CellView(kind="badge", text=yes, tone="green")
        return CellView(kind="badge", text=no, tone="gray")

    if isinstance(classified, NumberValue):
        return CellView(kind="number", text=format_number(classified.value))

    if isinstance(classified, TextValue):
        display, title = truncate_text(classified.value, TEXT_TRUNCATE_LENGTH)
        return CellView(kind="text", text=display, title=title)

    display, title = truncate_text(stringify_value(classified.value), OTHER_TRUNCATE_LENGTH)
    return CellView(kind="other", text=display, title=title)


def coerce_cell(result: Any) -> CellView:
    """Turn the return value of a custom renderer into a :class:`CellView`."""
    if isinstance(result, CellView):
        return result
    if isinstance(result, str):
        return CellView(kind="text", text=result)
    return format_value(result)


def render_cell(column: Column, item: Any, index: int) -> CellView:
    """Render one ``(item, column)`` pair.

    A column ``render`` is authoritative and receives
    ``(value, item, index)``; otherwise the default formatting applies.
    Column alignment and class name are carried onto the result unless the
    renderer set its own.
    """
    value = column.value_of(item)
    if column.render is not None:
        cell = coerce_cell(column.render(value, item, index))
    else:
        cell = format_value(value)

    updates: dict[str, Any] = {}
    if cell.align == "left" and column.align != "left":
        updates["align"] = column.align
    if not cell.class_name and column.class_name:
        updates["class_name"] = column.class_name
    return replace(cell, **updates) if updates else cell


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------

def sort_state_for(key: str, sort: SortConfig | None) -> str:
    """Return ``"asc"``, ``"desc"``, or ``"none"`` for the column *key*."""
    if sort is None or sort.key != key:
        return "none"
    return sort.direction


def render_header(column: Column, sort: SortConfig | None, width: str) -> HeaderView:
    """Render a column header.

    Defaults to the label plus a sort indicator (sortable columns only).  A
    ``header_render`` replaces the label and indicator entirely; it may
    return a :class:`HeaderView` or a string.
    """
    state = sort_state_for(column.key, sort) if column.sortable else "none"
    base = HeaderView(
        key=column.key,
        label=column.label,
        sortable=column.sortable,
        sort_state=state,  # type: ignore[arg-type]
        indicator=SORT_INDICATORS[state] if column.sortable else "",
        width=width,
        min_width=column.min_width or "",
        max_width=column.max_width or "",
        align=column.align,
        class_name=column.header_class_name,
        description=column.description or "",
    )
    if column.header_render is None:
        return base

    custom = column.header_render(column)
    if isinstance(custom, HeaderView):
        return custom
    return replace(base, label=str(custom), indicator="", custom=True)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def render_actions(actions: Sequence[Action], item: Any) -> list[ActionView]:
    """Build the action buttons for one row, resolving ``disabled`` per row."""
    return [
        ActionView(
            index=i,
            label=action.label,
            icon=action.icon or "",
            variant=action.variant,
            disabled=action.is_disabled_for(item),
        )
        for i, action in enumerate(actions)
    ]
