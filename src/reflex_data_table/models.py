"""Column, configuration, and view models for the data table engine.

Configuration models (``Column``, ``SortConfig``, ``PaginationConfig``, ...)
are what a host passes in on every render.  View models (``CellView``,
``HeaderView``, ``RowView``, ...) are what the engine hands back: plain
dataclasses that can be stored in Reflex state and drawn by the components
in :mod:`reflex_data_table.data_table`.
"""

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, Union

DataItem = Mapping[str, Any]
"""A record with a mandatory unique ``id`` plus arbitrary named fields."""

SortDirection = Literal["asc", "desc"]
Align = Literal["left", "center", "right"]
ButtonVariant = Literal["primary", "secondary", "danger", "warning", "ghost"]
PaginationMode = Literal["client", "server"]
SelectionState = Literal["checked", "indeterminate", "unchecked"]
DisplayState = Literal["loading", "error", "empty", "populated"]
CellKind = Literal["placeholder", "badge", "number", "text", "other"]

DEFAULT_PAGE_SIZE: int = 10
DEFAULT_PAGE_SIZE_OPTIONS: tuple[int, ...] = (10, 25, 50, 100)
DEFAULT_MAX_VISIBLE_PAGES: int = 5


# ---------------------------------------------------------------------------
# View models (engine output)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TableStyle:
    """Presentation flags.  The engine hands them back on the view unchanged."""

    striped: bool = True
    hoverable: bool = True
    bordered: bool = False
    compact: bool = False
    sticky_header: bool = False
    show_row_numbers: bool = False


@dataclass
class CellView:
    """Displayable form of one cell.

    ``title`` carries the full value when ``text`` was truncated, so the
    components can show it as a tooltip.  ``tone`` is a colour hint used by
    badges (``"green"``, ``"gray"``, ...).
    """

    kind: CellKind = "text"
    text: str = ""
    title: str = ""
    tone: str = ""
    align: Align = "left"
    class_name: str = ""


@dataclass
class HeaderView:
    """Displayable form of one column header."""

    key: str
    label: str
    sortable: bool = False
    sort_state: Literal["none", "asc", "desc"] = "none"
    indicator: str = ""
    width: str = ""
    min_width: str = ""
    max_width: str = ""
    align: Align = "left"
    class_name: str = ""
    description: str = ""
    custom: bool = False


@dataclass
class ActionView:
    """One row action button, with its ``disabled`` state resolved for the row."""

    index: int
    label: str
    icon: str = ""
    variant: ButtonVariant = "secondary"
    disabled: bool = False


@dataclass
class BulkActionView:
    """One button of the bulk-action bar."""

    id: str
    label: str
    icon: str = ""
    variant: ButtonVariant = "secondary"
    disabled: bool = False


@dataclass
class RowView:
    """One rendered row of the current window.

    ``index`` is the position inside the visible window (what ``render``
    callbacks and row events receive); ``row_number`` is the 1-based
    position across all pages.
    """

    id: str
    index: int
    row_number: int
    selected: bool = False
    cells: list[CellView] = field(default_factory=list)
    actions: list[ActionView] = field(default_factory=list)
    custom_actions: CellView | None = None


@dataclass
class PageButton:
    """A page-number button or an ellipsis marker in the page control."""

    kind: Literal["page", "ellipsis"]
    page: int = 0
    label: str = ""
    active: bool = False


@dataclass
class PaginationView:
    current_page: int
    total_pages: int
    page_size: int
    total_items: int
    range_start: int
    range_end: int
    summary: str
    has_previous: bool
    has_next: bool
    buttons: list[PageButton] = field(default_factory=list)
    page_size_options: list[int] = field(default_factory=list)


@dataclass
class StatusView:
    """Full-body replacement shown for the loading, error, and empty states."""

    state: DisplayState
    message: str = ""
    detail: str = ""


@dataclass
class TableView:
    """Everything the presentation layer needs to draw one render."""

    display_state: DisplayState
    headers: list[HeaderView]
    rows: list[RowView]
    status: StatusView | None = None
    pagination: PaginationView | None = None
    header_selection: SelectionState = "unchecked"
    search_value: str = ""
    search_placeholder: str = ""
    searchable: bool = False
    selectable: bool = False
    multi_select: bool = False
    has_actions: bool = False
    bulk_actions: list[BulkActionView] = field(default_factory=list)
    selected_count: int = 0
    filtered_count: int = 0
    total_count: int = 0
    style: TableStyle = field(default_factory=TableStyle)
    aria_label: str = ""
    search_aria_label: str = ""


# ---------------------------------------------------------------------------
# Column model
# ---------------------------------------------------------------------------

class CellRenderer(Protocol):
    """Per-column rendering strategy.

    Receives the resolved field value, the whole record, and the row index
    inside the visible window.  May return a :class:`CellView`, a plain
    string (rendered as text), or any other value, which then goes through
    the default type-driven formatting.
    """

    def __call__(self, value: Any, item: DataItem, index: int) -> Any: ...


@dataclass(frozen=True)
class Column:
    """Static description of how to label, sort, and render one field.

    ``key`` is looked up on each record and may be a dotted path into
    nested mappings (``"employee.email"``).  Pass ``accessor`` to read the
    value with a typed function instead.
    """

    key: str
    label: str
    sortable: bool = False
    filterable: bool = False
    width: str | None = None
    min_width: str | None = None
    max_width: str | None = None
    align: Align = "left"
    accessor: Callable[[Any], Any] | None = None
    render: CellRenderer | None = None
    header_render: Callable[["Column"], Any] | None = None
    class_name: str = ""
    header_class_name: str = ""
    description: str | None = None

    def value_of(self, item: Any) -> Any:
        """Return this column's value for *item* (``None`` when missing)."""
        if self.accessor is not None:
            return self.accessor(item)
        return get_field(item, self.key)


def get_field(item: Any, path: str) -> Any:
    """Resolve a (possibly dotted) *path* on a mapping or object.

    Missing keys and attributes resolve to ``None`` so that a column that
    does not exist on some records degrades to the placeholder cell.
    """
    value: Any = item
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def item_id(item: Any) -> Any:
    """Return the identity of a record (its ``id`` field)."""
    if isinstance(item, Mapping):
        return item.get("id")
    return getattr(item, "id", None)


# ---------------------------------------------------------------------------
# Render-time configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SortConfig:
    key: str
    direction: SortDirection = "asc"


@dataclass(frozen=True)
class PaginationConfig:
    """Host-controlled pagination window.

    In ``"client"`` mode the engine slices the filtered records to the
    current page.  In ``"server"`` mode the records are already the page and
    ``total_items`` comes from the backend.

    Raises:
        ValueError: If ``current_page`` or ``page_size`` is below 1, or
            ``total_items`` is negative.
    """

    current_page: int
    page_size: int
    total_items: int
    on_page_change: Callable[[int], Any]
    on_page_size_change: Callable[[int], Any] | None = None
    page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS
    max_visible_pages: int = DEFAULT_MAX_VISIBLE_PAGES
    mode: PaginationMode = "client"

    def __post_init__(self) -> None:
        if self.current_page < 1:
            raise ValueError(f"current_page must be >= 1, got {self.current_page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.total_items < 0:
            raise ValueError(f"total_items must be >= 0, got {self.total_items}")

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)


@dataclass(frozen=True)
class Action:
    """A per-row action button.

    ``disabled`` may be a static flag or a predicate evaluated against each
    row.  Inside a :class:`~reflex_data_table.table_state.DataTableMixin`
    host, ``on_click`` may also be the name of a method on the state class.
    """

    label: str
    on_click: Callable[[Any, int], Any] | str
    icon: str | None = None
    variant: ButtonVariant = "secondary"
    disabled: bool | Callable[[Any], bool] = False

    def is_disabled_for(self, item: Any) -> bool:
        if callable(self.disabled):
            return bool(self.disabled(item))
        return bool(self.disabled)


@dataclass(frozen=True)
class BulkAction:
    """An action of the bulk-action bar, applied to the selected ids."""

    id: str
    label: str
    on_click: Callable[[list[Any]], Any] | str
    icon: str | None = None
    variant: ButtonVariant = "secondary"
    disabled: bool = False


@dataclass(frozen=True)
class ControlledSearch:
    """Search box whose value is owned by the host."""

    value: str
    on_change: Callable[[str], Any]


@dataclass(frozen=True)
class UncontrolledSearch:
    """Search box whose value lives in the table instance.

    ``on_change`` is an optional notification; the table keeps the value
    itself either way.
    """

    initial: str = ""
    on_change: Callable[[str], Any] | None = None


SearchMode = Union[ControlledSearch, UncontrolledSearch]


@dataclass(frozen=True)
class SearchConfig:
    keys: Sequence[str]
    mode: SearchMode = field(default_factory=UncontrolledSearch)
    placeholder: str = "Search..."


@dataclass(frozen=True)
class SelectionConfig:
    selected_items: Sequence[Any]
    on_selection_change: Callable[[list[Any]], Any]
    multi_select: bool = True


@dataclass(frozen=True)
class DisplayOptions:
    """Flags and override renderers for the non-populated display states.

    Each ``render_*`` override may return a :class:`StatusView` or a string
    message.
    """

    loading: bool = False
    error: Any = None
    empty_message: str = "No data available"
    loading_message: str = "Loading..."
    render_loading: Callable[[], Any] | None = None
    render_error: Callable[[Any], Any] | None = None
    render_empty: Callable[[], Any] | None = None


@dataclass(frozen=True)
class TableProps:
    """All inbound configuration for one render of a data table."""

    records: Sequence[Any]
    columns: Sequence[Column]
    sort: SortConfig | None = None
    on_sort: Callable[[str, SortDirection], Any] | None = None
    pagination: PaginationConfig | None = None
    search: SearchConfig | None = None
    selection: SelectionConfig | None = None
    actions: Sequence[Action] = ()
    render_actions: Callable[[Any, int], Any] | None = None
    bulk_actions: Sequence[BulkAction] = ()
    display: DisplayOptions = field(default_factory=DisplayOptions)
    style: TableStyle = field(default_factory=TableStyle)
    on_row_click: Callable[[Any, int], Any] | None = None
    on_row_double_click: Callable[[Any, int], Any] | None = None
    aria_label: str = "Data table"
    search_aria_label: str = "Search table"
