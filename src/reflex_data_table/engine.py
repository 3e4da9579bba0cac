"""Pure view computation for the data table.

One render applies, in this order: search filter -> sort display (header
indicators) -> pagination window -> row/cell/action rendering.  The
functions below are the individual steps; :class:`DataTable` composes them,
memoizes each derived view on its own inputs, and turns user interactions
into host callbacks.

Nothing here performs I/O or mutates its inputs.  Sorting the data and
tracking the current page are host responsibilities; the engine only emits
the corresponding intents (``on_sort``, ``on_page_change``, ...).
"""

import math
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from reflex_data_table.cells import (
    coerce_cell,
    render_actions,
    render_cell,
    render_header,
    stringify_value,
)
from reflex_data_table.models import (
    BulkActionView,
    Column,
    ControlledSearch,
    DisplayOptions,
    HeaderView,
    PageButton,
    PaginationConfig,
    PaginationView,
    RowView,
    SelectionState,
    SortConfig,
    StatusView,
    TableProps,
    TableView,
    get_field,
    item_id,
)

T = TypeVar("T")

DEFAULT_COLUMN_WIDTH: str = "150px"

# Ordered (substrings, width) rules -- the first rule with a substring
# contained in the lower-cased column key wins.
COLUMN_WIDTH_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("date", "created", "updated", "time"), "140px"),
    (("email",), "220px"),
    (("name",), "180px"),
    (("status", "type"), "120px"),
    (("amount", "salary", "price", "total"), "120px"),
    (("id",), "80px"),
)


# ---------------------------------------------------------------------------
# Search / filter
# ---------------------------------------------------------------------------

def filter_records(
    records: Sequence[Any],
    query: str,
    search_keys: Sequence[str],
) -> Sequence[Any]:
    """Return the records where any of *search_keys* contains *query*.

    Matching is case-insensitive on the string form of each field (see
    :func:`~reflex_data_table.cells.stringify_value`); missing or ``None``
    fields never match.  The query is stripped first.

    Args:
        records: The records given to this render.
        query: Free-text search query.
        search_keys: Field keys (dotted paths allowed) to search in.

    Returns:
        *records* itself when the query or the key list is empty, otherwise
        a new list with the matching records in their original order.
    """
    needle = (query or "").strip().lower()
    if not needle or not search_keys:
        return records
    return [
        item
        for item in records
        if any(needle in stringify_value(get_field(item, key)).lower() for key in search_keys)
    ]


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def next_sort(current: SortConfig | None, key: str) -> SortConfig:
    """Compute the sort that a click on column *key* requests.

    The same column flips between ascending and descending; any other
    column (or no active sort) starts at ascending.
    """
    if current is not None and current.key == key:
        return SortConfig(key, "desc" if current.direction == "asc" else "asc")
    return SortConfig(key, "asc")


def _sort_key(value: Any) -> tuple[int, Any, str]:
    if isinstance(value, (bool, int, float)):
        return (0, value, "")
    if isinstance(value, str):
        return (1, 0, value.lower())
    return (2, 0, stringify_value(value))


def sort_records(records: Sequence[Any], sort: SortConfig | None) -> list[Any]:
    """Sort records in memory on behalf of a host.

    Numbers sort before strings (case-insensitive), which sort before
    anything else.  Records whose sort field is missing stay at the end in
    both directions.
    """
    if sort is None:
        return list(records)
    present = [item for item in records if get_field(item, sort.key) is not None]
    missing = [item for item in records if get_field(item, sort.key) is None]
    present.sort(
        key=lambda item: _sort_key(get_field(item, sort.key)),
        reverse=sort.direction == "desc",
    )
    return present + missing


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def total_pages(total_items: int, page_size: int) -> int:
    return math.ceil(total_items / page_size)


def paginate_records(
    records: Sequence[Any],
    current_page: int,
    page_size: int,
) -> list[Any]:
    """Return the ``(current_page, page_size)`` window of *records*."""
    start = (current_page - 1) * page_size
    return list(records[start:start + page_size])


def page_buttons(
    current_page: int,
    pages: int,
    max_visible: int = 5,
) -> list[PageButton]:
    """Build the page-number run for the page control.

    A run of at most *max_visible* pages is centred on *current_page*.  When
    the run does not reach the first/last page, a shortcut to that page is
    added, separated by an ellipsis marker if pages are skipped::

        page_buttons(5, 10) -> 1 … 3 4 [5] 6 7 … 10
    """
    if pages <= 0:
        return []
    max_visible = max(1, max_visible)
    start = max(1, min(current_page - max_visible // 2, pages - max_visible + 1))
    end = min(pages, start + max_visible - 1)

    def page(number: int) -> PageButton:
        return PageButton(
            kind="page",
            page=number,
            label=str(number),
            active=number == current_page,
        )

    buttons: list[PageButton] = []
    if start > 1:
        buttons.append(page(1))
        if start > 2:
            buttons.append(PageButton(kind="ellipsis", label="…"))
    buttons.extend(page(number) for number in range(start, end + 1))
    if end < pages:
        if end < pages - 1:
            buttons.append(PageButton(kind="ellipsis", label="…"))
        buttons.append(page(pages))
    return buttons


def page_range(current_page: int, page_size: int, total_items: int) -> tuple[int, int]:
    """1-based ``(start, end)`` of the records shown on *current_page*; ``(0, 0)`` when empty."""
    if not total_items:
        return 0, 0
    return (current_page - 1) * page_size + 1, min(current_page * page_size, total_items)


def range_summary(current_page: int, page_size: int, total_items: int) -> str:
    start, end = page_range(current_page, page_size, total_items)
    return f"Showing {start:,} to {end:,} of {total_items:,} results"


def build_pagination_view(pagination: PaginationConfig) -> PaginationView | None:
    """Build the page control, or ``None`` when there is at most one page.

    The range summary and the page-size choices stay meaningful with a
    single page; hosts get them from :func:`range_summary` in that case.
    """
    pages = pagination.total_pages
    if pages <= 1:
        return None

    current = pagination.current_page
    size = pagination.page_size
    total = pagination.total_items
    range_start, range_end = page_range(current, size, total)
    return PaginationView(
        current_page=current,
        total_pages=pages,
        page_size=size,
        total_items=total,
        range_start=range_start,
        range_end=range_end,
        summary=range_summary(current, size, total),
        has_previous=current > 1,
        has_next=current < pages,
        buttons=page_buttons(current, pages, pagination.max_visible_pages),
        page_size_options=list(pagination.page_size_options),
    )


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def _ids(items: Sequence[Any]) -> set[Any]:
    return {item_id(item) for item in items}


def toggle_selection(
    selected: Sequence[Any],
    item: Any,
    multi_select: bool,
) -> list[Any]:
    """Return the selection after toggling *item*.

    Multi-select toggles membership.  Single-select replaces the selection
    with *item*, or clears it when *item* was the selected record.
    """
    target = item_id(item)
    already = any(item_id(existing) == target for existing in selected)
    if not multi_select:
        return [] if already else [item]
    if already:
        return [existing for existing in selected if item_id(existing) != target]
    return [*selected, item]


def header_selection_state(
    selected: Sequence[Any],
    visible: Sequence[Any],
) -> SelectionState:
    """Tri-state of the "select all" checkbox for the visible window."""
    if not visible:
        return "unchecked"
    selected_ids = _ids(selected)
    count = sum(1 for item in visible if item_id(item) in selected_ids)
    if count == 0:
        return "unchecked"
    if count == len(visible):
        return "checked"
    return "indeterminate"


def toggle_visible_selection(
    selected: Sequence[Any],
    visible: Sequence[Any],
) -> list[Any]:
    """Apply "select all" to the visible window only.

    When every visible record is selected they are all removed; otherwise
    the missing visible records are added.  Selected records outside the
    window are kept as they are.
    """
    if header_selection_state(selected, visible) == "checked":
        visible_ids = _ids(visible)
        return [item for item in selected if item_id(item) not in visible_ids]
    selected_ids = _ids(selected)
    return [*selected, *(item for item in visible if item_id(item) not in selected_ids)]


# ---------------------------------------------------------------------------
# Display state
# ---------------------------------------------------------------------------

def resolve_display_state(loading: bool, error: Any, filtered_count: int) -> str:
    """Pick the body presentation: ``error`` > ``loading`` > ``empty`` > ``populated``."""
    if error is not None and error != "":
        return "error"
    if loading:
        return "loading"
    if filtered_count == 0:
        return "empty"
    return "populated"


def _coerce_status(state: str, result: Any) -> StatusView:
    if isinstance(result, StatusView):
        return result
    return StatusView(state=state, message=str(result))  # type: ignore[arg-type]


def build_status_view(state: str, display: DisplayOptions) -> StatusView | None:
    """Return the full-body replacement for *state* (``None`` when populated)."""
    if state == "error":
        if display.render_error is not None:
            return _coerce_status(state, display.render_error(display.error))
        return StatusView(state="error", message=str(display.error))
    if state == "loading":
        if display.render_loading is not None:
            return _coerce_status(state, display.render_loading())
        return StatusView(state="loading", message=display.loading_message)
    if state == "empty":
        if display.render_empty is not None:
            return _coerce_status(state, display.render_empty())
        return StatusView(state="empty", message=display.empty_message)
    return None


# ---------------------------------------------------------------------------
# Width heuristic
# ---------------------------------------------------------------------------

def infer_column_width(column: Column) -> str:
    """Return the column's explicit width or a default inferred from its key."""
    if column.width:
        return column.width
    key = column.key.lower()
    for patterns, width in COLUMN_WIDTH_RULES:
        if any(pattern in key for pattern in patterns):
            return width
    return DEFAULT_COLUMN_WIDTH


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

_VALUE_TYPES = (str, int, float, bool, type(None), tuple, frozenset, SortConfig)


def _same(a: Any, b: Any) -> bool:
    if a is b:
        return True
    return isinstance(a, _VALUE_TYPES) and type(a) is type(b) and a == b


class _Memo:
    """Single-slot memo: recompute only when a dependency changed.

    Scalars (and tuples/``SortConfig``) compare by value, everything else
    by identity.
    """

    def __init__(self) -> None:
        self._deps: tuple[Any, ...] | None = None
        self._value: Any = None

    def get(self, deps: tuple[Any, ...], compute: Callable[[], T]) -> T:
        if self._deps is not None and len(self._deps) == len(deps) and all(
            _same(old, new) for old, new in zip(self._deps, deps)
        ):
            return self._value
        self._value = compute()
        self._deps = deps
        return self._value


def _check_unique_keys(columns: Sequence[Column]) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for column in columns:
        if column.key in seen:
            duplicates.append(column.key)
        seen.add(column.key)
    if duplicates:
        raise ValueError(f"Duplicate column keys: {', '.join(duplicates)}")


class DataTable:
    """One data table instance.

    All configuration arrives through :class:`TableProps` on every call.
    The instance only keeps memoized derived views and, when the host uses
    :class:`~reflex_data_table.models.UncontrolledSearch`, the current text
    of the search box.

    Interaction methods (``click_header``, ``toggle_row``, ...) compute the
    resulting intent and invoke the matching host callback.  They return
    whatever the callback returned, or ``None`` when nothing was emitted.
    Exceptions raised by callbacks propagate unchanged.

    Example::

        table = DataTable()
        view = table.render(props)
        table.click_header(props, "created_at")  # -> props.on_sort(...)
    """

    def __init__(self) -> None:
        self._search_value: str | None = None
        self._filtered = _Memo()
        self._window = _Memo()
        self._headers = _Memo()
        self._rows = _Memo()
        self._tri_state = _Memo()

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def search_value(self, props: TableProps) -> str:
        """Current search text (controlled value or instance-local value)."""
        search = props.search
        if search is None:
            return ""
        if isinstance(search.mode, ControlledSearch):
            return search.mode.value
        if self._search_value is None:
            self._search_value = search.mode.initial
        return self._search_value

    def filtered_records(self, props: TableProps) -> Sequence[Any]:
        query = self.search_value(props)
        keys = tuple(props.search.keys) if props.search is not None else ()
        return self._filtered.get(
            (props.records, query, keys),
            lambda: filter_records(props.records, query, keys),
        )

    def visible_records(self, props: TableProps) -> Sequence[Any]:
        """The current window: filtered records, sliced in client pagination."""
        filtered = self.filtered_records(props)
        pagination = props.pagination
        if pagination is None or pagination.mode == "server":
            return filtered
        return self._window.get(
            (filtered, pagination.current_page, pagination.page_size),
            lambda: paginate_records(filtered, pagination.current_page, pagination.page_size),
        )

    def header_selection(self, props: TableProps) -> SelectionState:
        selection = props.selection
        if selection is None or not selection.multi_select:
            return "unchecked"
        visible = self.visible_records(props)
        return self._tri_state.get(
            (selection.selected_items, visible),
            lambda: header_selection_state(selection.selected_items, visible),
        )

    def render(self, props: TableProps) -> TableView:
        """Compute the complete view for one render.

        Raises:
            ValueError: If two columns share the same key.
        """
        _check_unique_keys(props.columns)

        filtered = self.filtered_records(props)
        headers: list[HeaderView] = self._headers.get(
            (props.columns, props.sort),
            lambda: [
                render_header(column, props.sort, infer_column_width(column))
                for column in props.columns
            ],
        )
        visible = self.visible_records(props)
        display = props.display
        state = resolve_display_state(display.loading, display.error, len(filtered))

        rows: list[RowView] = []
        if state == "populated":
            offset = self._row_offset(props)
            selected = props.selection.selected_items if props.selection is not None else ()
            rows = self._rows.get(
                (visible, props.columns, selected, props.actions, props.render_actions, offset),
                lambda: self._build_rows(props, visible, offset),
            )

        search = props.search
        selection = props.selection
        return TableView(
            display_state=state,  # type: ignore[arg-type]
            headers=headers,
            rows=rows,
            status=build_status_view(state, display),
            pagination=build_pagination_view(props.pagination) if props.pagination else None,
            header_selection=self.header_selection(props),
            search_value=self.search_value(props),
            search_placeholder=search.placeholder if search is not None else "",
            searchable=search is not None,
            selectable=selection is not None,
            multi_select=selection is not None and selection.multi_select,
            has_actions=bool(props.actions) or props.render_actions is not None,
            bulk_actions=self.bulk_action_views(props),
            selected_count=len(selection.selected_items) if selection is not None else 0,
            filtered_count=len(filtered),
            total_count=len(props.records),
            style=props.style,
            aria_label=props.aria_label,
            search_aria_label=props.search_aria_label,
        )

    def _row_offset(self, props: TableProps) -> int:
        pagination = props.pagination
        if pagination is None:
            return 0
        return (pagination.current_page - 1) * pagination.page_size

    def _build_rows(
        self,
        props: TableProps,
        visible: Sequence[Any],
        offset: int,
    ) -> list[RowView]:
        selected_ids = _ids(props.selection.selected_items) if props.selection is not None else set()
        rows: list[RowView] = []
        for index, item in enumerate(visible):
            identity = item_id(item)
            row = RowView(
                id=str(identity),
                index=index,
                row_number=offset + index + 1,
                selected=identity in selected_ids,
                cells=[render_cell(column, item, index) for column in props.columns],
            )
            if props.render_actions is not None:
                row.custom_actions = coerce_cell(props.render_actions(item, index))
            elif props.actions:
                row.actions = render_actions(props.actions, item)
            rows.append(row)
        return rows

    def _visible_item(self, props: TableProps, index: int) -> Any:
        visible = self.visible_records(props)
        if 0 <= index < len(visible):
            return visible[index]
        return None

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def click_header(self, props: TableProps, key: str) -> Any:
        """Emit ``on_sort`` with the next sort for a sortable column."""
        column = next((c for c in props.columns if c.key == key), None)
        if column is None or not column.sortable or props.on_sort is None:
            return None
        sort = next_sort(props.sort, key)
        return props.on_sort(sort.key, sort.direction)

    def change_search(self, props: TableProps, value: str) -> Any:
        """Handle an edit of the search box."""
        search = props.search
        if search is None:
            return None
        mode = search.mode
        if isinstance(mode, ControlledSearch):
            return mode.on_change(value)
        self._search_value = value
        if mode.on_change is not None:
            return mode.on_change(value)
        return None

    def click_page(self, props: TableProps, page: int) -> Any:
        """Emit ``on_page_change`` for a valid page other than the current one."""
        pagination = props.pagination
        if pagination is None:
            return None
        if page < 1 or page > pagination.total_pages or page == pagination.current_page:
            return None
        return pagination.on_page_change(page)

    def change_page_size(self, props: TableProps, size: int) -> Any:
        pagination = props.pagination
        if pagination is None or pagination.on_page_size_change is None:
            return None
        if size < 1 or size == pagination.page_size:
            return None
        return pagination.on_page_size_change(size)

    def toggle_row(self, props: TableProps, index: int) -> Any:
        """Toggle the selection of the row at *index* of the visible window.

        Never triggers ``on_row_click``.
        """
        selection = props.selection
        if selection is None:
            return None
        item = self._visible_item(props, index)
        if item is None:
            return None
        return selection.on_selection_change(
            toggle_selection(selection.selected_items, item, selection.multi_select)
        )

    def toggle_all(self, props: TableProps) -> Any:
        """Select or deselect the whole visible window (multi-select only)."""
        selection = props.selection
        if selection is None or not selection.multi_select:
            return None
        visible = self.visible_records(props)
        return selection.on_selection_change(
            toggle_visible_selection(selection.selected_items, visible)
        )

    def click_row(self, props: TableProps, index: int) -> Any:
        item = self._visible_item(props, index)
        if item is None or props.on_row_click is None:
            return None
        return props.on_row_click(item, index)

    def double_click_row(self, props: TableProps, index: int) -> Any:
        item = self._visible_item(props, index)
        if item is None or props.on_row_double_click is None:
            return None
        return props.on_row_double_click(item, index)

    def click_action(self, props: TableProps, action_index: int, index: int) -> Any:
        """Run row action *action_index* on the row at *index* unless disabled."""
        if not 0 <= action_index < len(props.actions):
            return None
        item = self._visible_item(props, index)
        if item is None:
            return None
        action = props.actions[action_index]
        if action.is_disabled_for(item):
            return None
        if isinstance(action.on_click, str):
            raise TypeError(
                f"Action {action.label!r} names host method {action.on_click!r}; "
                "bind it to a callable before rendering."
            )
        return action.on_click(item, index)

    def click_bulk_action(self, props: TableProps, action_id: str) -> Any:
        """Run bulk action *action_id* on the ids of the selected records.

        Nothing is emitted for a disabled action or an empty selection.
        """
        action = next((a for a in props.bulk_actions if a.id == action_id), None)
        selection = props.selection
        if action is None or action.disabled or selection is None:
            return None
        if not selection.selected_items:
            return None
        if isinstance(action.on_click, str):
            raise TypeError(
                f"Bulk action {action.id!r} names host method {action.on_click!r}; "
                "bind it to a callable before rendering."
            )
        return action.on_click([item_id(item) for item in selection.selected_items])

    def bulk_action_views(self, props: TableProps) -> list[BulkActionView]:
        """Buttons for the bulk-action bar, disabled while nothing is selected."""
        nothing_selected = props.selection is None or not props.selection.selected_items
        return [
            BulkActionView(
                id=action.id,
                label=action.label,
                icon=action.icon or "",
                variant=action.variant,
                disabled=action.disabled or nothing_selected,
            )
            for action in props.bulk_actions
        ]
