"""Reusable Reflex state mixin that hosts a data table.

:class:`DataTableMixin` owns the authoritative table state (search text,
sort, page, selection) in ``dt_*`` vars and routes every user interaction
through :class:`~reflex_data_table.engine.DataTable`.  The engine's view
models are exposed as computed vars that the components in
:mod:`reflex_data_table.data_table` draw.

Two data modes are supported:

* **client** -- :meth:`DataTableMixin.set_table_records` with a list of
  records.  The mixin sorts them in memory; the engine filters and slices
  the page.
* **server** -- :meth:`DataTableMixin.set_table_lazyframe` with a polars
  LazyFrame.  Search, count, sort and slicing run as lazy polars queries and
  only the current page is ever collected.

Typical usage::

    from reflex_data_table import Column, DataTableMixin, data_table

    class LeaveLogState(DataTableMixin, rx.State):
        def load(self):
            self.set_table_records(fetch_leave_logs(), COLUMNS, search_keys=["employee_name"])

    def index():
        return rx.cond(LeaveLogState.dt_loaded, data_table(LeaveLogState))
"""

import math
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any

import polars as pl
import reflex as rx

from reflex_data_table.engine import DataTable, range_summary, sort_records
from reflex_data_table.models import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PAGE_SIZE_OPTIONS,
    Action,
    BulkAction,
    BulkActionView,
    Column,
    ControlledSearch,
    DisplayOptions,
    HeaderView,
    PageButton,
    PaginationConfig,
    RowView,
    SearchConfig,
    SelectionConfig,
    SortConfig,
    TableProps,
    TableView,
)
from reflex_data_table.polars_utils import (
    apply_search,
    apply_sort_config,
    build_columns_from_schema,
    collect_page,
    columns_from_records,
    count_rows,
    string_columns,
)

_DEFAULT_SELECTED_INFO: str = "Click a row to see details."


# ---------------------------------------------------------------------------
# Module-level configuration registry
# ---------------------------------------------------------------------------

class _TableConfig:
    """Holds the non-serialisable table configuration outside Reflex state.

    Columns carry render callables, actions carry click callbacks, and a
    LazyFrame cannot be JSON-encoded, so none of them can live inside
    ``rx.State``.  They are stored in a module-level registry keyed by the
    state class name instead.
    """

    def __init__(self) -> None:
        self.engine = DataTable()
        self.columns: list[Column] = []
        self.search_keys: list[str] = []
        self.search_placeholder: str = "Search..."
        self.actions: list[Action] = []
        self.bulk_actions: list[BulkAction] = []
        # Same lists with string handlers resolved, built once per configure.
        self.bound_actions: list[Action] = []
        self.bound_bulk_actions: list[BulkAction] = []
        self.selectable: bool = True
        self.multi_select: bool = True
        self.page_size_options: tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS
        self.empty_message: str = "No data available"
        self.loading_message: str = "Loading..."
        self.row_click_handler: str | None = None
        self.row_double_click_handler: str | None = None
        # Server mode only.
        self.lf: pl.LazyFrame | None = None
        self.schema: pl.Schema | None = None
        self.id_field: str | None = None


_config_registry: dict[str, _TableConfig] = {}


def _get_config(config_id: str) -> _TableConfig:
    """Return (or create) the configuration entry for *config_id*."""
    if config_id not in _config_registry:
        _config_registry[config_id] = _TableConfig()
    return _config_registry[config_id]


def _plain(item: Any) -> Any:
    """Shallow-copy a record so it can be passed on as an event argument."""
    return dict(item) if isinstance(item, Mapping) else item


def _unwrap(value: Any) -> Any:
    """Return the list behind Reflex's change-tracking proxy.

    Every read of a mutable state var yields a fresh proxy, and the engine
    memoizes on the identity of the record lists.
    """
    return getattr(value, "__wrapped__", value)


# ---------------------------------------------------------------------------
# DataTableMixin
# ---------------------------------------------------------------------------

class DataTableMixin(rx.State, mixin=True):
    """Reflex State mixin for a searchable, sortable, paginated data table.

    This is a Reflex **mixin** (``mixin=True``): every concrete subclass
    gets its own independent set of ``dt_*`` vars, so several tables on the
    same page do not interfere with each other.

    .. important::

       Subclasses **must** also inherit from ``rx.State`` (or another
       non-mixin state class)::

           class AttendanceState(DataTableMixin, rx.State):
               ...

    Action, bulk-action and row-click handlers may be given as the *name*
    of an event handler on the subclass.  Row handlers receive
    ``(item, index)``, bulk handlers receive the list of selected ids; they
    are dispatched as chained Reflex events.

    All state variable names are prefixed with ``dt_`` to avoid collisions
    when composed with other state.
    """

    # -- Frontend state vars --
    dt_search: str = ""
    dt_sort_key: str = ""
    dt_sort_direction: str = "asc"
    dt_page: int = 1
    dt_page_size: int = DEFAULT_PAGE_SIZE
    dt_total_items: int = 0
    dt_loading: bool = False
    dt_error: str = ""
    dt_loaded: bool = False
    dt_stats: str = ""
    dt_selected_info: str = _DEFAULT_SELECTED_INFO

    # -- Backend-only vars (not sent to frontend) --
    _dt_source: list[dict[str, Any]] = []
    _dt_records: list[dict[str, Any]] = []
    _dt_selected: list[dict[str, Any]] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_table_records(
        self,
        records: list[dict[str, Any]],
        columns: list[Column] | None = None,
        **options: Any,
    ) -> None:
        """Load an in-memory list of records (client mode).

        Every record needs a unique ``id``.  When *columns* is ``None`` they
        are inferred from the records with polars.

        Args:
            records: The records to show.
            columns: Column definitions.
            **options: Table options, see :meth:`_configure_dt`.
        """
        t0 = time.perf_counter()
        if columns is None:
            columns = columns_from_records(records)
        config = self._configure_dt(columns, **options)
        config.lf = None
        config.schema = None
        config.id_field = None

        self._dt_source = list(records)  # type: ignore[assignment]
        self._dt_records = list(records)  # type: ignore[assignment]
        self.dt_total_items = len(records)  # type: ignore[assignment]
        self.dt_loaded = True  # type: ignore[assignment]
        self.dt_loading = False  # type: ignore[assignment]
        self.dt_stats = f"{len(records):,} records"  # type: ignore[assignment]
        print(
            f"[DataTable] {type(self).__name__}: loaded {len(records):,} records, "
            f"{len(columns)} columns ({(time.perf_counter() - t0) * 1000:.1f}ms)"
        )

    def set_table_lazyframe(
        self,
        lf: pl.LazyFrame,
        columns: list[Column] | None = None,
        *,
        descriptions: dict[str, str] | None = None,
        id_field: str | None = None,
        **options: Any,
    ):
        """Prepare a LazyFrame for server-side browsing (server mode).

        This is a **generator** -- use ``yield from self.set_table_lazyframe(...)``
        inside your event handler so the loading state is sent to the
        frontend immediately.

        Only the schema, the row count and the first page are computed.
        Without explicit ``search_keys``, all text columns are searched.

        Args:
            lf: The polars LazyFrame to browse.
            columns: Column definitions.  Inferred from the schema if ``None``.
            descriptions: Optional ``{column: description}`` mapping used
                for inferred column header tooltips.
            id_field: Column holding a stable row identity.  Without it,
                rows are identified by their position in the current result.
            **options: Table options, see :meth:`_configure_dt`.
        """
        self.dt_loading = True  # type: ignore[assignment]
        self.dt_stats = "Preparing LazyFrame..."  # type: ignore[assignment]
        yield  # send loading state to the frontend immediately

        t0 = time.perf_counter()
        schema = lf.collect_schema()
        if columns is None:
            columns = build_columns_from_schema(
                schema,
                column_descriptions=descriptions,
                id_field=id_field,
            )
        if options.get("search_keys") is None:
            options["search_keys"] = string_columns(schema)

        config = self._configure_dt(columns, **options)
        config.lf = lf
        config.schema = schema
        config.id_field = id_field

        self._dt_source = []  # type: ignore[assignment]
        self._refresh_dt_page(refresh_row_count=True)
        self.dt_loaded = True  # type: ignore[assignment]
        self.dt_loading = False  # type: ignore[assignment]
        print(
            f"[DataTable] {type(self).__name__}: LazyFrame ready, "
            f"{self.dt_total_items:,} rows, {len(columns)} columns "
            f"({(time.perf_counter() - t0) * 1000:.1f}ms)"
        )

    def set_table_error(self, message: str) -> None:
        """Show *message* instead of the table body (empty string clears it)."""
        self.dt_error = message  # type: ignore[assignment]
        self.dt_loading = False  # type: ignore[assignment]

    def set_table_loading(self, loading: bool) -> None:
        self.dt_loading = loading  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def handle_dt_search(self, value: str):
        """Handle an edit of the search box (resets to the first page)."""
        if self._dt_server_mode():
            self.dt_loading = True  # type: ignore[assignment]
            self.dt_stats = "Searching..."  # type: ignore[assignment]
            yield
        self._dt_engine().change_search(self._dt_props(), value)
        self.dt_loading = False  # type: ignore[assignment]

    def handle_dt_sort(self, key: str):
        """Handle a header click: cycle the sort and go back to the first page."""
        if not any(column.key == key and column.sortable for column in self._dt_config().columns):
            return
        if self._dt_server_mode():
            self.dt_loading = True  # type: ignore[assignment]
            self.dt_stats = "Sorting..."  # type: ignore[assignment]
            yield
        self._dt_engine().click_header(self._dt_props(), key)
        self.dt_loading = False  # type: ignore[assignment]

    def handle_dt_page(self, page: int):
        if self._dt_server_mode():
            self.dt_loading = True  # type: ignore[assignment]
            self.dt_stats = f"Loading page {page}..."  # type: ignore[assignment]
            yield
        self._dt_engine().click_page(self._dt_props(), int(page))
        self.dt_loading = False  # type: ignore[assignment]

    def handle_dt_page_size(self, size: str):
        """Handle the page-size select (its value arrives as a string)."""
        if self._dt_server_mode():
            self.dt_loading = True  # type: ignore[assignment]
            yield
        self._dt_engine().change_page_size(self._dt_props(), int(size))
        self.dt_loading = False  # type: ignore[assignment]

    def handle_dt_previous_page(self):
        yield from self.handle_dt_page(self.dt_page - 1)

    def handle_dt_next_page(self):
        yield from self.handle_dt_page(self.dt_page + 1)

    def handle_dt_last_page(self):
        yield from self.handle_dt_page(self.dt_total_pages)

    def handle_dt_toggle_row(self, index: int) -> None:
        self._dt_engine().toggle_row(self._dt_props(), int(index))

    def handle_dt_toggle_all(self) -> None:
        self._dt_engine().toggle_all(self._dt_props())

    def handle_dt_row_click(self, index: int) -> Any:
        return self._dt_engine().click_row(self._dt_props(), int(index))

    def handle_dt_row_double_click(self, index: int) -> Any:
        return self._dt_engine().double_click_row(self._dt_props(), int(index))

    def handle_dt_action(self, action_index: int, row_index: int) -> Any:
        return self._dt_engine().click_action(
            self._dt_props(), int(action_index), int(row_index)
        )

    def handle_dt_bulk_action(self, action_id: str) -> Any:
        return self._dt_engine().click_bulk_action(self._dt_props(), action_id)

    def clear_dt_selection(self) -> None:
        self._dt_selected = []  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Computed vars
    # ------------------------------------------------------------------

    @rx.var(cache=False)
    def dt_headers(self) -> list[HeaderView]:
        return self._dt_view().headers

    @rx.var(cache=False)
    def dt_rows(self) -> list[RowView]:
        return self._dt_view().rows

    @rx.var(cache=False)
    def dt_display_state(self) -> str:
        return self._dt_view().display_state

    @rx.var(cache=False)
    def dt_status_message(self) -> str:
        status = self._dt_view().status
        return status.message if status is not None else ""

    @rx.var(cache=False)
    def dt_has_pagination(self) -> bool:
        return self._dt_view().pagination is not None

    @rx.var(cache=False)
    def dt_page_buttons(self) -> list[PageButton]:
        pagination = self._dt_view().pagination
        return pagination.buttons if pagination is not None else []

    @rx.var(cache=False)
    def dt_total_pages(self) -> int:
        pagination = self._dt_view().pagination
        return pagination.total_pages if pagination is not None else 1

    @rx.var(cache=False)
    def dt_range_summary(self) -> str:
        pagination = self._dt_props().pagination
        if pagination is None:
            return ""
        return range_summary(pagination.current_page, pagination.page_size, pagination.total_items)

    @rx.var(cache=False)
    def dt_has_previous(self) -> bool:
        pagination = self._dt_view().pagination
        return pagination is not None and pagination.has_previous

    @rx.var(cache=False)
    def dt_has_next(self) -> bool:
        pagination = self._dt_view().pagination
        return pagination is not None and pagination.has_next

    @rx.var(cache=False)
    def dt_page_size_options(self) -> list[str]:
        return [str(size) for size in self._dt_config().page_size_options]

    @rx.var(cache=False)
    def dt_header_selection(self) -> str:
        return self._dt_view().header_selection

    @rx.var(cache=False)
    def dt_selectable(self) -> bool:
        return self._dt_config().selectable

    @rx.var(cache=False)
    def dt_multi_select(self) -> bool:
        config = self._dt_config()
        return config.selectable and config.multi_select

    @rx.var(cache=False)
    def dt_searchable(self) -> bool:
        return bool(self._dt_config().search_keys)

    @rx.var(cache=False)
    def dt_search_placeholder(self) -> str:
        return self._dt_config().search_placeholder

    @rx.var(cache=False)
    def dt_has_actions(self) -> bool:
        return bool(self._dt_config().actions)

    @rx.var(cache=False)
    def dt_column_count(self) -> int:
        """Number of body columns, for the colspan of the status row."""
        config = self._dt_config()
        return len(config.columns) + int(config.selectable) + int(bool(config.actions))

    @rx.var(cache=False)
    def dt_bulk_actions(self) -> list[BulkActionView]:
        return self._dt_view().bulk_actions

    @rx.var(cache=False)
    def dt_selected_count(self) -> int:
        return len(self._dt_selected)

    @rx.var(cache=False)
    def dt_filtered_count(self) -> int:
        if self._dt_server_mode():
            return self.dt_total_items
        return self._dt_view().filtered_count

    # ------------------------------------------------------------------
    # Engine wiring
    # ------------------------------------------------------------------

    def _dt_config(self) -> _TableConfig:
        return _get_config(type(self).__name__)

    def _dt_engine(self) -> DataTable:
        return self._dt_config().engine

    def _dt_server_mode(self) -> bool:
        return self._dt_config().lf is not None

    def _dt_sort(self) -> SortConfig | None:
        if not self.dt_sort_key:
            return None
        return SortConfig(self.dt_sort_key, self.dt_sort_direction)  # type: ignore[arg-type]

    def _dt_view(self) -> TableView:
        return self._dt_engine().render(self._dt_props())

    def _dt_props(self) -> TableProps:
        """Assemble the engine input from the current state and configuration."""
        config = self._dt_config()
        server = config.lf is not None

        search: SearchConfig | None = None
        if config.search_keys:
            search = SearchConfig(
                # Server pages are already filtered by polars.
                keys=() if server else tuple(config.search_keys),
                mode=ControlledSearch(self.dt_search, self._dt_on_search),
                placeholder=config.search_placeholder,
            )

        selection: SelectionConfig | None = None
        if config.selectable:
            selection = SelectionConfig(
                selected_items=_unwrap(self._dt_selected),
                on_selection_change=self._dt_on_selection,
                multi_select=config.multi_select,
            )

        props = TableProps(
            records=_unwrap(self._dt_records),
            columns=config.columns,
            sort=self._dt_sort(),
            on_sort=self._dt_on_sort,
            search=search,
            selection=selection,
            actions=config.bound_actions,
            bulk_actions=config.bound_bulk_actions,
            display=DisplayOptions(
                loading=self.dt_loading,
                error=self.dt_error or None,
                empty_message=config.empty_message,
                loading_message=config.loading_message,
            ),
            on_row_click=self._dt_on_row_click,
            on_row_double_click=self._dt_on_row_double_click,
        )

        if server:
            total = self.dt_total_items
        else:
            total = len(self._dt_engine().filtered_records(props))
        pages = max(1, math.ceil(total / self.dt_page_size))
        return replace(
            props,
            pagination=PaginationConfig(
                current_page=min(max(1, self.dt_page), pages),
                page_size=self.dt_page_size,
                total_items=total,
                on_page_change=self._dt_on_page,
                on_page_size_change=self._dt_on_page_size,
                page_size_options=config.page_size_options,
                mode="server" if server else "client",
            ),
        )

    def _dt_event(self, name: str) -> Callable[..., Any]:
        """Return a callable that dispatches the event handler *name* of this state."""
        handler = getattr(type(self), name)

        def dispatch(*args: Any) -> Any:
            return handler(*(_plain(arg) for arg in args))

        return dispatch

    def _dt_bind_action(self, action: Action) -> Action:
        if isinstance(action.on_click, str):
            return replace(action, on_click=self._dt_event(action.on_click))
        return action

    def _dt_bind_bulk_action(self, action: BulkAction) -> BulkAction:
        if isinstance(action.on_click, str):
            return replace(action, on_click=self._dt_event(action.on_click))
        return action

    # ------------------------------------------------------------------
    # Engine callbacks
    # ------------------------------------------------------------------

    def _dt_on_search(self, value: str) -> None:
        self.dt_search = value  # type: ignore[assignment]
        self.dt_page = 1  # type: ignore[assignment]
        if self._dt_server_mode():
            self._dt_reset_positional_selection()
            self._refresh_dt_page(refresh_row_count=True)

    def _dt_on_sort(self, key: str, direction: str) -> None:
        self.dt_sort_key = key  # type: ignore[assignment]
        self.dt_sort_direction = direction  # type: ignore[assignment]
        self.dt_page = 1  # type: ignore[assignment]
        if self._dt_server_mode():
            self._dt_reset_positional_selection()
            self._refresh_dt_page(refresh_row_count=False)
        else:
            self._dt_records = sort_records(self._dt_source, self._dt_sort())  # type: ignore[assignment]

    def _dt_on_page(self, page: int) -> None:
        self.dt_page = page  # type: ignore[assignment]
        if self._dt_server_mode():
            self._refresh_dt_page(refresh_row_count=False)

    def _dt_on_page_size(self, size: int) -> None:
        self.dt_page_size = size  # type: ignore[assignment]
        self.dt_page = 1  # type: ignore[assignment]
        if self._dt_server_mode():
            self._refresh_dt_page(refresh_row_count=False)

    def _dt_on_selection(self, items: list[Any]) -> None:
        self._dt_selected = [_plain(item) for item in items]  # type: ignore[assignment]

    def _dt_on_row_click(self, item: Any, index: int) -> Any:
        """Show the clicked record in the detail box, then chain the host handler."""
        config = self._dt_config()
        labels = {column.key: column.label for column in config.columns}
        descriptions = {column.key: column.description for column in config.columns}

        lines: list[str] = []
        for field, value in _plain(item).items():
            label = labels.get(field, field)
            desc = descriptions.get(field)
            if desc:
                lines.append(f"{label}: {value}  ({desc})")
            else:
                lines.append(f"{label}: {value}")
        self.dt_selected_info = "\n".join(lines)  # type: ignore[assignment]

        if config.row_click_handler:
            return self._dt_event(config.row_click_handler)(item, index)
        return None

    def _dt_on_row_double_click(self, item: Any, index: int) -> Any:
        config = self._dt_config()
        if config.row_double_click_handler:
            return self._dt_event(config.row_double_click_handler)(item, index)
        return None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _configure_dt(
        self,
        columns: list[Column],
        *,
        search_keys: Sequence[str] | None = None,
        search_placeholder: str = "Search...",
        actions: Sequence[Action] | None = None,
        bulk_actions: Sequence[BulkAction] | None = None,
        selectable: bool = True,
        multi_select: bool = True,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS,
        empty_message: str = "No data available",
        loading_message: str = "Loading...",
        row_click_handler: str | None = None,
        row_double_click_handler: str | None = None,
    ) -> _TableConfig:
        """Store the table options and reset the interactive state.

        Args:
            columns: Column definitions.
            search_keys: Fields searched by the search box.  No search box
                is shown when empty.
            search_placeholder: Placeholder of the search box.
            actions: Per-row action buttons.
            bulk_actions: Buttons applied to the selected ids.
            selectable: Show the selection checkboxes.
            multi_select: Allow selecting more than one row.
            page_size: Initial page size.
            page_size_options: Choices of the page-size select.
            empty_message: Shown when no record matches.
            loading_message: Shown while loading.
            row_click_handler: Name of an event handler called with
                ``(item, index)`` on row click.
            row_double_click_handler: Same, for double clicks.

        Raises:
            ValueError: If two columns share the same key, or *page_size*
                is below 1.
        """
        keys = [column.key for column in columns]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Duplicate column keys in {keys}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        config = self._dt_config()
        config.engine = DataTable()
        config.columns = list(columns)
        config.search_keys = list(search_keys or [])
        config.search_placeholder = search_placeholder
        config.actions = list(actions or [])
        config.bulk_actions = list(bulk_actions or [])
        config.bound_actions = [self._dt_bind_action(action) for action in config.actions]
        config.bound_bulk_actions = [self._dt_bind_bulk_action(action) for action in config.bulk_actions]
        config.selectable = selectable
        config.multi_select = multi_select
        config.page_size_options = tuple(page_size_options)
        config.empty_message = empty_message
        config.loading_message = loading_message
        config.row_click_handler = row_click_handler
        config.row_double_click_handler = row_double_click_handler

        self.dt_search = ""  # type: ignore[assignment]
        self.dt_sort_key = ""  # type: ignore[assignment]
        self.dt_sort_direction = "asc"  # type: ignore[assignment]
        self.dt_page = 1  # type: ignore[assignment]
        self.dt_page_size = page_size  # type: ignore[assignment]
        self.dt_error = ""  # type: ignore[assignment]
        self.dt_selected_info = _DEFAULT_SELECTED_INFO  # type: ignore[assignment]
        self._dt_selected = []  # type: ignore[assignment]
        return config

    def _dt_reset_positional_selection(self) -> None:
        """Positional row ids change meaning when the result set changes."""
        if self._dt_config().id_field is None:
            self._dt_selected = []  # type: ignore[assignment]

    def _refresh_dt_page(self, *, refresh_row_count: bool) -> None:
        """Collect only the current page from the configured LazyFrame.

        Builds a lazy query: search -> count -> sort -> slice, then collects
        only the page slice.  Polars errors are shown as the table error.
        """
        config = self._dt_config()
        if config.lf is None:
            return

        t0 = time.perf_counter()
        lf = apply_search(config.lf, self.dt_search, config.search_keys, config.schema)
        try:
            if refresh_row_count:
                t_count = time.perf_counter()
                self.dt_total_items = count_rows(lf)  # type: ignore[assignment]
                print(
                    f"[DataTable] row count: {self.dt_total_items:,} "
                    f"({(time.perf_counter() - t_count) * 1000:.1f}ms)"
                )

            lf = apply_sort_config(lf, self._dt_sort(), config.schema)
            pages = max(1, math.ceil(self.dt_total_items / self.dt_page_size))
            page = min(max(1, self.dt_page), pages)
            self.dt_page = page  # type: ignore[assignment]
            rows = collect_page(lf, page, self.dt_page_size, id_field=config.id_field)
        except pl.exceptions.PolarsError as exc:
            self.dt_error = f"Query failed: {exc}"  # type: ignore[assignment]
            print(f"[DataTable] query failed: {exc}")
            return

        self.dt_error = ""  # type: ignore[assignment]
        self._dt_records = rows  # type: ignore[assignment]
        elapsed_ms = (time.perf_counter() - t0) * 1000
        self.dt_stats = (  # type: ignore[assignment]
            f"page {page:,} / {pages:,}  {len(rows)} rows  "
            f"of {self.dt_total_items:,}  {elapsed_ms:.0f}ms"
        )
        print(
            f"[DataTable] page refresh: page={page}, size={self.dt_page_size}, "
            f"slice={len(rows)}, elapsed={elapsed_ms:.1f}ms"
        )
