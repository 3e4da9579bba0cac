"""reflex-data-table – generic data table engine and components for Reflex.

A pure engine (:class:`DataTable`) turns records plus column definitions
into render-ready views with search, sort indicators, pagination, row
selection and row actions.  :class:`DataTableMixin` hosts it in Reflex
state, in memory or backed by a polars LazyFrame, and :func:`data_table`
draws it::

    pip install reflex-data-table
"""

from reflex_data_table.cells import format_value, render_cell, render_header
from reflex_data_table.data_table import (
    DataTableNamespace,
    data_table,
    data_table_bulk_action_bar,
    data_table_detail_box,
    data_table_pagination_bar,
    data_table_search_bar,
)
from reflex_data_table.engine import (
    DataTable,
    filter_records,
    infer_column_width,
    next_sort,
    page_buttons,
    paginate_records,
    sort_records,
    toggle_selection,
    toggle_visible_selection,
)
from reflex_data_table.models import (
    Action,
    BulkAction,
    CellView,
    Column,
    ControlledSearch,
    DisplayOptions,
    PaginationConfig,
    SearchConfig,
    SelectionConfig,
    SortConfig,
    StatusView,
    TableProps,
    TableStyle,
    TableView,
    UncontrolledSearch,
)
from reflex_data_table.polars_utils import (
    apply_search,
    apply_sort_config,
    build_columns_from_schema,
    collect_page,
    count_rows,
    lazyframe_to_records,
    scan_file,
)
from reflex_data_table.table_state import DataTableMixin
