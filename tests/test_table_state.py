from typing import Any

import polars as pl
import pytest
import reflex as rx

from reflex_data_table import table_state
from reflex_data_table.data_table import _header_checked, data_table
from reflex_data_table.models import Action, BulkAction, Column, TableStyle
from reflex_data_table.table_state import DataTableMixin


class LeaveTableState(DataTableMixin, rx.State):
    """Client-mode host used by the tests."""

    def approve_leave(self, item: dict, index: int):
        pass

    def approve_leaves(self, ids: list):
        pass


class AttendanceTableState(DataTableMixin, rx.State):
    """Server-mode host used by the tests."""


@pytest.fixture
def leave_state(leave_logs: list[dict[str, Any]], leave_columns: list[Column]) -> LeaveTableState:
    state = LeaveTableState(_reflex_internal_init=True)
    state.set_table_records(
        leave_logs,
        leave_columns,
        search_keys=["employee_name", "status"],
        actions=[
            Action("Approve", on_click="approve_leave", disabled=lambda item: item["status"] != "pending"),
        ],
        bulk_actions=[BulkAction("approve", "Approve selected", on_click="approve_leaves")],
        page_size=2,
    )
    return state


@pytest.fixture
def attendance_lf() -> pl.LazyFrame:
    return pl.LazyFrame(
        {
            "employee_name": ["An", "Binh", "Chau", "Dung", "Em"],
            "status": ["late", "present", "late", "absent", "late"],
            "minutes_late": [12, 0, 30, 0, 5],
        }
    )


@pytest.fixture
def attendance_columns() -> list[Column]:
    return [
        Column("employee_name", "Employee", sortable=True),
        Column("status", "Status"),
        Column("minutes_late", "Minutes late", align="right"),
    ]


@pytest.fixture
def attendance_state(attendance_lf: pl.LazyFrame, attendance_columns: list[Column]) -> AttendanceTableState:
    state = AttendanceTableState(_reflex_internal_init=True)
    list(state.set_table_lazyframe(attendance_lf, attendance_columns, page_size=2))
    return state


# ---------------------------------------------------------------------------
# Client mode
# ---------------------------------------------------------------------------

def test_sort_reorders_records_and_returns_to_first_page(leave_state: LeaveTableState) -> None:
    list(leave_state.handle_dt_page(2))
    assert leave_state.dt_page == 2

    list(leave_state.handle_dt_sort("employee_name"))

    assert leave_state.dt_sort_key == "employee_name"
    assert leave_state.dt_sort_direction == "asc"
    assert leave_state.dt_page == 1
    assert [r["employee_name"] for r in leave_state._dt_records] == [
        "Le Minh Chau",
        "Nguyen Van An",
        "Pham Quoc Dung",
    ]

    list(leave_state.handle_dt_sort("employee_name"))

    assert leave_state.dt_sort_direction == "desc"
    assert leave_state._dt_records[0]["employee_name"] == "Pham Quoc Dung"


def test_search_filters_and_counts(leave_state: LeaveTableState) -> None:
    list(leave_state.handle_dt_search("pending"))

    assert leave_state.dt_search == "pending"
    assert leave_state.dt_filtered_count == 1
    assert [row.id for row in leave_state._dt_view().rows] == ["2"]


def test_page_out_of_range_is_clamped(leave_state: LeaveTableState) -> None:
    leave_state.dt_page = 99

    assert leave_state._dt_props().pagination.current_page == 2
    assert [row.id for row in leave_state._dt_view().rows] == ["3"]


def test_page_size_select_stays_with_a_single_page(
    numbered_records: list[dict[str, Any]],
) -> None:
    state = LeaveTableState(_reflex_internal_init=True)
    state.set_table_records(numbered_records, [Column("name", "Name")], page_size=10)
    assert state.dt_has_pagination is True

    list(state.handle_dt_page_size("25"))

    assert state.dt_page_size == 25
    assert state.dt_has_pagination is False
    assert state.dt_range_summary == "Showing 1 to 12 of 12 results"
    assert state.dt_filtered_count == 12


def test_string_action_is_bound_to_state_handler(leave_state: LeaveTableState) -> None:
    assert leave_state.handle_dt_action(0, 0) is None  # approved row: disabled

    spec = leave_state.handle_dt_action(0, 1)

    assert spec.handler.fn.__name__ == "approve_leave"


def test_string_bulk_action_receives_selected_ids(leave_state: LeaveTableState) -> None:
    assert leave_state.handle_dt_bulk_action("approve") is None

    leave_state.handle_dt_toggle_row(0)
    leave_state.handle_dt_toggle_row(1)
    spec = leave_state.handle_dt_bulk_action("approve")

    assert leave_state.dt_selected_count == 2
    assert spec.handler.fn.__name__ == "approve_leaves"


def test_bound_actions_and_views_are_reused(leave_state: LeaveTableState) -> None:
    assert leave_state._dt_props().actions is leave_state._dt_props().actions
    assert leave_state._dt_view().rows is leave_state._dt_view().rows

    leave_state.handle_dt_toggle_row(0)

    assert leave_state._dt_view().rows[0].selected is True


def test_row_click_fills_detail_box(leave_state: LeaveTableState) -> None:
    assert leave_state.handle_dt_row_click(0) is None

    info = leave_state.dt_selected_info

    assert "Employee: Nguyen Van An" in info
    assert "Status: approved" in info
    assert "reason: Family trip" in info


def test_error_takes_over_display(leave_state: LeaveTableState) -> None:
    leave_state.set_table_error("Backend unreachable")

    assert leave_state.dt_display_state == "error"
    assert leave_state.dt_status_message == "Backend unreachable"

    leave_state.set_table_error("")

    assert leave_state.dt_display_state == "populated"


# ---------------------------------------------------------------------------
# Server mode
# ---------------------------------------------------------------------------

def test_lazyframe_loads_only_the_first_page(attendance_state: AttendanceTableState) -> None:
    assert attendance_state.dt_total_items == 5
    assert [r["employee_name"] for r in attendance_state._dt_records] == ["An", "Binh"]
    assert attendance_state.dt_loaded is True
    assert attendance_state.dt_loading is False


def test_server_search_counts_and_pages(attendance_state: AttendanceTableState) -> None:
    events = list(attendance_state.handle_dt_search("late"))

    assert events == [None]
    assert attendance_state.dt_total_items == 3
    assert [r["employee_name"] for r in attendance_state._dt_records] == ["An", "Chau"]
    assert attendance_state.dt_loading is False


def test_search_clears_positional_selection(attendance_state: AttendanceTableState) -> None:
    attendance_state.handle_dt_toggle_row(0)
    assert attendance_state.dt_selected_count == 1

    list(attendance_state.handle_dt_search("late"))

    assert attendance_state.dt_selected_count == 0


def test_search_keeps_selection_with_id_field(attendance_lf: pl.LazyFrame) -> None:
    state = AttendanceTableState(_reflex_internal_init=True)
    list(state.set_table_lazyframe(attendance_lf, id_field="employee_name", page_size=2))
    state.handle_dt_toggle_row(0)

    list(state.handle_dt_search("late"))

    assert state.dt_selected_count == 1
    assert state._dt_selected[0]["id"] == "An"


def test_sort_on_non_sortable_column_is_ignored(attendance_state: AttendanceTableState) -> None:
    stats = attendance_state.dt_stats

    assert list(attendance_state.handle_dt_sort("status")) == []
    assert attendance_state.dt_stats == stats
    assert attendance_state.dt_loading is False
    assert attendance_state.dt_sort_key == ""


def test_server_sort_queries_polars(attendance_state: AttendanceTableState) -> None:
    list(attendance_state.handle_dt_sort("employee_name"))
    list(attendance_state.handle_dt_sort("employee_name"))

    assert attendance_state.dt_sort_direction == "desc"
    assert [r["employee_name"] for r in attendance_state._dt_records] == ["Em", "Dung"]


def test_query_error_clears_on_next_successful_page(
    attendance_state: AttendanceTableState, monkeypatch: pytest.MonkeyPatch
) -> None:
    fetch_page = table_state.collect_page

    def collect_page(lf: pl.LazyFrame, page: int, page_size: int, **kwargs: Any) -> list[dict[str, Any]]:
        if page == 2:
            raise pl.exceptions.InvalidOperationError("conversion from `str` to `i64` failed")
        return fetch_page(lf, page, page_size, **kwargs)

    monkeypatch.setattr(table_state, "collect_page", collect_page)

    list(attendance_state.handle_dt_page(2))

    assert attendance_state.dt_error.startswith("Query failed")
    assert attendance_state.dt_display_state == "error"

    list(attendance_state.handle_dt_page(1))

    assert attendance_state.dt_error == ""
    assert attendance_state.dt_display_state == "populated"
    assert [r["employee_name"] for r in attendance_state._dt_records] == ["An", "Binh"]


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

def test_header_checkbox_passes_indeterminate() -> None:
    checked = str(_header_checked(LeaveTableState))

    assert '"indeterminate"' in checked
    assert "dt_header_selection" in checked


def test_data_table_style_argument() -> None:
    assert '"surface"' not in str(data_table(LeaveTableState))
    assert '"surface"' in str(data_table(LeaveTableState, style=TableStyle(bordered=True)))
    assert '"surface"' not in str(
        data_table(LeaveTableState, style=TableStyle(bordered=True), bordered=False)
    )
