from typing import Any

import pytest

from reflex_data_table.engine import (
    build_pagination_view,
    build_status_view,
    filter_records,
    header_selection_state,
    infer_column_width,
    next_sort,
    page_buttons,
    paginate_records,
    range_summary,
    resolve_display_state,
    sort_records,
    toggle_selection,
    toggle_visible_selection,
    total_pages,
)
from reflex_data_table.models import (
    Column,
    DisplayOptions,
    PaginationConfig,
    SortConfig,
    StatusView,
)


def _ids(items: list[dict[str, Any]]) -> list[Any]:
    return [item["id"] for item in items]


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

def test_filter_matches_substring_case_insensitively() -> None:
    records = [
        {"id": 1, "email": "user@acme.com"},
        {"id": 2, "email": "user@other.com"},
    ]

    result = filter_records(records, "acme", ["email"])

    assert result == [records[0]]
    assert filter_records(records, "ACME", ["email"]) == [records[0]]


def test_filter_empty_query_or_keys_returns_input_unchanged(leave_logs: list[dict[str, Any]]) -> None:
    assert filter_records(leave_logs, "", ["employee_name"]) is leave_logs
    assert filter_records(leave_logs, "   ", ["employee_name"]) is leave_logs
    assert filter_records(leave_logs, "nguyen", []) is leave_logs


def test_filter_any_key_matches_and_input_is_not_mutated(leave_logs: list[dict[str, Any]]) -> None:
    before = list(leave_logs)

    result = filter_records(leave_logs, "binh", ["employee_name", "approver_name"])

    assert _ids(result) == [1, 3]
    assert leave_logs == before


def test_filter_skips_missing_and_none_fields(leave_logs: list[dict[str, Any]]) -> None:
    assert _ids(filter_records(leave_logs, "trip", ["reason", "missing_field"])) == [1]
    assert filter_records(leave_logs, "none", ["reason"]) == []


def test_filter_uses_string_form_of_numbers_and_booleans() -> None:
    records = [{"id": 1, "days": 11, "paid": True}, {"id": 2, "days": 3, "paid": False}]

    assert _ids(filter_records(records, "11", ["days"])) == [1]
    assert _ids(filter_records(records, "false", ["paid"])) == [2]


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def test_paginate_second_page_of_twelve(numbered_records: list[dict[str, Any]]) -> None:
    visible = paginate_records(numbered_records, current_page=2, page_size=5)

    assert _ids(visible) == [6, 7, 8, 9, 10]
    assert total_pages(len(numbered_records), 5) == 3


def test_paginate_last_page_is_partial(numbered_records: list[dict[str, Any]]) -> None:
    assert _ids(paginate_records(numbered_records, 3, 5)) == [11, 12]
    assert paginate_records(numbered_records, 4, 5) == []


def test_page_buttons_centered_with_ellipsis() -> None:
    buttons = page_buttons(5, 10)

    labels = [b.label for b in buttons]
    assert labels == ["1", "…", "3", "4", "5", "6", "7", "…", "10"]
    assert [b.page for b in buttons if b.active] == [5]


def test_page_buttons_at_boundaries() -> None:
    assert [b.label for b in page_buttons(1, 10)] == ["1", "2", "3", "4", "5", "…", "10"]
    assert [b.label for b in page_buttons(10, 10)] == ["1", "…", "6", "7", "8", "9", "10"]
    assert [b.label for b in page_buttons(2, 3)] == ["1", "2", "3"]


def test_page_buttons_adjacent_shortcut_has_no_ellipsis() -> None:
    buttons = page_buttons(4, 7)

    assert [b.label for b in buttons] == ["1", "2", "3", "4", "5", "6", "7"]
    assert all(b.kind == "page" for b in buttons)


def test_pagination_view_hidden_for_single_page() -> None:
    config = PaginationConfig(current_page=1, page_size=10, total_items=10, on_page_change=print)

    assert build_pagination_view(config) is None


def test_range_summary_without_page_control() -> None:
    assert range_summary(1, 25, 12) == "Showing 1 to 12 of 12 results"
    assert range_summary(3, 10, 1234) == "Showing 21 to 30 of 1,234 results"
    assert range_summary(1, 10, 0) == "Showing 0 to 0 of 0 results"


def test_pagination_view_summary_and_boundaries() -> None:
    config = PaginationConfig(current_page=3, page_size=5, total_items=12, on_page_change=print)

    view = build_pagination_view(config)

    assert view is not None
    assert view.total_pages == 3
    assert (view.range_start, view.range_end) == (11, 12)
    assert view.summary == "Showing 11 to 12 of 12 results"
    assert view.has_previous
    assert not view.has_next


@pytest.mark.parametrize(
    "kwargs",
    [
        {"current_page": 0, "page_size": 10, "total_items": 1},
        {"current_page": 1, "page_size": 0, "total_items": 1},
        {"current_page": 1, "page_size": 10, "total_items": -1},
    ],
)
def test_pagination_config_rejects_invalid_values(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        PaginationConfig(on_page_change=print, **kwargs)


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------

def test_sort_cycle_on_same_column() -> None:
    first = next_sort(None, "days")
    second = next_sort(first, "days")
    third = next_sort(second, "days")

    assert [first.direction, second.direction, third.direction] == ["asc", "desc", "asc"]


def test_sort_other_column_starts_ascending() -> None:
    assert next_sort(SortConfig("days", "desc"), "status") == SortConfig("status", "asc")


def test_sort_records_puts_missing_values_last(leave_logs: list[dict[str, Any]]) -> None:
    ascending = sort_records(leave_logs, SortConfig("approver_name", "asc"))
    descending = sort_records(leave_logs, SortConfig("days", "desc"))

    assert ascending[-1]["id"] == 2
    assert _ids(descending) == [3, 1, 2]
    assert sort_records(leave_logs, None) == leave_logs


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def test_header_selection_tri_state(numbered_records: list[dict[str, Any]]) -> None:
    visible = numbered_records[:5]

    assert header_selection_state(visible[:3], visible) == "indeterminate"
    assert header_selection_state(visible, visible) == "checked"
    assert header_selection_state([], visible) == "unchecked"
    assert header_selection_state(numbered_records[5:], visible) == "unchecked"
    assert header_selection_state(visible, []) == "unchecked"


def test_toggle_selection_multi_and_single(numbered_records: list[dict[str, Any]]) -> None:
    first, second = numbered_records[0], numbered_records[1]

    assert _ids(toggle_selection([first], second, multi_select=True)) == [1, 2]
    assert _ids(toggle_selection([first, second], first, multi_select=True)) == [2]
    assert _ids(toggle_selection([first], second, multi_select=False)) == [2]
    assert toggle_selection([first], first, multi_select=False) == []


def test_toggle_selection_matches_by_id_not_identity() -> None:
    selected = [{"id": 7, "name": "old copy"}]

    assert toggle_selection(selected, {"id": 7, "name": "fresh copy"}, multi_select=True) == []


def test_select_all_only_touches_visible_window(numbered_records: list[dict[str, Any]]) -> None:
    visible = numbered_records[:5]
    outside = numbered_records[10]

    added = toggle_visible_selection([outside, visible[0]], visible)
    assert sorted(_ids(added)) == [1, 2, 3, 4, 5, 11]

    removed = toggle_visible_selection(added, visible)
    assert _ids(removed) == [11]


# ---------------------------------------------------------------------------
# Display state
# ---------------------------------------------------------------------------

def test_error_wins_over_loading() -> None:
    assert resolve_display_state(loading=True, error="X", filtered_count=5) == "error"


def test_display_state_precedence() -> None:
    assert resolve_display_state(True, None, 0) == "loading"
    assert resolve_display_state(False, None, 0) == "empty"
    assert resolve_display_state(False, "", 3) == "populated"


def test_status_view_defaults_and_overrides() -> None:
    display = DisplayOptions(error="Network error")
    assert build_status_view("error", display) == StatusView(state="error", message="Network error")
    assert build_status_view("empty", DisplayOptions()).message == "No data available"
    assert build_status_view("loading", DisplayOptions()).message == "Loading..."
    assert build_status_view("populated", DisplayOptions()) is None

    custom = DisplayOptions(render_empty=lambda: "No leave requests yet")
    assert build_status_view("empty", custom).message == "No leave requests yet"


# ---------------------------------------------------------------------------
# Width heuristic
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("key", "width"),
    [
        ("start_date", "140px"),
        ("created_at", "140px"),
        ("employee_email", "220px"),
        ("employee_name", "180px"),
        ("leave_type", "120px"),
        ("salary", "120px"),
        ("id", "80px"),
        ("leave_log_id", "80px"),
        ("reason", "150px"),
    ],
)
def test_infer_column_width(key: str, width: str) -> None:
    assert infer_column_width(Column(key, key)) == width


def test_explicit_width_wins() -> None:
    assert infer_column_width(Column("employee_email", "Email", width="300px")) == "300px"
