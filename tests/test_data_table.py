from dataclasses import replace
from typing import Any

import pytest

from reflex_data_table.engine import DataTable
from reflex_data_table.models import (
    Action,
    BulkAction,
    Column,
    ControlledSearch,
    DisplayOptions,
    PaginationConfig,
    SearchConfig,
    SelectionConfig,
    SortConfig,
    TableProps,
    TableStyle,
    UncontrolledSearch,
)


class Recorder:
    """Collects callback invocations."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> str:
        self.calls.append(args)
        return "handled"


@pytest.fixture
def props(numbered_records: list[dict[str, Any]]) -> TableProps:
    return TableProps(
        records=numbered_records,
        columns=[Column("id", "ID", sortable=True), Column("name", "Name", sortable=True)],
        pagination=PaginationConfig(current_page=2, page_size=5, total_items=12, on_page_change=Recorder()),
    )


def _row_ids(view) -> list[str]:
    return [row.id for row in view.rows]


def test_render_windows_second_page(props: TableProps) -> None:
    view = DataTable().render(props)

    assert view.display_state == "populated"
    assert _row_ids(view) == ["6", "7", "8", "9", "10"]
    assert [row.row_number for row in view.rows] == [6, 7, 8, 9, 10]
    assert [row.index for row in view.rows] == [0, 1, 2, 3, 4]
    assert view.pagination is not None
    assert view.pagination.total_pages == 3
    assert [h.width for h in view.headers] == ["80px", "180px"]


def test_render_without_pagination_shows_everything(props: TableProps) -> None:
    view = DataTable().render(replace(props, pagination=None))

    assert len(view.rows) == 12
    assert view.pagination is None


def test_server_mode_does_not_slice_again(props: TableProps, numbered_records: list[dict[str, Any]]) -> None:
    page = numbered_records[5:10]
    pagination = PaginationConfig(
        current_page=2, page_size=5, total_items=120, on_page_change=Recorder(), mode="server",
    )

    view = DataTable().render(replace(props, records=page, pagination=pagination))

    assert _row_ids(view) == ["6", "7", "8", "9", "10"]
    assert view.pagination is not None
    assert view.pagination.total_pages == 24


def test_render_carries_style(props: TableProps) -> None:
    assert DataTable().render(props).style == TableStyle()

    view = DataTable().render(replace(props, style=TableStyle(compact=True, show_row_numbers=True)))

    assert view.style.compact is True
    assert view.style.show_row_numbers is True
    assert view.style.striped is True


def test_empty_is_evaluated_after_filtering(props: TableProps) -> None:
    search = SearchConfig(keys=["name"], mode=ControlledSearch("nobody", Recorder()))

    view = DataTable().render(replace(props, search=search, pagination=None))

    assert view.display_state == "empty"
    assert view.rows == []
    assert view.status is not None
    assert view.status.message == "No data available"
    assert view.total_count == 12
    assert view.filtered_count == 0


def test_error_suppresses_loading(props: TableProps) -> None:
    view = DataTable().render(replace(props, display=DisplayOptions(loading=True, error="Server unavailable")))

    assert view.display_state == "error"
    assert view.status.message == "Server unavailable"
    assert view.rows == []


def test_duplicate_column_keys_are_rejected(props: TableProps) -> None:
    columns = [Column("name", "Name"), Column("name", "Name again")]

    with pytest.raises(ValueError, match="name"):
        DataTable().render(replace(props, columns=columns))


def test_derived_views_are_memoized(props: TableProps) -> None:
    table = DataTable()

    first = table.render(props)
    second = table.render(props)

    assert second.rows is first.rows
    assert second.headers is first.headers
    assert table.visible_records(props) is table.visible_records(props)


def test_memo_recomputes_when_inputs_change(props: TableProps) -> None:
    table = DataTable()
    first = table.render(props)

    sorted_view = table.render(replace(props, sort=SortConfig("name", "asc")))
    next_page = table.render(replace(props, pagination=replace(props.pagination, current_page=3)))

    assert sorted_view.headers is not first.headers
    assert _row_ids(next_page) == ["11", "12"]


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------

def test_header_click_emits_next_sort(props: TableProps) -> None:
    on_sort = Recorder()
    table = DataTable()

    result = table.click_header(replace(props, on_sort=on_sort), "name")
    table.click_header(replace(props, on_sort=on_sort, sort=SortConfig("name", "asc")), "name")

    assert result == "handled"
    assert on_sort.calls == [("name", "asc"), ("name", "desc")]


def test_header_click_ignored_for_unsortable_column(props: TableProps) -> None:
    on_sort = Recorder()
    columns = [Column("id", "ID"), Column("name", "Name")]

    assert DataTable().click_header(replace(props, columns=columns, on_sort=on_sort), "name") is None
    assert on_sort.calls == []


def test_page_click_validates_target(props: TableProps) -> None:
    table = DataTable()
    on_page_change = props.pagination.on_page_change

    table.click_page(props, 3)
    table.click_page(props, 2)
    table.click_page(props, 4)
    table.click_page(props, 0)

    assert on_page_change.calls == [(3,)]


def test_page_size_change(props: TableProps) -> None:
    on_size = Recorder()
    pagination = replace(props.pagination, on_page_size_change=on_size)
    table = DataTable()

    table.change_page_size(replace(props, pagination=pagination), 25)
    table.change_page_size(replace(props, pagination=pagination), 5)

    assert on_size.calls == [(25,)]


def test_controlled_search_only_reports_the_edit(props: TableProps) -> None:
    on_change = Recorder()
    search_props = replace(props, search=SearchConfig(keys=["name"], mode=ControlledSearch("", on_change)))
    table = DataTable()

    table.change_search(search_props, "Employee 1")

    assert on_change.calls == [("Employee 1",)]
    assert table.search_value(search_props) == ""
    assert len(table.render(search_props).rows) == 5


def test_uncontrolled_search_keeps_its_own_value(props: TableProps) -> None:
    notified = Recorder()
    search_props = replace(
        props,
        pagination=None,
        search=SearchConfig(keys=["name"], mode=UncontrolledSearch(on_change=notified)),
    )
    table = DataTable()

    table.change_search(search_props, "employee 1")
    view = table.render(search_props)

    assert view.search_value == "employee 1"
    assert _row_ids(view) == ["1", "10", "11", "12"]
    assert notified.calls == [("employee 1",)]
    assert DataTable().search_value(search_props) == ""


def test_toggle_row_reports_items_by_value(props: TableProps, numbered_records: list[dict[str, Any]]) -> None:
    on_change = Recorder()
    selection = SelectionConfig(selected_items=[numbered_records[0]], on_selection_change=on_change)

    DataTable().toggle_row(replace(props, selection=selection), 1)

    (items,), = on_change.calls
    assert [item["id"] for item in items] == [1, 7]


def test_toggle_row_does_not_click_row(props: TableProps) -> None:
    on_row_click = Recorder()
    selection = SelectionConfig(selected_items=[], on_selection_change=Recorder())

    DataTable().toggle_row(replace(props, selection=selection, on_row_click=on_row_click), 0)

    assert on_row_click.calls == []


def test_toggle_all_and_header_state(props: TableProps, numbered_records: list[dict[str, Any]]) -> None:
    on_change = Recorder()
    selected = numbered_records[5:8]
    selection = SelectionConfig(selected_items=selected, on_selection_change=on_change)
    table = DataTable()

    view = table.render(replace(props, selection=selection))
    table.toggle_all(replace(props, selection=selection))

    assert view.header_selection == "indeterminate"
    assert [row.selected for row in view.rows] == [True, True, True, False, False]
    (items,), = on_change.calls
    assert sorted(item["id"] for item in items) == [6, 7, 8, 9, 10]


def test_toggle_all_unavailable_in_single_select(props: TableProps) -> None:
    on_change = Recorder()
    selection = SelectionConfig(selected_items=[], on_selection_change=on_change, multi_select=False)

    assert DataTable().toggle_all(replace(props, selection=selection)) is None
    assert on_change.calls == []


def test_row_click_and_double_click(props: TableProps) -> None:
    on_click = Recorder()
    on_double = Recorder()
    table = DataTable()
    row_props = replace(props, on_row_click=on_click, on_row_double_click=on_double)

    table.click_row(row_props, 0)
    table.double_click_row(row_props, 4)

    assert on_click.calls == [({"id": 6, "name": "Employee 6"}, 0)]
    assert on_double.calls == [({"id": 10, "name": "Employee 10"}, 4)]


def test_action_click_respects_disabled_predicate(props: TableProps) -> None:
    approve = Recorder()
    actions = [Action("Approve", on_click=approve, disabled=lambda item: item["id"] % 2 == 0)]
    table = DataTable()
    action_props = replace(props, actions=actions)

    table.click_action(action_props, 0, 0)
    table.click_action(action_props, 0, 1)

    assert approve.calls == [({"id": 7, "name": "Employee 7"}, 1)]
    assert [row.actions[0].disabled for row in table.render(action_props).rows] == [
        True, False, True, False, True,
    ]


def test_action_callback_errors_propagate(props: TableProps) -> None:
    def explode(item: Any, index: int) -> None:
        raise RuntimeError("backend rejected approval")

    with pytest.raises(RuntimeError, match="backend rejected"):
        DataTable().click_action(replace(props, actions=[Action("Approve", on_click=explode)]), 0, 0)


def test_custom_action_renderer_replaces_buttons(props: TableProps) -> None:
    view = DataTable().render(
        replace(props, actions=[Action("View", on_click=Recorder())], render_actions=lambda item, index: f"#{item['id']}")
    )

    assert view.rows[0].custom_actions is not None
    assert view.rows[0].custom_actions.text == "#6"
    assert view.rows[0].actions == []


def test_bulk_action_receives_selected_ids(props: TableProps, numbered_records: list[dict[str, Any]]) -> None:
    on_delete = Recorder()
    bulk = [BulkAction("delete", "Delete", on_click=on_delete, variant="danger")]
    selection = SelectionConfig(selected_items=numbered_records[:2], on_selection_change=Recorder())
    table = DataTable()
    bulk_props = replace(props, bulk_actions=bulk, selection=selection)

    table.click_bulk_action(bulk_props, "delete")
    table.click_bulk_action(bulk_props, "unknown")

    assert on_delete.calls == [([1, 2],)]
    assert table.render(bulk_props).bulk_actions[0].disabled is False
    empty = replace(bulk_props, selection=replace(selection, selected_items=[]))
    assert table.render(empty).bulk_actions[0].disabled is True
    assert table.click_bulk_action(empty, "delete") is None
