"""Reflex components that draw a :class:`~reflex_data_table.table_state.DataTableMixin` state.

Everything here is bound to the mixin's computed vars and event handlers,
so the components stay purely presentational: formatting, filtering and
windowing already happened in the engine.

Typical usage::

    def attendance_page() -> rx.Component:
        return rx.cond(
            AttendanceState.dt_loaded,
            data_table(AttendanceState, striped=True, show_row_numbers=True),
            rx.spinner(),
        )
"""

from dataclasses import replace
from typing import Any

import reflex as rx

from reflex_data_table.models import TableStyle

# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

_BADGE_TONES: tuple[str, ...] = ("green", "gray", "red", "amber", "orange", "blue")


def _badge(cell: Any) -> rx.Component:
    return rx.match(
        cell.tone,
        *[(tone, rx.badge(cell.text, color_scheme=tone, variant="soft")) for tone in _BADGE_TONES],
        rx.badge(cell.text, variant="soft"),
    )


def _cell_content(cell: Any) -> rx.Component:
    """Draw one :class:`~reflex_data_table.models.CellView` according to its kind."""
    return rx.match(
        cell.kind,
        ("placeholder", rx.text(cell.text, color="var(--gray-8)", size="2")),
        ("badge", _badge(cell)),
        ("number", rx.text(cell.text, size="2", style={"font_variant_numeric": "tabular-nums"})),
        rx.text(cell.text, size="2", custom_attrs={"title": cell.title}),
    )


def _action_button(action: Any, on_click: Any) -> rx.Component:
    """Row or bulk action button, styled after the action variant."""

    def button(variant: str, color_scheme: str | None) -> rx.Component:
        kwargs: dict[str, Any] = {}
        if color_scheme is not None:
            kwargs["color_scheme"] = color_scheme
        return rx.button(
            action.label,
            size="1",
            variant=variant,
            disabled=action.disabled,
            on_click=on_click,
            **kwargs,
        )

    return rx.match(
        action.variant,
        ("primary", button("solid", None)),
        ("danger", button("soft", "red")),
        ("warning", button("soft", "amber")),
        ("ghost", button("ghost", None)),
        button("soft", "gray"),
    )


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

def _header_cell(state_cls: type, header: Any, sticky_header: bool) -> rx.Component:
    style: dict[str, Any] = {"white_space": "nowrap"}
    if sticky_header:
        style.update({"position": "sticky", "top": "0", "z_index": "1", "background": "var(--color-panel-solid)"})

    return rx.table.column_header_cell(
        rx.hstack(
            rx.vstack(
                rx.text(header.label, weight="medium", size="2"),
                rx.cond(
                    header.description != "",
                    rx.text(header.description, size="1", color="var(--gray-9)"),
                ),
                spacing="0",
            ),
            rx.cond(
                header.indicator != "",
                rx.text(
                    header.indicator,
                    size="1",
                    color=rx.cond(header.sort_state == "none", "var(--gray-8)", "var(--accent-11)"),
                ),
            ),
            spacing="1",
            align="center",
        ),
        width=header.width,
        min_width=header.min_width,
        max_width=header.max_width,
        text_align=header.align,
        class_name=header.class_name,
        cursor=rx.cond(header.sortable, "pointer", "default"),
        on_click=state_cls.handle_dt_sort(header.key),
        custom_attrs={
            "aria-sort": rx.match(
                header.sort_state,
                ("asc", "ascending"),
                ("desc", "descending"),
                "none",
            ),
        },
        style=style,
    )


def _header_checked(state_cls: type) -> Any:
    """Tri-state ``checked`` value of the select-all box.

    Radix accepts ``"indeterminate"`` besides ``True``/``False``.
    """
    return rx.match(
        state_cls.dt_header_selection,
        ("checked", True),
        ("indeterminate", "indeterminate"),
        False,
    ).to(bool)  # type: ignore[union-attr]


def _select_all_cell(state_cls: type, sticky_header: bool) -> rx.Component:
    style: dict[str, Any] = {"width": "40px"}
    if sticky_header:
        style.update({"position": "sticky", "top": "0", "z_index": "1", "background": "var(--color-panel-solid)"})
    return rx.table.column_header_cell(
        rx.cond(
            state_cls.dt_multi_select,
            rx.checkbox(
                checked=_header_checked(state_cls),
                on_change=lambda _checked: state_cls.handle_dt_toggle_all(),
                custom_attrs={
                    "aria-label": "Select all rows on this page",
                    "aria-checked": rx.match(
                        state_cls.dt_header_selection,
                        ("checked", "true"),
                        ("indeterminate", "mixed"),
                        "false",
                    ),
                },
            ),
        ),
        style=style,
    )


def _table_header(state_cls: type, show_row_numbers: bool, sticky_header: bool) -> rx.Component:
    cells: list[rx.Component] = []
    if show_row_numbers:
        cells.append(rx.table.column_header_cell("#", width="56px"))
    cells.append(rx.cond(state_cls.dt_selectable, _select_all_cell(state_cls, sticky_header)))
    cells.append(
        rx.foreach(state_cls.dt_headers, lambda header: _header_cell(state_cls, header, sticky_header))
    )
    cells.append(
        rx.cond(
            state_cls.dt_has_actions,
            rx.table.column_header_cell("Actions", text_align="right"),
        )
    )
    return rx.table.header(rx.table.row(*cells))


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------

def _table_row(
    state_cls: type,
    row: Any,
    *,
    striped: bool,
    hoverable: bool,
    show_row_numbers: bool,
) -> rx.Component:
    cells: list[rx.Component] = []
    if show_row_numbers:
        cells.append(rx.table.cell(rx.text(row.row_number, size="1", color="var(--gray-9)")))
    cells.append(
        rx.cond(
            state_cls.dt_selectable,
            rx.table.cell(
                rx.checkbox(
                    checked=row.selected,
                    on_change=lambda _checked: state_cls.handle_dt_toggle_row(row.index),
                    custom_attrs={"aria-label": "Select row"},
                ),
                # The checkbox must not trigger the row click.
                on_click=rx.stop_propagation,
            ),
        )
    )
    cells.append(
        rx.foreach(
            row.cells,
            lambda cell: rx.table.cell(
                _cell_content(cell),
                text_align=cell.align,
                class_name=cell.class_name,
            ),
        )
    )
    cells.append(
        rx.cond(
            state_cls.dt_has_actions,
            rx.table.cell(
                rx.hstack(
                    rx.foreach(
                        row.actions,
                        lambda action: _action_button(
                            action,
                            state_cls.handle_dt_action(action.index, row.index).stop_propagation,
                        ),
                    ),
                    spacing="1",
                    justify="end",
                ),
            ),
        )
    )

    background: Any = "transparent"
    if striped:
        background = rx.cond(row.index % 2 == 1, "var(--gray-a2)", "transparent")

    style: dict[str, Any] = {"cursor": "pointer"}
    if hoverable:
        style["_hover"] = {"background": "var(--gray-a3)"}

    return rx.table.row(
        *cells,
        background=rx.cond(row.selected, "var(--accent-a3)", background),
        on_click=state_cls.handle_dt_row_click(row.index),
        on_double_click=state_cls.handle_dt_row_double_click(row.index),
        custom_attrs={"aria-selected": rx.cond(row.selected, "true", "false")},
        style=style,
    )


def _status_row(state_cls: type, show_row_numbers: bool) -> rx.Component:
    """Single full-width row replacing the body while loading, failed or empty."""
    message = state_cls.dt_status_message
    return rx.table.row(
        rx.table.cell(
            rx.match(
                state_cls.dt_display_state,
                (
                    "loading",
                    rx.hstack(
                        rx.spinner(size="2"),
                        rx.text(message, size="2", color="var(--gray-10)"),
                        spacing="2",
                        align="center",
                        justify="center",
                        padding="2em",
                    ),
                ),
                (
                    "error",
                    rx.callout(
                        message,
                        icon="triangle_alert",
                        color_scheme="red",
                        role="alert",
                        margin="1em",
                    ),
                ),
                rx.center(
                    rx.text(message, size="2", color="var(--gray-10)"),
                    padding="2em",
                ),
            ),
            col_span=state_cls.dt_column_count + (1 if show_row_numbers else 0),
        ),
    )


# ---------------------------------------------------------------------------
# Bars
# ---------------------------------------------------------------------------

def data_table_search_bar(
    state_cls: type,
    *,
    aria_label: str = "Search table",
    debounce_timeout: int = 300,
) -> rx.Component:
    """Return the search box bound to ``handle_dt_search``.

    Hidden when the table has no search keys.

    Args:
        state_cls: The ``rx.State`` subclass that inherits from
            :class:`~reflex_data_table.table_state.DataTableMixin`.
        aria_label: Accessible label of the input.
        debounce_timeout: Milliseconds to wait before sending an edit.

    Returns:
        A Reflex component.
    """
    return rx.cond(
        state_cls.dt_searchable,
        rx.input(
            rx.input.slot(rx.icon("search", size=16)),
            value=state_cls.dt_search,
            on_change=state_cls.handle_dt_search,
            placeholder=state_cls.dt_search_placeholder,
            debounce_timeout=debounce_timeout,
            custom_attrs={"aria-label": aria_label},
            width="100%",
            max_width="360px",
        ),
    )


def data_table_pagination_bar(state_cls: type) -> rx.Component:
    """Return the page control: range summary, page buttons, page-size select.

    The page buttons hide when everything fits on one page; the summary and
    the page-size select stay as long as there is something to show, so a
    larger page size can always be undone.

    Args:
        state_cls: The ``rx.State`` subclass that inherits from
            :class:`~reflex_data_table.table_state.DataTableMixin`.

    Returns:
        A Reflex component.
    """
    page_buttons = rx.foreach(
        state_cls.dt_page_buttons,
        lambda button: rx.cond(
            button.kind == "ellipsis",
            rx.text(button.label, size="2", color="var(--gray-9)", padding_x="0.25em"),
            rx.cond(
                button.active,
                rx.button(
                    button.label,
                    size="1",
                    variant="solid",
                    custom_attrs={"aria-current": "page"},
                ),
                rx.button(
                    button.label,
                    size="1",
                    variant="soft",
                    color_scheme="gray",
                    on_click=state_cls.handle_dt_page(button.page),
                ),
            ),
        ),
    )

    navigation = rx.hstack(
        rx.button(
            "«",
            size="1",
            variant="soft",
            color_scheme="gray",
            disabled=~state_cls.dt_has_previous,
            on_click=state_cls.handle_dt_page(1),
            custom_attrs={"aria-label": "First page"},
        ),
        rx.button(
            "‹",
            size="1",
            variant="soft",
            color_scheme="gray",
            disabled=~state_cls.dt_has_previous,
            on_click=state_cls.handle_dt_previous_page,
            custom_attrs={"aria-label": "Previous page"},
        ),
        page_buttons,
        rx.button(
            "›",
            size="1",
            variant="soft",
            color_scheme="gray",
            disabled=~state_cls.dt_has_next,
            on_click=state_cls.handle_dt_next_page,
            custom_attrs={"aria-label": "Next page"},
        ),
        rx.button(
            "»",
            size="1",
            variant="soft",
            color_scheme="gray",
            disabled=~state_cls.dt_has_next,
            on_click=state_cls.handle_dt_last_page,
            custom_attrs={"aria-label": "Last page"},
        ),
        spacing="1",
        align="center",
    )

    return rx.cond(
        state_cls.dt_filtered_count > 0,
        rx.hstack(
            rx.text(state_cls.dt_range_summary, size="2", color="var(--gray-10)"),
            rx.spacer(),
            rx.cond(state_cls.dt_has_pagination, navigation),
            rx.select(
                state_cls.dt_page_size_options,
                value=state_cls.dt_page_size.to(str),  # type: ignore[union-attr]
                on_change=state_cls.handle_dt_page_size,
                size="1",
            ),
            width="100%",
            align="center",
            spacing="3",
            padding_top="0.75em",
        ),
    )


def data_table_bulk_action_bar(state_cls: type) -> rx.Component:
    """Return the bar of bulk actions, shown while at least one row is selected.

    Args:
        state_cls: The ``rx.State`` subclass that inherits from
            :class:`~reflex_data_table.table_state.DataTableMixin`.

    Returns:
        A Reflex component.
    """
    return rx.cond(
        state_cls.dt_selected_count > 0,
        rx.hstack(
            rx.text(
                state_cls.dt_selected_count.to(str),  # type: ignore[union-attr]
                " selected",
                size="2",
                weight="medium",
            ),
            rx.foreach(
                state_cls.dt_bulk_actions,
                lambda action: _action_button(action, state_cls.handle_dt_bulk_action(action.id)),
            ),
            rx.spacer(),
            rx.button(
                "Clear selection",
                size="1",
                variant="ghost",
                on_click=state_cls.clear_dt_selection,
            ),
            width="100%",
            align="center",
            spacing="2",
            padding="0.4em 0.8em",
            border_radius="6px",
            background="var(--accent-a2)",
            border="1px solid var(--accent-a5)",
        ),
    )


def data_table_detail_box(state_cls: type) -> rx.Component:
    """Return a detail box showing the fields of the last clicked row.

    Args:
        state_cls: The ``rx.State`` subclass that inherits from
            :class:`~reflex_data_table.table_state.DataTableMixin`.

    Returns:
        A Reflex component.
    """
    return rx.box(
        rx.text(
            state_cls.dt_selected_info,
            white_space="pre-wrap",
            size="2",
        ),
        margin_top="1em",
        padding="1em",
        border_radius="8px",
        background="var(--gray-a3)",
    )


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

def _data_table(
    state_cls: type,
    *,
    style: TableStyle | None = None,
    striped: bool | None = None,
    hoverable: bool | None = None,
    bordered: bool | None = None,
    compact: bool | None = None,
    sticky_header: bool | None = None,
    show_row_numbers: bool | None = None,
    show_search: bool = True,
    show_bulk_actions: bool = True,
    show_pagination: bool = True,
    height: str | None = None,
    aria_label: str = "Data table",
    search_aria_label: str = "Search table",
    **extra_props: Any,
) -> rx.Component:
    """Return a complete table bound to a :class:`DataTableMixin` state.

    Search bar, bulk-action bar, the table itself and the page control,
    already connected to the mixin's event handlers and computed vars.

    Args:
        state_cls: The ``rx.State`` subclass that also inherits from
            :class:`~reflex_data_table.table_state.DataTableMixin`.
        style: Presentation flags (defaults: striped, hoverable).  The
            individual flag arguments below override it.
        striped: Shade every other row.
        hoverable: Highlight the row under the pointer.
        bordered: Draw a border around the table.
        compact: Use the small table size.
        sticky_header: Keep the header visible while scrolling (use with
            *height*).
        show_row_numbers: Prepend the 1-based row number across pages.
        show_search: Show the search bar (when the table has search keys).
        show_bulk_actions: Show the bulk-action bar while rows are selected.
        show_pagination: Show the page control.
        height: Optional max height of the scrollable table area.
        aria_label: Accessible label of the table.
        search_aria_label: Accessible label of the search box.
        **extra_props: Additional props forwarded to the outer stack.

    Returns:
        A Reflex component.
    """
    overrides = {
        "striped": striped,
        "hoverable": hoverable,
        "bordered": bordered,
        "compact": compact,
        "sticky_header": sticky_header,
        "show_row_numbers": show_row_numbers,
    }
    style = replace(
        style or TableStyle(),
        **{name: value for name, value in overrides.items() if value is not None},
    )

    body = rx.table.body(
        rx.cond(
            state_cls.dt_display_state == "populated",
            rx.foreach(
                state_cls.dt_rows,
                lambda row: _table_row(
                    state_cls,
                    row,
                    striped=style.striped,
                    hoverable=style.hoverable,
                    show_row_numbers=style.show_row_numbers,
                ),
            ),
            _status_row(state_cls, style.show_row_numbers),
        ),
    )

    table = rx.table.root(
        _table_header(state_cls, style.show_row_numbers, style.sticky_header),
        body,
        variant="surface" if style.bordered else "ghost",
        size="1" if style.compact else "2",
        width="100%",
        custom_attrs={
            "aria-label": aria_label,
            "aria-busy": rx.cond(state_cls.dt_display_state == "loading", "true", "false"),
        },
    )

    scroll_props: dict[str, Any] = {"width": "100%", "overflow_x": "auto"}
    if height is not None:
        scroll_props.update({"max_height": height, "overflow_y": "auto"})

    children: list[rx.Component] = []
    if show_search:
        children.append(data_table_search_bar(state_cls, aria_label=search_aria_label))
    if show_bulk_actions:
        children.append(data_table_bulk_action_bar(state_cls))
    children.append(rx.box(table, **scroll_props))
    if show_pagination:
        children.append(data_table_pagination_bar(state_cls))

    extra_props.setdefault("width", "100%")
    extra_props.setdefault("spacing", "2")
    return rx.vstack(*children, **extra_props)


# ---------------------------------------------------------------------------
# Namespace (so users can write ``data_table(...)`` and ``data_table.search_bar``)
# ---------------------------------------------------------------------------

class DataTableNamespace(rx.ComponentNamespace):
    """Namespace for the data table component family."""

    search_bar = staticmethod(data_table_search_bar)
    pagination_bar = staticmethod(data_table_pagination_bar)
    bulk_action_bar = staticmethod(data_table_bulk_action_bar)
    detail_box = staticmethod(data_table_detail_box)
    __call__ = staticmethod(_data_table)


data_table = DataTableNamespace()
