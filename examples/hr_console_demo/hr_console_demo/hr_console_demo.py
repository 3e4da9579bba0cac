"""Example HR console built on the data table engine.

Two tabs, each a thin configuration of ``DataTableMixin`` + ``data_table``:
  1. Leave logs -- a small in-memory list of leave requests (client mode),
     with per-row Approve / Reject actions and a bulk approve.
  2. Attendance logs -- a generated year of daily attendance rows held in a
     polars LazyFrame (server mode): search, sort and paging run as polars
     queries and only the current page is collected.
"""

import datetime
import random
from typing import Any

import polars as pl
import reflex as rx

from reflex_data_table import (
    Action,
    BulkAction,
    CellView,
    Column,
    DataTableMixin,
    data_table,
    sort_records,
)

# ---------------------------------------------------------------------------
# Status badges
# ---------------------------------------------------------------------------

LEAVE_STATUS_TONES: dict[str, str] = {
    "approved": "green",
    "pending": "amber",
    "rejected": "red",
}

ATTENDANCE_STATUS_TONES: dict[str, str] = {
    "present": "green",
    "absent": "red",
    "late": "amber",
    "half_day": "orange",
    "leave": "blue",
}


def _status_badge(tones: dict[str, str]):
    """Return a cell renderer showing the status as an upper-case badge."""

    def render(value: Any, item: Any, index: int) -> CellView:
        if value is None:
            return CellView(kind="placeholder", text="N/A")
        return CellView(
            kind="badge",
            text=str(value).replace("_", " ").upper(),
            tone=tones.get(str(value), "gray"),
        )

    return render


def _days(value: Any, item: Any, index: int) -> str:
    return f"{value} day" if value == 1 else f"{value} days"


# ---------------------------------------------------------------------------
# Sample data builders
# ---------------------------------------------------------------------------

EMPLOYEES: list[tuple[str, str]] = [
    ("Nguyen Van An", "an.nguyen@acme.com"),
    ("Tran Thi Binh", "binh.tran@acme.com"),
    ("Le Minh Chau", "chau.le@acme.com"),
    ("Pham Quoc Dung", "dung.pham@acme.com"),
    ("Hoang Gia Huy", "huy.hoang@acme.com"),
    ("Vo Thanh Lam", "lam.vo@acme.com"),
    ("Dang Thu Trang", "trang.dang@acme.com"),
]


def _build_leave_logs() -> list[dict[str, Any]]:
    """Create sample leave requests."""
    rng = random.Random(7)
    leave_types = ["annual", "sick", "unpaid", "maternity"]
    reasons = [
        "Family trip",
        None,
        "Medical appointment and follow-up examination at the district hospital",
        "Personal matters",
    ]
    logs: list[dict[str, Any]] = []
    for i in range(1, 38):
        name, email = EMPLOYEES[i % len(EMPLOYEES)]
        start = datetime.date(2026, 1, 5) + datetime.timedelta(days=rng.randint(0, 200))
        days = rng.randint(1, 10)
        status = rng.choice(["pending", "approved", "rejected"])
        logs.append(
            {
                "id": i,
                "employee_name": name,
                "employee_email": email,
                "leave_type": rng.choice(leave_types),
                "start_date": start.isoformat(),
                "end_date": (start + datetime.timedelta(days=days - 1)).isoformat(),
                "days": days,
                "status": status,
                "reason": rng.choice(reasons),
                "approver_name": None if status == "pending" else EMPLOYEES[0][0],
                "created_at": (start - datetime.timedelta(days=14)).isoformat(),
            }
        )
    return logs


def _build_attendance_lazyframe(days: int = 365) -> pl.LazyFrame:
    """Create a LazyFrame with one attendance row per employee and working day."""
    rng = random.Random(11)
    dates = [
        datetime.date(2025, 1, 1) + datetime.timedelta(days=d)
        for d in range(days)
    ]
    rows: dict[str, list[Any]] = {
        "employee_name": [],
        "date": [],
        "check_in": [],
        "check_out": [],
        "status": [],
        "total_hours": [],
    }
    for date in dates:
        if date.weekday() >= 5:
            continue
        for name, _email in EMPLOYEES:
            status = rng.choices(
                ["present", "late", "absent", "half_day", "leave"],
                weights=[70, 12, 5, 5, 8],
            )[0]
            worked = status in ("present", "late", "half_day")
            start_minute = 8 * 60 + (rng.randint(15, 90) if status == "late" else rng.randint(-10, 10))
            hours = 4.0 if status == "half_day" else round(rng.uniform(7.5, 9.5), 2)
            rows["employee_name"].append(name)
            rows["date"].append(date)
            rows["check_in"].append(f"{start_minute // 60:02d}:{start_minute % 60:02d}" if worked else None)
            end_minute = start_minute + int(hours * 60)
            rows["check_out"].append(f"{end_minute // 60:02d}:{end_minute % 60:02d}" if worked else None)
            rows["status"].append(status)
            rows["total_hours"].append(hours if worked else None)
    return pl.LazyFrame(rows)


# ---------------------------------------------------------------------------
# Column configuration
# ---------------------------------------------------------------------------

LEAVE_COLUMNS: list[Column] = [
    Column("id", "ID", sortable=True, render=lambda value, item, index: f"#{value}"),
    Column("employee_name", "Employee", sortable=True),
    Column("employee_email", "Email"),
    Column("leave_type", "Type", sortable=True),
    Column("start_date", "Start", sortable=True),
    Column("end_date", "End", sortable=True),
    Column("days", "Days", sortable=True, align="right", render=_days),
    Column("status", "Status", sortable=True, render=_status_badge(LEAVE_STATUS_TONES)),
    Column("reason", "Reason"),
    Column("approver_name", "Approver"),
]

ATTENDANCE_COLUMNS: list[Column] = [
    Column("employee_name", "Employee", sortable=True),
    Column("date", "Date", sortable=True),
    Column("check_in", "Check In", sortable=True),
    Column("check_out", "Check Out", sortable=True),
    Column("status", "Status", sortable=True, render=_status_badge(ATTENDANCE_STATUS_TONES)),
    Column("total_hours", "Hours", sortable=True, align="right"),
]


def _is_decided(item: Any) -> bool:
    return item["status"] != "pending"


LEAVE_ACTIONS: list[Action] = [
    Action("Approve", on_click="approve_leave", variant="primary", disabled=_is_decided),
    Action("Reject", on_click="reject_leave", variant="danger", disabled=_is_decided),
]

LEAVE_BULK_ACTIONS: list[BulkAction] = [
    BulkAction("approve", "Approve selected", on_click="approve_leaves", variant="primary"),
]


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class LeaveLogState(DataTableMixin, rx.State):
    """Leave requests, held in memory (client mode)."""

    def load(self) -> None:
        self.set_table_records(
            _build_leave_logs(),
            LEAVE_COLUMNS,
            search_keys=["employee_name", "employee_email", "leave_type", "status", "reason"],
            search_placeholder="Search by employee, type, status...",
            actions=LEAVE_ACTIONS,
            bulk_actions=LEAVE_BULK_ACTIONS,
            page_size=10,
            empty_message="No leave requests match your search.",
        )

    def approve_leave(self, item: dict[str, Any], index: int):
        self._set_status([item["id"]], "approved")
        return rx.toast.success(f"Approved leave #{item['id']} for {item['employee_name']}")

    def reject_leave(self, item: dict[str, Any], index: int):
        self._set_status([item["id"]], "rejected")
        return rx.toast.info(f"Rejected leave #{item['id']}")

    def approve_leaves(self, ids: list[int]):
        pending = [r["id"] for r in self._dt_source if r["id"] in ids and r["status"] == "pending"]
        self._set_status(pending, "approved")
        self._dt_selected = []
        return rx.toast.success(f"Approved {len(pending)} leave request(s)")

    def _set_status(self, ids: list[int], status: str) -> None:
        updated = [
            {**record, "status": status, "approver_name": EMPLOYEES[0][0]}
            if record["id"] in ids
            else record
            for record in self._dt_source
        ]
        self._dt_source = updated
        self._dt_records = sort_records(updated, self._dt_sort())


class AttendanceState(DataTableMixin, rx.State):
    """A year of attendance rows in a LazyFrame (server mode)."""

    def load(self):
        yield from self.set_table_lazyframe(
            _build_attendance_lazyframe(),
            ATTENDANCE_COLUMNS,
            search_keys=["employee_name", "status"],
            search_placeholder="Search by employee or status...",
            selectable=False,
            page_size=25,
            page_size_options=(25, 50, 100),
        )


# ---------------------------------------------------------------------------
# UI components
# ---------------------------------------------------------------------------

def leave_tab() -> rx.Component:
    return rx.box(
        rx.text(
            "Leave requests kept in memory. Search, sort and page through them; "
            "approve or reject pending requests row by row or in bulk.",
            margin_bottom="1em",
            color="var(--gray-11)",
        ),
        rx.cond(
            LeaveLogState.dt_loaded,
            data_table(LeaveLogState, show_row_numbers=True, aria_label="Leave logs"),
            rx.spinner(),
        ),
        data_table.detail_box(LeaveLogState),
        padding_top="1em",
    )


def attendance_tab() -> rx.Component:
    return rx.box(
        rx.text(
            "Daily attendance for every employee over a year, browsed page by page. "
            "Only the visible page is collected from the polars LazyFrame.",
            margin_bottom="1em",
            color="var(--gray-11)",
        ),
        rx.text(AttendanceState.dt_stats, size="1", color="var(--gray-9)", margin_bottom="0.5em"),
        rx.cond(
            AttendanceState.dt_loaded,
            data_table(
                AttendanceState,
                compact=True,
                sticky_header=True,
                height="600px",
                aria_label="Attendance logs",
            ),
            rx.spinner(),
        ),
        padding_top="1em",
    )


def index() -> rx.Component:
    return rx.box(
        rx.heading("HR Console", size="7", margin_bottom="0.5em"),
        rx.tabs.root(
            rx.tabs.list(
                rx.tabs.trigger("Leave Logs", value="leave"),
                rx.tabs.trigger("Attendance Logs", value="attendance"),
            ),
            rx.tabs.content(leave_tab(), value="leave"),
            rx.tabs.content(attendance_tab(), value="attendance"),
            default_value="leave",
        ),
        padding="2em",
        max_width="1400px",
        margin="0 auto",
    )


app = rx.App()
app.add_page(index, on_load=[LeaveLogState.load, AttendanceState.load])
