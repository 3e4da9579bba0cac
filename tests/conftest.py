from typing import Any

import pytest

from reflex_data_table.models import Column


@pytest.fixture
def numbered_records() -> list[dict[str, Any]]:
    return [{"id": i, "name": f"Employee {i}"} for i in range(1, 13)]


@pytest.fixture
def leave_logs() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "employee_name": "Nguyen Van An",
            "employee_email": "an.nguyen@acme.com",
            "leave_type": "annual",
            "start_date": "2026-03-02",
            "end_date": "2026-03-04",
            "days": 3,
            "status": "approved",
            "reason": "Family trip",
            "approver_name": "Tran Thi Binh",
        },
        {
            "id": 2,
            "employee_name": "Le Minh Chau",
            "employee_email": "chau.le@other.com",
            "leave_type": "sick",
            "start_date": "2026-03-10",
            "end_date": "2026-03-10",
            "days": 1,
            "status": "pending",
            "reason": None,
            "approver_name": None,
        },
        {
            "id": 3,
            "employee_name": "Pham Quoc Dung",
            "employee_email": "dung.pham@acme.com",
            "leave_type": "unpaid",
            "start_date": "2026-04-01",
            "end_date": "2026-04-15",
            "days": 11,
            "status": "rejected",
            "reason": "Extended personal leave",
            "approver_name": "Tran Thi Binh",
        },
    ]


@pytest.fixture
def leave_columns() -> list[Column]:
    return [
        Column("employee_name", "Employee", sortable=True),
        Column("employee_email", "Email"),
        Column("leave_type", "Type"),
        Column("days", "Days", sortable=True, align="right"),
        Column("status", "Status", sortable=True),
    ]
