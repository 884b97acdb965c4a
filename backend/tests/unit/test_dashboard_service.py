from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.models.employee import Employee
from app.services.dashboard_service import compute_dashboard_stats

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def employee(idx: int, role: str, *, days_ago: int = 400, salary: float | None = None, manager: str | None = None):
    created = NOW - timedelta(days=days_ago)
    return Employee(
        id=str(idx),
        first_name=f"F{idx}",
        surname=f"S{idx}",
        email=f"{idx}@x.com",
        employee_number=f"E{idx}",
        role=role,
        salary=salary,
        manager=manager,
        is_active=idx % 2 == 0,
        created_at=created,
        updated_at=created,
    )


def test_empty_population():
    stats = compute_dashboard_stats([], now=NOW)

    assert stats.total_employees == 0
    assert stats.average_salary is None
    assert stats.recent_hires == []
    assert stats.top_roles == []


def test_aggregates():
    people = [
        employee(1, "Software Engineer", salary=100, days_ago=10),
        employee(2, "Software Engineer", salary=201, manager="1", days_ago=5),
        employee(3, "CEO", days_ago=120),
        employee(4, "Designer", salary=50, manager="3", days_ago=1),
        employee(5, "CEO", manager="3"),
        employee(6, "Intern", manager="1", days_ago=89),
    ]

    stats = compute_dashboard_stats(people, now=NOW)

    assert stats.total_employees == 6
    assert stats.active_employees == 3
    assert stats.role_distribution == {"Software Engineer": 2, "CEO": 2, "Designer": 1, "Intern": 1}
    assert stats.active_roles == 4
    assert stats.unassigned_employees == 2
    assert stats.average_salary == 117
    assert [e.id for e in stats.recent_hires] == ["4", "2", "1", "6"]
    assert [(r.role, r.count) for r in stats.top_roles] == [
        ("Software Engineer", 2),
        ("CEO", 2),
        ("Designer", 1),
        ("Intern", 1),
    ]


def test_recent_hires_capped_at_five():
    people = [employee(i, "Intern", days_ago=i) for i in range(1, 9)]

    stats = compute_dashboard_stats(people, now=NOW)

    assert [e.id for e in stats.recent_hires] == ["1", "2", "3", "4", "5"]


def test_serializes_camel_case():
    body = compute_dashboard_stats([employee(1, "CEO")], now=NOW).model_dump(by_alias=True)
    assert {"totalEmployees", "roleDistribution", "unassignedEmployees", "recentHires", "topRoles"} <= set(body)
