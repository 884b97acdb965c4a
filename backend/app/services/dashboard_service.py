from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from app.models.employee import DashboardStats, Employee, RoleCount

RECENT_HIRE_WINDOW = timedelta(days=90)
RECENT_HIRE_COUNT = 5
TOP_ROLE_COUNT = 4


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def compute_dashboard_stats(employees: Sequence[Employee], now: datetime | None = None) -> DashboardStats:
    now = _as_utc(now or datetime.now(timezone.utc))

    roles = Counter(emp.role for emp in employees)
    salaries = [emp.salary for emp in employees if emp.salary is not None]

    cutoff = now - RECENT_HIRE_WINDOW
    recent = sorted(
        (emp for emp in employees if _as_utc(emp.created_at) > cutoff),
        key=lambda emp: _as_utc(emp.created_at),
        reverse=True,
    )

    return DashboardStats(
        total_employees=len(employees),
        active_employees=sum(1 for emp in employees if emp.is_active),
        role_distribution=dict(roles),
        active_roles=len(roles),
        unassigned_employees=sum(1 for emp in employees if not emp.manager),
        average_salary=round(sum(salaries) / len(salaries)) if salaries else None,
        recent_hires=recent[:RECENT_HIRE_COUNT],
        top_roles=[RoleCount(role=role, count=count) for role, count in roles.most_common(TOP_ROLE_COUNT)],
    )
