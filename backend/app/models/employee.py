"""Employee models: camelCase on the wire and in Cosmos DB."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def blank_to_none(value: Any) -> Any:
    """An empty or whitespace-only string clears the field."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EmployeeCreate(CamelModel):
    first_name: str
    surname: str
    email: str
    employee_number: str
    role: str
    birth_date: date | None = None
    salary: float | None = Field(default=None, ge=0)
    manager: str | None = None
    is_active: bool = True

    @field_validator("birth_date", mode="before")
    @classmethod
    def clear_blank_birth_date(cls, value: Any) -> Any:
        return blank_to_none(value)


class EmployeeUpdate(CamelModel):
    """Partial update: only fields present in the request body are applied."""

    first_name: str | None = None
    surname: str | None = None
    email: str | None = None
    employee_number: str | None = None
    role: str | None = None
    birth_date: date | None = None
    salary: float | None = Field(default=None, ge=0)
    manager: str | None = None
    is_active: bool | None = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def clear_blank_birth_date(cls, value: Any) -> Any:
        return blank_to_none(value)


class Employee(CamelModel):
    """Full stored employee record."""

    id: str
    first_name: str
    surname: str
    email: str
    employee_number: str
    role: str
    birth_date: date | None = None
    salary: float | None = None
    manager: str | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class EmployeePage(BaseModel):
    data: list[Employee]
    total: int
    page: int
    limit: int


class OrgEmployee(CamelModel):
    """Lightweight projection used to build the organization chart."""

    id: str
    name: str
    surname: str
    email: str
    role: str
    employee_number: str
    manager: str | None = None
    created_at: datetime | None = None


class RoleCount(BaseModel):
    role: str
    count: int


class DashboardStats(CamelModel):
    total_employees: int
    active_employees: int
    role_distribution: dict[str, int]
    active_roles: int
    unassigned_employees: int
    average_salary: int | None = None
    recent_hires: list[Employee]
    top_roles: list[RoleCount]
