from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_current_admin, get_employee_service
from app.models.auth import AdminIdentity
from app.models.employee import DashboardStats, Employee, EmployeeCreate, EmployeePage, EmployeeUpdate, OrgEmployee
from app.models.hierarchy import Hierarchy
from app.services.dashboard_service import compute_dashboard_stats
from app.services.employee_service import EmployeeService
from app.services.hierarchy import build_hierarchy, filter_org_employees

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=EmployeePage)
async def list_employees(
    page: int | None = None,
    limit: int | None = None,
    q: str | None = None,
    sort: str | None = None,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.list(q=q, sort=sort, page=page, limit=limit)


@router.get("/all-for-org", response_model=list[OrgEmployee])
async def list_employees_for_org(
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.list_for_org()


@router.get("/org-chart", response_model=Hierarchy)
async def org_chart(
    q: str | None = None,
    role: str | None = None,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    everyone = await service.list_for_org()
    shown = filter_org_employees(everyone, q=q, role=role)
    return build_hierarchy(shown, known_ids=[emp.id for emp in everyone])


@router.get("/stats", response_model=DashboardStats)
async def employee_stats(
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return compute_dashboard_stats(await service.list_all())


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(
    employee_id: str,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.find_by_id(employee_id)


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.create(payload)


@router.patch("/{employee_id}", response_model=Employee)
async def update_employee(
    employee_id: str,
    payload: EmployeeUpdate,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    return await service.update(employee_id, payload)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: str,
    admin: AdminIdentity = Depends(get_current_admin),  # noqa: B008
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    await service.delete(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
