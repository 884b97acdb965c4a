#!/usr/bin/env python3
"""Create the Cosmos DB database and containers, optionally seeding employees.

Run from the backend/ directory:

    python3 scripts/provision_containers.py [--seed employees.json] [--dry-run] [--verbose]

The employees container is created with unique keys on /email and
/employeeNumber. Cosmos DB only accepts a unique key policy at creation
time, so an existing container without it must be recreated.

The seed file is a JSON list of employee objects in the API's camelCase
shape. A ``manager`` given as an employee number is resolved to the id of
the employee seeded (or already stored) under that number.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from app.core.config import Settings  # noqa: E402
from app.core.exceptions import ConflictError, ValidationError  # noqa: E402
from app.models.employee import EmployeeCreate, EmployeeUpdate  # noqa: E402
from app.services.database import cosmos_database  # noqa: E402
from app.services.employee_service import EmployeeService, canonical_employee_number  # noqa: E402
from app.services.item_service import ItemService  # noqa: E402

logger = logging.getLogger(__name__)


def load_seed(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Seed file must contain a JSON list, got {type(data).__name__}")
    return data


def split_manager_refs(records: list[dict[str, Any]]) -> tuple[list[dict[str, Any]], dict[str, str]]:
    """Strip ``manager`` from each record, returning employeeNumber → manager employeeNumber."""
    stripped: list[dict[str, Any]] = []
    managers: dict[str, str] = {}
    for record in records:
        body = {k: v for k, v in record.items() if k != "manager"}
        manager = record.get("manager")
        if manager:
            managers[canonical_employee_number(record.get("employeeNumber"))] = canonical_employee_number(manager)
        stripped.append(body)
    return stripped, managers


async def seed_employees(service: EmployeeService, records: list[dict[str, Any]]) -> tuple[int, int]:
    bodies, managers = split_manager_refs(records)
    ids_by_number: dict[str, str] = {}
    created = skipped = 0

    for body in bodies:
        try:
            employee = await service.create(EmployeeCreate.model_validate(body))
        except (ConflictError, ValidationError) as e:
            logger.warning("Skipping %s: %s", body.get("employeeNumber"), e.detail)
            skipped += 1
            continue
        ids_by_number[employee.employee_number] = employee.id
        created += 1

    for number, manager_number in managers.items():
        employee_id = ids_by_number.get(number)
        manager_id = ids_by_number.get(manager_number) or await service.find_id_by_employee_number(manager_number)
        if not employee_id or not manager_id:
            logger.warning("Cannot link %s to manager %s", number, manager_number)
            continue
        try:
            await service.update(employee_id, EmployeeUpdate(manager=manager_id))
        except ValidationError as e:
            logger.warning("Cannot link %s to manager %s: %s", number, manager_number, e.detail)

    return created, skipped


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Provision Cosmos DB containers for EmpireHR")
    parser.add_argument("--seed", type=Path, help="JSON file with employees to insert")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the seed file without touching Cosmos DB",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (DEBUG) logging")
    return parser.parse_args(argv)


async def provision(args: argparse.Namespace) -> None:
    settings = Settings()
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    records = load_seed(args.seed) if args.seed else []
    if args.dry_run:
        for record in records:
            EmployeeCreate.model_validate(record)
        logger.info("[DRY RUN] %d seed records are valid", len(records))
        return

    await cosmos_database.initialize(settings)
    if not cosmos_database.initialized:
        raise SystemExit("COSMOS_DB_ENDPOINT and COSMOS_DB_KEY must be set")

    try:
        employees = EmployeeService()
        await employees.initialize(settings)
        await ItemService().initialize(settings)

        if records:
            created, skipped = await seed_employees(employees, records)
            logger.info("Seeded %d employees (%d skipped)", created, skipped)
    finally:
        await cosmos_database.close()

    logger.info("Provisioning complete")


def main() -> None:
    args = parse_args()
    asyncio.run(provision(args))


if __name__ == "__main__":
    main()
