"""Management hierarchy reconstruction from a flat list of employees.

Employees are indexed by id and traversed by key, never by object
reference, so cycle safety and orphan detection do not depend on the
shape of the input. Layout (coordinates) is left to the client.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from app.models.employee import OrgEmployee
from app.models.hierarchy import (
    ORPHAN_LEVEL,
    Hierarchy,
    HierarchyEdge,
    HierarchyNode,
    NodeKind,
)


def build_hierarchy(
    employees: Sequence[OrgEmployee],
    known_ids: Iterable[str] | None = None,
) -> Hierarchy:
    """Resolve manager references into a forest.

    ``employees`` is the set being displayed. ``known_ids`` is every
    employee id that exists; a manager outside the displayed set but in
    ``known_ids`` was filtered out, so its report becomes a root. A manager
    missing from ``known_ids`` dangles and its report is an orphan.

    An orphan keeps level -1, but its own reports are still linked to it:
    they are numbered from the orphan as if it sat at level 0, so a direct
    report is level 1. Members of a manager cycle that no root or orphan
    reaches are orphans without edges.
    """
    by_id: dict[str, OrgEmployee] = {}
    for emp in employees:
        by_id.setdefault(emp.id, emp)

    known = set(by_id)
    if known_ids is not None:
        known.update(known_ids)

    reports: dict[str, list[str]] = {}
    roots: list[str] = []
    orphans: list[str] = []
    for emp_id, emp in by_id.items():
        manager = emp.manager
        if not manager or manager == emp_id:
            roots.append(emp_id)
        elif manager in by_id:
            reports.setdefault(manager, []).append(emp_id)
        elif manager in known:
            roots.append(emp_id)
        else:
            orphans.append(emp_id)

    levels: dict[str, int] = {}
    parents: dict[str, str | None] = {}
    edges: list[HierarchyEdge] = []

    for root_id in roots:
        _walk(root_id, reports, levels, parents, edges)
    for orphan_id in orphans:
        _walk(orphan_id, reports, levels, parents, edges, orphan=True)

    managers = {edge.source for edge in edges}
    nodes = [
        HierarchyNode(
            id=emp_id,
            level=levels.get(emp_id, ORPHAN_LEVEL),
            kind=_classify(levels.get(emp_id, ORPHAN_LEVEL), emp_id in managers),
            parent=parents.get(emp_id),
            employee=emp,
        )
        for emp_id, emp in by_id.items()
    ]
    return Hierarchy(nodes=nodes, edges=edges)


def _walk(
    start: str,
    reports: dict[str, list[str]],
    levels: dict[str, int],
    parents: dict[str, str | None],
    edges: list[HierarchyEdge],
    *,
    orphan: bool = False,
) -> None:
    """Depth-first, mark-on-visit traversal of ``start`` and its reports."""
    depth: dict[str, int] = {}
    stack: list[tuple[str, str | None]] = [(start, None)]
    while stack:
        current, parent = stack.pop()
        if current in levels:
            continue
        depth[current] = 0 if parent is None else depth[parent] + 1
        levels[current] = ORPHAN_LEVEL if orphan and parent is None else depth[current]
        parents[current] = parent
        if parent is not None:
            edges.append(HierarchyEdge(id=f"{parent}-{current}", source=parent, target=current))
        # reversed so siblings pop in insertion order
        for child_id in reversed(reports.get(current, [])):
            if child_id not in levels:
                stack.append((child_id, current))


def _classify(level: int, has_reports: bool) -> NodeKind:
    if level == ORPHAN_LEVEL:
        return NodeKind.orphan
    if level == 0:
        return NodeKind.root
    return NodeKind.interior if has_reports else NodeKind.leaf


def filter_org_employees(
    employees: Sequence[OrgEmployee],
    q: str | None = None,
    role: str | None = None,
) -> list[OrgEmployee]:
    """Apply the org chart's search box and role selector."""
    result = list(employees)
    term = (q or "").strip().lower()
    if term:
        result = [
            emp
            for emp in result
            if term in emp.name.lower() or term in emp.surname.lower() or term in emp.employee_number.lower()
        ]
    if role:
        result = [emp for emp in result if emp.role == role]
    return result
