from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from app.models.employee import OrgEmployee

ORPHAN_LEVEL = -1


class NodeKind(str, Enum):
    root = "root"
    interior = "interior"
    leaf = "leaf"
    orphan = "orphan"


class HierarchyNode(BaseModel):
    id: str
    level: int
    kind: NodeKind
    parent: str | None = None
    employee: OrgEmployee


class HierarchyEdge(BaseModel):
    id: str
    source: str
    target: str


class Hierarchy(BaseModel):
    nodes: list[HierarchyNode]
    edges: list[HierarchyEdge]

    def levels(self) -> dict[str, int]:
        return {node.id: node.level for node in self.nodes}
