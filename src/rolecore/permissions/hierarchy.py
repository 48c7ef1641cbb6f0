"""Role hierarchy tree for display.

Roots are roles without a resolvable parent. A role with several parents
appears under each of them. Cycles are cut at the first repeated name on
a path, so every node is finite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .inheritance import index_roles
from .models import Role


@dataclass
class HierarchyNode:
    role: Role
    level: int = 0
    children: list["HierarchyNode"] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.role.name

    def walk(self) -> Iterable["HierarchyNode"]:
        """Depth-first, pre-order traversal."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def build_hierarchy(roles: Iterable[Role]) -> list[HierarchyNode]:
    """Build the inheritance forest, parents above children.

    Example::

        forest = build_hierarchy(roles)
        for node in forest[0].walk():
            print("  " * node.level + node.name)
    """
    index = index_roles(roles)
    children: dict[str, list[Role]] = {name: [] for name in index}
    roots: list[Role] = []

    for role in index.values():
        parents = [p for p in role.inherits_from if p in index]
        if not parents:
            roots.append(role)
        for parent in dict.fromkeys(parents):
            children[parent].append(role)

    forest: list[HierarchyNode] = []
    for root in roots:
        top = HierarchyNode(role=root)
        forest.append(top)
        stack: list[tuple[HierarchyNode, frozenset[str]]] = [(top, frozenset({root.name}))]
        while stack:
            node, path = stack.pop()
            for child in children[node.name]:
                if child.name in path:
                    continue
                child_node = HierarchyNode(role=child, level=node.level + 1)
                node.children.append(child_node)
                stack.append((child_node, path | {child.name}))
    return forest


__all__ = [
    "HierarchyNode",
    "build_hierarchy",
]
