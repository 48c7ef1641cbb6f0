"""Shared role fixtures."""

from __future__ import annotations

import pytest

from rolecore import Catalog, Role


def perm(resource: str, action: str) -> dict[str, str]:
    return {"resource": resource, "action": action}


@pytest.fixture
def demo_roles() -> list[Role]:
    """admin → moderator → customer chain from the simple RBAC demo."""
    return [
        Role(name="admin", permissions=[], inheritsFrom=["moderator"]),
        Role(name="moderator", permissions=[perm("products", "create")], inheritsFrom=["customer"]),
        Role(name="customer", permissions=[perm("products", "view")], inheritsFrom=[]),
    ]


@pytest.fixture
def products_catalog() -> Catalog:
    return Catalog.from_metadata(
        {"resources": [{"resource": "products", "permissions": ["view", "create", "delete"]}]}
    )
