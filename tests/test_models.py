"""Tests for rolecore.permissions.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rolecore import Permission, ResolvedPermission, Role


class TestPermission:
    """Tests for Permission."""

    def test_structural_equality(self) -> None:
        """Two permissions with the same pair are equal and hash alike."""
        a = Permission(resource="products", action="view")
        b = Permission(resource="products", action="view")
        assert a == b
        assert len({a, b}) == 1

    def test_key_and_str(self) -> None:
        p = Permission(resource="roles", action="delete")
        assert p.key == ("roles", "delete")
        assert str(p) == "roles:delete"

    def test_empty_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Permission(resource="", action="view")


class TestRole:
    """Tests for Role."""

    def test_camel_case_alias(self) -> None:
        """inheritsFrom from the storage API maps to inherits_from."""
        role = Role.model_validate({"name": "admin", "inheritsFrom": ["moderator"]})
        assert role.inherits_from == ("moderator",)

    def test_field_name_accepted(self) -> None:
        role = Role(name="admin", inherits_from=["moderator", "customer"])
        assert role.inherits_from == ("moderator", "customer")

    def test_defaults(self) -> None:
        role = Role(name="guest")
        assert role.permissions == ()
        assert role.inherits_from == ()

    def test_duplicate_permissions_dropped(self) -> None:
        """Repeated grants keep their first position only."""
        role = Role(
            name="customer",
            permissions=[
                {"resource": "products", "action": "view"},
                {"resource": "users", "action": "view"},
                {"resource": "products", "action": "view"},
            ],
        )
        assert [p.key for p in role.permissions] == [("products", "view"), ("users", "view")]

    def test_permissions_must_be_a_collection(self) -> None:
        with pytest.raises(ValidationError):
            Role.model_validate({"name": "bad", "permissions": "products:view"})
        with pytest.raises(ValidationError):
            Role.model_validate({"name": "bad", "permissions": {"resource": "products", "action": "view"}})

    def test_inherits_from_must_be_a_list(self) -> None:
        with pytest.raises(ValidationError):
            Role.model_validate({"name": "bad", "inheritsFrom": "customer"})

    def test_none_collections_become_empty(self) -> None:
        role = Role.model_validate({"name": "guest", "permissions": None, "inheritsFrom": None})
        assert role.permissions == ()
        assert role.inherits_from == ()

    def test_grants(self) -> None:
        role = Role(name="customer", permissions=[{"resource": "products", "action": "view"}])
        assert role.grants("products", "view")
        assert not role.grants("products", "delete")


class TestResolvedPermission:
    """Tests for ResolvedPermission provenance invariants."""

    def test_denied(self) -> None:
        cell = ResolvedPermission.denied("products", "delete")
        assert cell.granted is False
        assert cell.inherited is False
        assert cell.inherited_from is None

    def test_via(self) -> None:
        cell = ResolvedPermission.via(Permission(resource="products", action="view"), "customer")
        assert cell.granted and cell.inherited
        assert cell.inherited_from == "customer"

    def test_not_granted_cannot_be_inherited(self) -> None:
        with pytest.raises(ValidationError):
            ResolvedPermission(resource="p", action="v", granted=False, inherited=True, inherited_from="x")

    def test_not_granted_cannot_name_source(self) -> None:
        with pytest.raises(ValidationError):
            ResolvedPermission(resource="p", action="v", granted=False, inherited_from="x")

    def test_inherited_requires_source(self) -> None:
        with pytest.raises(ValidationError):
            ResolvedPermission(resource="p", action="v", granted=True, inherited=True)

    def test_explicit_has_no_source(self) -> None:
        with pytest.raises(ValidationError):
            ResolvedPermission(resource="p", action="v", granted=True, inherited_from="x")
