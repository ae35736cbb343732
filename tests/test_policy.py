"""Tests for the role/ownership policy in app.config.permissions_config."""

import pytest

from app.config.permissions_config import (
    evaluate_policy,
    get_permission_matrix,
    permissions_for_role,
    permissions_for_roles,
)


@pytest.mark.parametrize(
    "roles, permission, expected",
    [
        (["admin"], "songs:delete", True),
        (["leader"], "songs:create", True),
        (["leader"], "songs:delete", False),
        (["musician"], "songs:read", True),
        (["musician"], "songs:create", False),
        (["leader"], "suggestion_slots:assign", True),
        (["musician"], "suggestion_slots:create", False),
        (["admin"], "worship_sets:assign_leader", True),
        (["leader"], "worship_sets:assign_leader", False),
        (["musician"], "notifications:read", False),
        (["leader"], "user_instruments:read", True),
        (["leader"], "user_instruments:update", False),
        ([], "songs:read", False),
    ],
)
def test_role_grants(roles, permission, expected):
    assert evaluate_policy(roles, permission) is expected


def test_roles_are_additive():
    assert evaluate_policy(["musician", "leader"], "services:create") is True


def test_owner_granted_permission_allows_owner_without_role():
    assert evaluate_policy(["musician"], "worship_sets:update") is False
    assert evaluate_policy(["musician"], "worship_sets:update", is_owner=True) is True


def test_owner_only_permission_ignores_roles():
    assert evaluate_policy(["admin"], "suggestions:submit") is False
    assert evaluate_policy(["musician"], "suggestions:submit", is_owner=True) is True
    assert evaluate_policy(["admin"], "assignments:respond") is False


def test_unknown_permission_is_denied():
    assert evaluate_policy(["admin"], "songs:explode") is False


def test_admin_holds_everything_but_owner_only():
    admin = set(permissions_for_role("admin"))
    assert "songs:delete" in admin
    assert "suggestions:submit" not in admin
    assert "assignments:respond" not in admin


def test_permissions_for_roles_merges_and_sorts():
    merged = permissions_for_roles(["musician", "leader"])
    assert merged == sorted(set(merged))
    assert "set_songs:delete" in merged


def test_permission_matrix_shape():
    matrix = get_permission_matrix()
    names = {p["name"] for p in matrix["permissions"]}
    assert "default_assignments:update" in names
    assert {r["name"] for r in matrix["roles"]} == {"admin", "leader", "musician"}


def test_players_edit_only_their_own_instruments():
    assert evaluate_policy(["musician"], "user_instruments:update") is False
    assert evaluate_policy(["musician"], "user_instruments:update", is_owner=True) is True
    assert evaluate_policy(["admin"], "user_instruments:update") is True
