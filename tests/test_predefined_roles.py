from __future__ import annotations

import pytest

from shiftly.rbac.permissions import DEFAULT_CATALOG, Permission
from shiftly.rbac.roles import (
    ROLE_PERMISSIONS,
    PredefinedRole,
    format_custom_role_name,
    has_permission,
    is_predefined_role,
    normalize_role_code,
    permissions_for,
    role_label,
)

CATALOG_CODES = {p["code"] for s in DEFAULT_CATALOG for p in s["permissions"]}
BUSINESS_OVERVIEW = {p["code"] for s in DEFAULT_CATALOG if s["code"] == "business_overview" for p in s["permissions"]}


@pytest.mark.parametrize("role", list(PredefinedRole))
def test_every_role_has_a_non_empty_subset_of_the_catalog(role):
    perms = permissions_for(role.value)
    assert perms
    assert set(perms) <= CATALOG_CODES
    assert len(perms) == len(set(perms))


def test_catalog_covers_every_permission_code():
    assert CATALOG_CODES == {p.value for p in Permission}


def test_owner_holds_everything_and_manager_everything_but_business_management():
    assert set(permissions_for("owner")) == CATALOG_CODES
    assert set(permissions_for("owner")) - set(permissions_for("manager")) == {
        "create_business",
        "edit_business",
        "delete_business",
    }


@pytest.mark.parametrize("role", ["housekeeping_staff", "dishwasher"])
def test_back_of_house_roles_see_no_business_overview(role):
    assert not BUSINESS_OVERVIEW & set(permissions_for(role))


def test_lower_roles_are_view_or_request_only():
    for role in ("cashier", "bartender", "waiter", "employee"):
        perms = set(permissions_for(role))
        assert "approve_leave" not in perms
        assert "edit_schedule" not in perms
        assert "request_leave" in perms


def test_unknown_role_yields_empty_list():
    assert permissions_for("HR / Recruiter") == []
    assert permissions_for("Owner") == []


def test_role_table_is_read_only():
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS["owner"] = ()


def test_returned_list_is_a_copy():
    perms = permissions_for("waiter")
    perms.append("delete_business")
    assert "delete_business" not in permissions_for("waiter")


def test_is_predefined_role_is_case_sensitive():
    assert is_predefined_role("housekeeping_staff")
    assert not is_predefined_role("Housekeeping Staff")
    assert not is_predefined_role(None)


def test_has_permission():
    assert has_permission("cashier", Permission.VIEW_BUSINESS_STATISTICS.value)
    assert not has_permission("waiter", Permission.VIEW_BUSINESS_STATISTICS.value)


@pytest.mark.parametrize(
    "raw, code",
    [
        ("Housekeeping Staff", "housekeeping_staff"),
        ("  MANAGER ", "manager"),
        ("dish-washer", "dish_washer"),
    ],
)
def test_normalize_role_code(raw, code):
    assert normalize_role_code(raw) == code


@pytest.mark.parametrize(
    "raw, name",
    [
        ("shift_supervisor", "Shift Supervisor"),
        ("night-auditor", "Night Auditor"),
        ("HR / Recruiter", "HR / Recruiter"),
        ("   ", ""),
    ],
)
def test_format_custom_role_name(raw, name):
    assert format_custom_role_name(raw) == name


def test_role_label():
    assert role_label("housekeeping_staff") == "Housekeeping Staff"
    assert role_label("something_else") == "something_else"
