from __future__ import annotations

import pytest

from shiftly.rbac import Permission, PermissionResolver, PredefinedRole, Requirement
from shiftly.rbac.resolver import resolve_business_id, role_kind_of
from shiftly.rbac.roles import permissions_for
from shiftly.utils import ForbiddenError
from tests.factories import add_membership, make_business, make_role, make_user


@pytest.fixture
def resolver(db):
    return PermissionResolver(db)


async def test_empty_requirement_allows_anyone(resolver):
    assert await resolver.authorize(None, Requirement()) == []


async def test_unauthenticated_user_is_forbidden(resolver):
    with pytest.raises(ForbiddenError, match="not authenticated"):
        await resolver.authorize(None, Requirement.of(permissions=[Permission.VIEW_JOBS]))


async def test_owner_scenario(db, resolver):
    owner = await make_user(db, "owner-1@example.com")
    business = await make_business(db, owner)

    requirement = Requirement.of(
        permissions=[Permission.VIEW_BUSINESS_OVERVIEW, Permission.EDIT_BUSINESS_OVERVIEW]
    )
    memberships = await resolver.authorize(owner, requirement, business)
    assert [m["role"] for m in memberships] == ["owner"]


async def test_housekeeping_scenario(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    house = await make_user(db, "house-1@example.com")
    await add_membership(db, house, business, "housekeeping_staff")

    with pytest.raises(ForbiddenError) as exc:
        await resolver.authorize(
            house, Requirement.of(permissions=[Permission.VIEW_BUSINESS_OVERVIEW]), business
        )
    assert exc.value.status_code == 403
    assert exc.value.detail == "Missing required permissions: view_business_overview"


async def test_custom_role_scenario(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    await make_role(
        db,
        business,
        "HR / Recruiter",
        {"people_management": ["manage_team_members", "view_employee_profiles"]},
    )
    hr = await make_user(db, "hr@example.com")
    await add_membership(db, hr, business, "HR / Recruiter")

    await resolver.authorize(hr, Requirement.of(permissions=[Permission.MANAGE_TEAM_MEMBERS]), business)

    with pytest.raises(ForbiddenError, match="post_jobs"):
        await resolver.authorize(hr, Requirement.of(permissions=[Permission.POST_JOBS]), business)


async def test_predefined_membership_gets_exactly_the_static_list(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    waiter = await make_user(db, "waiter@example.com")
    await add_membership(db, waiter, business, "waiter")
    # A role document with a predefined id as its name must not leak in
    await make_role(db, business, "waiter", ["delete_business"])

    granted = await resolver.effective_permissions(waiter, business)
    assert granted == set(permissions_for("waiter"))


async def test_predefined_id_wins_over_a_custom_tag(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    waiter = await make_user(db, "waiter@example.com")
    legacy = await make_role(db, business, "waiter", ["delete_business"])
    await add_membership(db, waiter, business, "waiter", role_kind="custom", role_id=legacy)

    granted = await resolver.effective_permissions(waiter, business)
    assert granted == set(permissions_for("waiter"))
    assert "delete_business" not in granted


async def test_missing_custom_role_grants_nothing(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    ghost = await make_user(db, "ghost@example.com")
    await add_membership(db, ghost, business, "Night Auditor")

    assert await resolver.effective_permissions(ghost, business) == set()
    with pytest.raises(ForbiddenError, match="Missing required permissions"):
        await resolver.authorize(ghost, Requirement.of(permissions=["view_jobs"]), business)


async def test_legacy_flat_and_flag_blobs_resolve(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    await make_role(db, business, "Legacy Flat", ["view_jobs", "post_jobs"])
    await make_role(
        db, business, "Legacy Flags", {"jobManagement": {"edit_jobs": True, "delete_jobs": False}}
    )
    a = await make_user(db, "a@example.com")
    b = await make_user(db, "b@example.com")
    await add_membership(db, a, business, "Legacy Flat")
    await add_membership(db, b, business, "Legacy Flags")

    assert await resolver.effective_permissions(a, business) == {"view_jobs", "post_jobs"}
    assert await resolver.effective_permissions(b, business) == {"edit_jobs"}


async def test_no_membership_in_target_business(db, resolver):
    owner = await make_user(db, "owner@example.com")
    make_business_a = await make_business(db, owner, "A")
    outsider = await make_user(db, "outsider@example.com")

    with pytest.raises(ForbiddenError, match="not associated with any business"):
        await resolver.authorize(outsider, Requirement.of(permissions=["view_jobs"]), make_business_a)


async def test_scope_is_one_business_when_given_and_all_otherwise(db, resolver):
    user = await make_user(db, "multi@example.com")
    owner = await make_user(db, "boss@example.com")
    first = await make_business(db, owner, "First")
    second = await make_business(db, owner, "Second")
    await add_membership(db, user, first, "employee")
    await add_membership(db, user, second, "manager")

    requirement = Requirement.of(permissions=[Permission.APPROVE_LEAVE])
    with pytest.raises(ForbiddenError):
        await resolver.authorize(user, requirement, first)
    await resolver.authorize(user, requirement, second)
    # No business given: union over every membership
    await resolver.authorize(user, requirement)


async def test_required_roles_match_case_sensitively(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)

    await resolver.authorize(owner, Requirement.of(roles=[PredefinedRole.OWNER]), business)
    with pytest.raises(ForbiddenError, match="must have one of these roles: Owner"):
        await resolver.authorize(owner, Requirement.of(roles=["Owner"]), business)


async def test_roles_and_permissions_both_apply(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    cashier = await make_user(db, "cashier@example.com")
    await add_membership(db, cashier, business, "cashier")

    requirement = Requirement.of(permissions=["view_jobs"], roles=["owner", "manager"])
    with pytest.raises(ForbiddenError, match="roles"):
        await resolver.authorize(cashier, requirement, business)


async def test_tagged_custom_membership_resolves_by_role_id(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    role_id = await make_role(db, business, "Supervisor", {"shift_schedule": ["edit_schedule"]})
    user = await make_user(db, "sup@example.com")
    # Stored name is stale; the id still points at the role
    await add_membership(db, user, business, "Old Name", role_kind="custom", role_id=role_id)

    assert await resolver.effective_permissions(user, business) == {"edit_schedule"}


async def test_role_edits_apply_on_next_check(db, resolver):
    owner = await make_user(db, "owner@example.com")
    business = await make_business(db, owner)
    await make_role(db, business, "Trainer", {"people_management": ["handle_onboarding"]})
    user = await make_user(db, "trainer@example.com")
    await add_membership(db, user, business, "Trainer")

    requirement = Requirement.of(permissions=["view_employee_profiles"])
    with pytest.raises(ForbiddenError):
        await resolver.authorize(user, requirement, business)

    await db["roles"].update_one(
        {"business_id": business, "name": "Trainer"},
        {"$set": {"permissions": {"people_management": ["view_employee_profiles"]}}},
    )
    await resolver.authorize(user, requirement, business)


def test_role_kind_inference():
    assert role_kind_of({"role": "owner"}) == "predefined"
    assert role_kind_of({"role": "HR / Recruiter"}) == "custom"
    assert role_kind_of({"role": "owner", "role_kind": "custom"}) == "predefined"
    assert role_kind_of({"role": "Trainer", "role_kind": "predefined"}) == "custom"


class _Body:
    business_id = "from-body"


def test_business_id_precedence():
    query = {"businessId": "from-query"}
    path = {"business_id": "from-path"}
    assert resolve_business_id(_Body(), query, path) == "from-body"
    assert resolve_business_id(None, query, path) == "from-query"
    assert resolve_business_id({"businessId": None}, {}, path) == "from-path"
    assert resolve_business_id(None, {}, {}) is None
