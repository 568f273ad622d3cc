"""
Predefined roles and their permission matrix.

The matrix is static: it is built once at import time, exposed read-only and
never stored in the database. A membership whose role string is not one of
the PredefinedRole values refers to a custom role instead.
"""

import re
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .permissions import Permission as P


class PredefinedRole(str, Enum):
    OWNER = "owner"
    MANAGER = "manager"
    CASHIER = "cashier"
    BARTENDER = "bartender"
    HOUSEKEEPING_STAFF = "housekeeping_staff"
    WAITER = "waiter"
    DISHWASHER = "dishwasher"
    EMPLOYEE = "employee"


_BUSINESS_OVERVIEW_FULL = [
    P.VIEW_BUSINESS_OVERVIEW,
    P.EDIT_BUSINESS_OVERVIEW,
    P.VIEW_BUSINESS_SUMMARY,
    P.VIEW_BUSINESS_STATISTICS,
    P.VIEW_USER_STATISTICS,
]

_PEOPLE_FULL = [
    P.MANAGE_PEOPLE,
    P.ACCEPT_REJECT_JOIN_REQUESTS,
    P.MANAGE_TEAM_MEMBERS,
    P.VIEW_EMPLOYEE_PROFILES,
    P.EDIT_EMPLOYEE_PROFILES,
    P.HANDLE_ONBOARDING,
    P.REPORT_ASSISTANCE_ISSUES,
]

_JOBS_FULL = [
    P.MANAGE_JOBS,
    P.POST_JOBS,
    P.VIEW_JOBS,
    P.EDIT_JOBS,
    P.DELETE_JOBS,
    P.VIEW_JOB_APPLICATIONS,
]

_SCHEDULE_FULL = [
    P.MANAGE_SCHEDULE,
    P.VIEW_SCHEDULE,
    P.CREATE_SCHEDULE,
    P.EDIT_SCHEDULE,
    P.CREATE_EDIT_SCHEDULE_TEMPLATES,
    P.MARK_LATE_MISSED_ATTENDANCE,
    P.CREATE_REMOVE_HOLIDAYS,
]

_REQUESTS_FULL = [
    P.REQUEST_LEAVE,
    P.APPROVE_LEAVE,
    P.VIEW_LEAVE_HISTORY,
    P.REQUEST_OVERTIME,
    P.APPROVE_OVERTIME,
    P.VIEW_OVERTIME_REQUESTS,
    P.CREATE_SWAP_REQUEST,
    P.APPROVE_SWAP_REQUEST,
    P.VIEW_SWAP_REQUESTS,
]

_SHIFT_OPS_FULL = [
    P.CLOCK_IN_OUT,
    P.VIEW_OWN_SHIFTS,
    P.VIEW_ALL_SHIFTS,
    P.CREATE_SHIFTS,
    P.ASSIGN_SHIFTS,
    P.REPORT_SHIFT_ISSUES,
    P.SUBMIT_SHIFT_SUMMARY,
]

_ATTENDANCE_FULL = [
    P.VIEW_OWN_ATTENDANCE,
    P.VIEW_ALL_ATTENDANCE,
    P.TRACK_HOURS,
]

# Request-only / own-data access shared by every front-of-house role
_STAFF_SELF_SERVICE = [
    P.VIEW_SCHEDULE,
    P.REQUEST_LEAVE,
    P.VIEW_LEAVE_HISTORY,
    P.REQUEST_OVERTIME,
    P.VIEW_OVERTIME_REQUESTS,
    P.CREATE_SWAP_REQUEST,
    P.VIEW_SWAP_REQUESTS,
    P.CLOCK_IN_OUT,
    P.VIEW_OWN_SHIFTS,
    P.REPORT_SHIFT_ISSUES,
    P.SUBMIT_SHIFT_SUMMARY,
    P.VIEW_OWN_ATTENDANCE,
    P.TRACK_HOURS,
]

_MANAGER = (
    _BUSINESS_OVERVIEW_FULL
    + _PEOPLE_FULL
    + _JOBS_FULL
    + _SCHEDULE_FULL
    + _REQUESTS_FULL
    + _SHIFT_OPS_FULL
    + _ATTENDANCE_FULL
)

_OWNER = _MANAGER + [
    P.CREATE_BUSINESS,
    P.EDIT_BUSINESS,
    P.DELETE_BUSINESS,
]

# Cashier and bartender see the overview and colleagues, request everything else
_FRONT_DESK = [
    P.VIEW_BUSINESS_OVERVIEW,
    P.VIEW_BUSINESS_SUMMARY,
    P.VIEW_BUSINESS_STATISTICS,
    P.VIEW_USER_STATISTICS,
    P.VIEW_EMPLOYEE_PROFILES,
    P.REPORT_ASSISTANCE_ISSUES,
    P.VIEW_JOBS,
] + _STAFF_SELF_SERVICE

_WAITER = [
    P.VIEW_BUSINESS_OVERVIEW,
    P.VIEW_BUSINESS_SUMMARY,
    P.VIEW_EMPLOYEE_PROFILES,
    P.REPORT_ASSISTANCE_ISSUES,
    P.VIEW_JOBS,
] + _STAFF_SELF_SERVICE

# No business-overview visibility at all
_BACK_OF_HOUSE = [
    P.REPORT_ASSISTANCE_ISSUES,
    P.VIEW_JOBS,
] + _STAFF_SELF_SERVICE

_EMPLOYEE = [
    P.VIEW_OWN_SHIFTS,
    P.CLOCK_IN_OUT,
    P.VIEW_OWN_ATTENDANCE,
    P.TRACK_HOURS,
    P.REQUEST_LEAVE,
    P.VIEW_LEAVE_HISTORY,
    P.REQUEST_OVERTIME,
    P.VIEW_OVERTIME_REQUESTS,
    P.CREATE_SWAP_REQUEST,
    P.VIEW_SWAP_REQUESTS,
    P.REPORT_SHIFT_ISSUES,
    P.SUBMIT_SHIFT_SUMMARY,
    P.VIEW_SCHEDULE,
    P.VIEW_JOBS,
]


def _freeze(perms: list[P]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(p.value for p in perms))


ROLE_PERMISSIONS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    PredefinedRole.OWNER.value: _freeze(_OWNER),
    PredefinedRole.MANAGER.value: _freeze(_MANAGER),
    PredefinedRole.CASHIER.value: _freeze(_FRONT_DESK),
    PredefinedRole.BARTENDER.value: _freeze(_FRONT_DESK),
    PredefinedRole.HOUSEKEEPING_STAFF.value: _freeze(_BACK_OF_HOUSE),
    PredefinedRole.WAITER.value: _freeze(_WAITER),
    PredefinedRole.DISHWASHER.value: _freeze(_BACK_OF_HOUSE),
    PredefinedRole.EMPLOYEE.value: _freeze(_EMPLOYEE),
})

ROLE_LABELS: Mapping[str, str] = MappingProxyType({
    PredefinedRole.OWNER.value: "Owner",
    PredefinedRole.MANAGER.value: "Manager",
    PredefinedRole.CASHIER.value: "Cashier",
    PredefinedRole.BARTENDER.value: "Bartender",
    PredefinedRole.HOUSEKEEPING_STAFF.value: "Housekeeping Staff",
    PredefinedRole.WAITER.value: "Waiter",
    PredefinedRole.DISHWASHER.value: "Dishwasher",
    PredefinedRole.EMPLOYEE.value: "Employee",
})


def is_predefined_role(value: str | None) -> bool:
    """Case-sensitive membership test against the predefined identifiers."""
    return value in ROLE_PERMISSIONS


def permissions_for(role: str) -> list[str]:
    """Return the permission list for a predefined role, or [] if unknown."""
    return list(ROLE_PERMISSIONS.get(role, ()))


def has_permission(role: str, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, ())


def role_label(role: str) -> str:
    return ROLE_LABELS.get(role, role)


def normalize_role_code(value: str) -> str:
    """'Housekeeping Staff' / 'HOUSEKEEPING-STAFF' → 'housekeeping_staff'"""
    code = re.sub(r"[^a-zA-Z0-9]+", "_", value.strip())
    return code.strip("_").lower()


def format_custom_role_name(value: str) -> str:
    """
    Display name for a role the caller typed in.

    Names that already contain capitals are kept as typed; otherwise
    'shift_supervisor' / 'shift-supervisor' → 'Shift Supervisor'.
    """
    trimmed = value.strip()
    if not trimmed or re.search(r"[A-Z]", trimmed):
        return trimmed
    parts = [p for p in re.split(r"[_\-\s]+", trimmed) if p]
    return " ".join(p[:1].upper() + p[1:].lower() for p in parts)
