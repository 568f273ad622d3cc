"""
Permission codes and the default permission catalog.

Permission format:  "{action}_{subject}"  e.g. "view_schedule"
  - Codes are grouped into sections ("business_overview", "shift_schedule", ...)
  - The catalog lives in the `permission_sections` collection; DEFAULT_CATALOG
    is only what gets seeded into it.
"""

from enum import Enum


class Permission(str, Enum):
    # Business Overview
    VIEW_BUSINESS_OVERVIEW = "view_business_overview"
    EDIT_BUSINESS_OVERVIEW = "edit_business_overview"
    VIEW_BUSINESS_SUMMARY = "view_business_summary"
    VIEW_BUSINESS_STATISTICS = "view_business_statistics"
    VIEW_USER_STATISTICS = "view_user_statistics"

    # People Management
    MANAGE_PEOPLE = "manage_people"
    ACCEPT_REJECT_JOIN_REQUESTS = "accept_reject_join_requests"
    MANAGE_TEAM_MEMBERS = "manage_team_members"
    VIEW_EMPLOYEE_PROFILES = "view_employee_profiles"
    EDIT_EMPLOYEE_PROFILES = "edit_employee_profiles"
    HANDLE_ONBOARDING = "handle_onboarding"
    REPORT_ASSISTANCE_ISSUES = "report_assistance_issues"

    # Job Management
    MANAGE_JOBS = "manage_jobs"
    POST_JOBS = "post_jobs"
    VIEW_JOBS = "view_jobs"
    EDIT_JOBS = "edit_jobs"
    DELETE_JOBS = "delete_jobs"
    VIEW_JOB_APPLICATIONS = "view_job_applications"

    # Shift & Schedule
    MANAGE_SCHEDULE = "manage_schedule"
    VIEW_SCHEDULE = "view_schedule"
    CREATE_SCHEDULE = "create_schedule"
    EDIT_SCHEDULE = "edit_schedule"
    CREATE_EDIT_SCHEDULE_TEMPLATES = "create_edit_schedule_templates"
    MARK_LATE_MISSED_ATTENDANCE = "mark_late_missed_attendance"
    CREATE_REMOVE_HOLIDAYS = "create_remove_holidays"

    # Leave Management
    REQUEST_LEAVE = "request_leave"
    APPROVE_LEAVE = "approve_leave"
    VIEW_LEAVE_HISTORY = "view_leave_history"

    # Overtime Management
    REQUEST_OVERTIME = "request_overtime"
    APPROVE_OVERTIME = "approve_overtime"
    VIEW_OVERTIME_REQUESTS = "view_overtime_requests"

    # Swap Requests
    CREATE_SWAP_REQUEST = "create_swap_request"
    APPROVE_SWAP_REQUEST = "approve_swap_request"
    VIEW_SWAP_REQUESTS = "view_swap_requests"

    # Shift Operations
    CLOCK_IN_OUT = "clock_in_out"
    VIEW_OWN_SHIFTS = "view_own_shifts"
    VIEW_ALL_SHIFTS = "view_all_shifts"
    CREATE_SHIFTS = "create_shifts"
    ASSIGN_SHIFTS = "assign_shifts"
    REPORT_SHIFT_ISSUES = "report_shift_issues"
    SUBMIT_SHIFT_SUMMARY = "submit_shift_summary"

    # Attendance & Hours
    VIEW_OWN_ATTENDANCE = "view_own_attendance"
    VIEW_ALL_ATTENDANCE = "view_all_attendance"
    TRACK_HOURS = "track_hours"

    # Business Management
    CREATE_BUSINESS = "create_business"
    EDIT_BUSINESS = "edit_business"
    DELETE_BUSINESS = "delete_business"


def _section(code: str, title: str, sort_order: int, perms: list[tuple[Permission, str]]) -> dict:
    return {
        "code": code,
        "title": title,
        "sort_order": sort_order,
        "permissions": [
            {"code": perm.value, "label": label, "sort_order": i}
            for i, (perm, label) in enumerate(perms, start=1)
        ],
    }


# ── Seed data for the `permission_sections` collection ──────────
DEFAULT_CATALOG: list[dict] = [
    _section("business_overview", "Business Overview", 1, [
        (Permission.VIEW_BUSINESS_OVERVIEW, "View Business Overview"),
        (Permission.EDIT_BUSINESS_OVERVIEW, "Edit Business Overview"),
        (Permission.VIEW_BUSINESS_SUMMARY, "View Business Summary"),
        (Permission.VIEW_BUSINESS_STATISTICS, "View Business Statistics"),
        (Permission.VIEW_USER_STATISTICS, "View User Statistics"),
    ]),
    _section("people_management", "People Management", 2, [
        (Permission.MANAGE_PEOPLE, "Manage People"),
        (Permission.ACCEPT_REJECT_JOIN_REQUESTS, "Accept/Reject Join Requests"),
        (Permission.MANAGE_TEAM_MEMBERS, "Manage Team Members"),
        (Permission.VIEW_EMPLOYEE_PROFILES, "View Employee Profiles"),
        (Permission.EDIT_EMPLOYEE_PROFILES, "Edit Employee Profiles"),
        (Permission.HANDLE_ONBOARDING, "Handle Onboarding"),
        (Permission.REPORT_ASSISTANCE_ISSUES, "Report Assistance Issues"),
    ]),
    _section("job_management", "Job Management", 3, [
        (Permission.MANAGE_JOBS, "Manage Jobs"),
        (Permission.POST_JOBS, "Post Jobs"),
        (Permission.VIEW_JOBS, "View Jobs"),
        (Permission.EDIT_JOBS, "Edit Jobs"),
        (Permission.DELETE_JOBS, "Delete Jobs"),
        (Permission.VIEW_JOB_APPLICATIONS, "View Job Applications"),
    ]),
    _section("shift_schedule", "Shift & Schedule", 4, [
        (Permission.MANAGE_SCHEDULE, "Manage Schedule"),
        (Permission.VIEW_SCHEDULE, "View Schedule"),
        (Permission.CREATE_SCHEDULE, "Create Schedule"),
        (Permission.EDIT_SCHEDULE, "Edit Schedule"),
        (Permission.CREATE_EDIT_SCHEDULE_TEMPLATES, "Create/Edit Schedule Templates"),
        (Permission.MARK_LATE_MISSED_ATTENDANCE, "Mark Late / Missed Attendance"),
        (Permission.CREATE_REMOVE_HOLIDAYS, "Create / Remove Holidays"),
    ]),
    _section("leave_management", "Leave Management", 5, [
        (Permission.REQUEST_LEAVE, "Request Leave"),
        (Permission.APPROVE_LEAVE, "Approve Leave"),
        (Permission.VIEW_LEAVE_HISTORY, "View Leave History"),
    ]),
    _section("overtime_management", "Overtime Management", 6, [
        (Permission.REQUEST_OVERTIME, "Request Overtime"),
        (Permission.APPROVE_OVERTIME, "Approve Overtime"),
        (Permission.VIEW_OVERTIME_REQUESTS, "View Overtime Requests"),
    ]),
    _section("swap_requests", "Swap Requests", 7, [
        (Permission.CREATE_SWAP_REQUEST, "Create Swap Request"),
        (Permission.APPROVE_SWAP_REQUEST, "Approve Swap Request"),
        (Permission.VIEW_SWAP_REQUESTS, "View Swap Requests"),
    ]),
    _section("shift_operations", "Shift Operations", 8, [
        (Permission.CLOCK_IN_OUT, "Clock In / Out"),
        (Permission.VIEW_OWN_SHIFTS, "View Own Shifts"),
        (Permission.VIEW_ALL_SHIFTS, "View All Shifts"),
        (Permission.CREATE_SHIFTS, "Create Shifts"),
        (Permission.ASSIGN_SHIFTS, "Assign Shifts"),
        (Permission.REPORT_SHIFT_ISSUES, "Report Shift Issues"),
        (Permission.SUBMIT_SHIFT_SUMMARY, "Submit Shift Summary"),
    ]),
    _section("attendance_hours", "Attendance & Hours", 9, [
        (Permission.VIEW_OWN_ATTENDANCE, "View Own Attendance"),
        (Permission.VIEW_ALL_ATTENDANCE, "View All Attendance"),
        (Permission.TRACK_HOURS, "Track Hours"),
    ]),
    _section("business_management", "Business Management", 10, [
        (Permission.CREATE_BUSINESS, "Create Business"),
        (Permission.EDIT_BUSINESS, "Edit Business"),
        (Permission.DELETE_BUSINESS, "Delete Business"),
    ]),
]


# ── Section key aliases (camelCase → catalog code) ──────────────
SECTION_ALIASES: dict[str, str] = {
    "businessOverview": "business_overview",
    "peopleManagement": "people_management",
    "jobManagement": "job_management",
    "shiftSchedule": "shift_schedule",
    "leaveManagement": "leave_management",
    "overtimeManagement": "overtime_management",
    "swapRequests": "swap_requests",
    "shiftOperations": "shift_operations",
    "attendanceHours": "attendance_hours",
    "businessManagement": "business_management",
}


def normalize_section(key: str) -> str:
    """Map a client-supplied section key onto its catalog code."""
    return SECTION_ALIASES.get(key, key)
