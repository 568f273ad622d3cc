from __future__ import annotations

from shiftly.rbac.blobs import (
    EmptyBlob,
    FlatBlob,
    SectionedBlob,
    canonicalize,
    parse_permission_blob,
)


def test_flat_list_blob():
    blob = parse_permission_blob(["view_schedule", "clock_in_out", 42])
    assert isinstance(blob, FlatBlob)
    assert blob.codes() == {"view_schedule", "clock_in_out"}


def test_sectioned_lists_blob():
    blob = parse_permission_blob(
        {"people_management": ["manage_team_members", "view_employee_profiles"]}
    )
    assert isinstance(blob, SectionedBlob)
    assert blob.codes() == {"manage_team_members", "view_employee_profiles"}


def test_sectioned_flags_only_grant_true_entries():
    blob = parse_permission_blob(
        {"businessOverview": {"view_business_overview": True, "edit_business_overview": False}}
    )
    assert isinstance(blob, SectionedBlob)
    assert "business_overview" in blob.sections
    assert blob.codes() == {"view_business_overview"}


def test_empty_and_garbage_values_grant_nothing():
    for value in (None, {}, [], "view_schedule", 7):
        blob = parse_permission_blob(value)
        assert isinstance(blob, EmptyBlob)
        assert blob.codes() == set()

    assert parse_permission_blob({"shift_schedule": "view_schedule"}).codes() == set()


def test_canonicalize_sorts_dedupes_and_normalizes_keys():
    out = canonicalize(
        {
            "shiftSchedule": ["view_schedule", "edit_schedule", "view_schedule"],
            "shift_schedule": {"manage_schedule": True, "create_schedule": False},
            "leave_management": {"approve_leave": False},
        }
    )
    assert out == {
        "shift_schedule": ["edit_schedule", "manage_schedule", "view_schedule"],
    }


def test_canonicalize_none():
    assert canonicalize(None) == {}
