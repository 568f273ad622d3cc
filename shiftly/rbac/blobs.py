"""
Custom-role permission blobs.

Role documents have been written in more than one shape over time:

    ["view_schedule", "clock_in_out"]                         flat list
    {"shift_schedule": ["view_schedule"]}                     section → codes
    {"shift_schedule": {"view_schedule": True, ...}}          section → flags

`parse_permission_blob` turns any stored value into one of the variants
below; everything downstream works with the variant, never the raw JSON.
New writes always use `canonicalize` (section → sorted list of codes).
"""

from dataclasses import dataclass, field
from typing import Any, Union

from .permissions import normalize_section


@dataclass(frozen=True)
class EmptyBlob:
    def codes(self) -> set[str]:
        return set()


@dataclass(frozen=True)
class FlatBlob:
    entries: tuple[str, ...] = ()

    def codes(self) -> set[str]:
        return set(self.entries)


@dataclass(frozen=True)
class SectionedBlob:
    sections: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def codes(self) -> set[str]:
        out: set[str] = set()
        for section_codes in self.sections.values():
            out.update(section_codes)
        return out


PermissionBlob = Union[EmptyBlob, FlatBlob, SectionedBlob]


def _granted_codes(actions: Any) -> tuple[str, ...]:
    """Codes granted by one section value: a list of codes or a {code: bool} map."""
    if isinstance(actions, list):
        return tuple(a for a in actions if isinstance(a, str))
    if isinstance(actions, dict):
        return tuple(
            code for code, enabled in actions.items()
            if isinstance(code, str) and enabled is True
        )
    return ()


def parse_permission_blob(value: Any) -> PermissionBlob:
    """Read-side adapter for any stored permissions value. Never raises."""
    if not value:
        return EmptyBlob()
    if isinstance(value, list):
        return FlatBlob(tuple(v for v in value if isinstance(v, str)))
    if isinstance(value, dict):
        sections = {
            normalize_section(str(key)): _granted_codes(actions)
            for key, actions in value.items()
        }
        return SectionedBlob(sections)
    return EmptyBlob()


def canonicalize(value: dict[str, Any] | None) -> dict[str, list[str]]:
    """
    Write-side shape: section code → sorted unique list of granted codes.

    Sections that grant nothing are dropped. Expects a blob that already
    passed `PermissionCatalog.validate`.
    """
    if not value:
        return {}
    out: dict[str, set[str]] = {}
    for key, actions in value.items():
        granted = _granted_codes(actions)
        if granted:
            out.setdefault(normalize_section(key), set()).update(granted)
    return {section: sorted(codes) for section, codes in out.items()}
