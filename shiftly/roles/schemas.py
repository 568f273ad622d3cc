from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional

# Contents are checked against the catalog by PermissionCatalog.validate.
PermissionsBlob = dict[str, Any]


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Role name cannot be blank")
    return v


class CreateRoleRequest(BaseModel):
    """POST /roles"""
    model_config = ConfigDict(populate_by_name=True)

    business_id: str = Field(..., alias="businessId")
    name: str = Field(..., min_length=1, max_length=100)
    permissions: Optional[PermissionsBlob] = None
    is_predefined: bool = Field(False, alias="isPredefined")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)


class UpdateRoleRequest(BaseModel):
    """PUT /roles/{role_id}"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    permissions: Optional[PermissionsBlob] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)


class UpdateRolePermissionsRequest(BaseModel):
    """PUT /roles/{role_id}/permissions"""
    model_config = ConfigDict(populate_by_name=True)

    business_id: Optional[str] = Field(None, alias="businessId")
    permissions: PermissionsBlob


class CreatePredefinedRoleRequest(BaseModel):
    """POST /roles/predefined"""
    model_config = ConfigDict(populate_by_name=True)

    business_id: str = Field(..., alias="businessId")
    role: str = Field(..., min_length=1, max_length=100)


class AssignRoleRequest(BaseModel):
    """POST /roles/assign"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    role_id: str = Field(..., alias="roleId")
    business_id: str = Field(..., alias="businessId")
