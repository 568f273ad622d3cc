from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class CreateBusinessRequest(BaseModel):
    """POST /businesses"""
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Business name is too short")
        return v


class AddMemberRequest(BaseModel):
    """POST /businesses/{business_id}/members"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    role: str = Field(..., min_length=1, max_length=100)
