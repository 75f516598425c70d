# api/tenants/models.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TenantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    plan: str = Field("free", max_length=50)
    status: str = Field("active", max_length=20)
    domain: str | None = Field(None, max_length=100)


class TenantUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    plan: str | None = Field(None, max_length=50)
    status: str | None = Field(None, max_length=20)
    domain: str | None = Field(None, max_length=100)

    @field_validator("name", "plan", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class TenantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    plan: str
    status: str
    domain: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
