# api/people/models.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PersonCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=100)
    role: str = Field(..., min_length=1, max_length=50, description="e.g. manager, technician")
    position: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)


class PersonUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, min_length=3, max_length=100)
    role: str | None = Field(None, min_length=1, max_length=50)
    position: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)

    @field_validator("name", "email", "role")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class PersonRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    name: str
    email: str
    role: str
    position: str | None = None
    phone: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
