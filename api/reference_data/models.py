# api/reference_data/models.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------- Asset categories ----------

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    parent_id: int | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    parent_id: int | None = None

    @field_validator("name")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    name: str
    description: str | None = None
    parent_id: int | None = None
    created_at: datetime
    updated_at: datetime | None = None


# ---------- Locations ----------

class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    address: str | None = None
    type: str | None = Field(None, max_length=50, description="e.g. warehouse, office")
    parent_id: int | None = None


class LocationUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    address: str | None = None
    type: str | None = Field(None, max_length=50)
    parent_id: int | None = None

    @field_validator("name")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class LocationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    name: str
    description: str | None = None
    address: str | None = None
    type: str | None = None
    parent_id: int | None = None
    created_at: datetime
    updated_at: datetime | None = None


# ---------- Vendors ----------

class VendorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    contact_name: str | None = Field(None, max_length=100)
    contact_email: str | None = Field(None, max_length=100)
    contact_phone: str | None = Field(None, max_length=20)
    address: str | None = None
    website: str | None = Field(None, max_length=255)
    notes: str | None = None


class VendorUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    contact_name: str | None = Field(None, max_length=100)
    contact_email: str | None = Field(None, max_length=100)
    contact_phone: str | None = Field(None, max_length=20)
    address: str | None = None
    website: str | None = Field(None, max_length=255)
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class VendorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    name: str
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    address: str | None = None
    website: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
