# api/assets/models.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.statuses import AssetStatus


class AssetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    category_id: int
    serial_number: str | None = Field(None, max_length=100)
    model_number: str | None = Field(None, max_length=100)
    manufacturer: str | None = Field(None, max_length=100)
    purchase_date: datetime | None = None
    purchase_price: float | None = Field(None, ge=0)
    warranty_expiry: datetime | None = None
    # New assets start in procurement or in stock; assigned/maintenance come
    # from assignments and maintenance records.
    status: AssetStatus = AssetStatus.IN_STOCK
    location_id: int | None = None
    expected_lifespan: int | None = Field(None, ge=0, description="In months")
    notes: str | None = None
    tags: str | None = Field(None, max_length=255)
    barcode: str | None = Field(None, max_length=100)


class AssetUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    category_id: int | None = None
    serial_number: str | None = Field(None, max_length=100)
    model_number: str | None = Field(None, max_length=100)
    manufacturer: str | None = Field(None, max_length=100)
    purchase_date: datetime | None = None
    purchase_price: float | None = Field(None, ge=0)
    warranty_expiry: datetime | None = None
    status: AssetStatus | None = None
    location_id: int | None = None
    expected_lifespan: int | None = Field(None, ge=0)
    notes: str | None = None
    tags: str | None = Field(None, max_length=255)
    barcode: str | None = Field(None, max_length=100)

    @field_validator("name", "category_id")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class AssetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    name: str
    description: str | None = None
    category_id: int
    serial_number: str | None = None
    model_number: str | None = None
    manufacturer: str | None = None
    purchase_date: datetime | None = None
    purchase_price: float | None = None
    warranty_expiry: datetime | None = None
    status: str
    location_id: int | None = None
    current_assignee_id: int | None = None
    expected_lifespan: int | None = None
    notes: str | None = None
    tags: str | None = None
    barcode: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
