# api/procurement/models.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from core.statuses import ProcurementStatus


class ProcurementItemCreate(BaseModel):
    category_id: int
    description: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    estimated_price: float | None = Field(None, ge=0)
    preferred_vendor_id: int | None = None
    justification: str | None = None


class ProcurementItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    procurement_id: int
    category_id: int
    description: str
    quantity: int
    estimated_price: float | None = None
    preferred_vendor_id: int | None = None
    justification: str | None = None
    status: str


class ProcurementCreate(BaseModel):
    # Defaults to the X-Person-ID of the request
    requested_by_id: int | None = None
    expected_date: datetime | None = None
    total_budget: float | None = Field(None, ge=0)
    notes: str | None = None
    items: list[ProcurementItemCreate] = Field(default_factory=list)


class ProcurementUpdate(BaseModel):
    expected_date: datetime | None = None
    total_budget: float | None = Field(None, ge=0)
    notes: str | None = None
    status: ProcurementStatus | None = None
    # Required when status is 'approved'
    approved_by_id: int | None = None


class ProcurementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    request_number: str
    requested_by_id: int
    approved_by_id: int | None = None
    status: str
    request_date: datetime
    approval_date: datetime | None = None
    expected_date: datetime | None = None
    total_budget: float | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class ProcurementDetail(ProcurementRead):
    items: list[ProcurementItemRead] = Field(default_factory=list)
