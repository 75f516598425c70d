# api/maintenance/models.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from core.statuses import MaintenanceStatus, MaintenanceType


class MaintenanceCreate(BaseModel):
    asset_id: int
    maintenance_type: MaintenanceType
    description: str = Field(..., min_length=1)
    # scheduled (default) or in_progress
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED
    scheduled_date: datetime | None = None
    performed_by_id: int | None = None
    vendor_id: int | None = None
    cost: float | None = Field(None, ge=0)
    results: str | None = None
    next_scheduled: datetime | None = None


class MaintenanceUpdate(BaseModel):
    maintenance_type: MaintenanceType | None = None
    description: str | None = Field(None, min_length=1)
    status: MaintenanceStatus | None = None
    scheduled_date: datetime | None = None
    completed_date: datetime | None = None
    performed_by_id: int | None = None
    vendor_id: int | None = None
    cost: float | None = Field(None, ge=0)
    results: str | None = None
    next_scheduled: datetime | None = None


class MaintenanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    asset_id: int
    maintenance_type: str
    status: str
    scheduled_date: datetime
    completed_date: datetime | None = None
    performed_by_id: int | None = None
    vendor_id: int | None = None
    cost: float | None = None
    description: str
    results: str | None = None
    next_scheduled: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None
