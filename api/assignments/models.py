# api/assignments/models.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from core.statuses import AssignmentStatus


class AssignmentCreate(BaseModel):
    asset_id: int
    assigned_to_id: int
    # Defaults to the X-Person-ID of the request
    assigned_by_id: int | None = None
    assignment_date: datetime | None = None
    expected_return: datetime | None = None
    notes: str | None = None


class AssignmentUpdate(BaseModel):
    expected_return: datetime | None = None
    notes: str | None = None
    status: AssignmentStatus | None = Field(None, description="Set to 'returned' to give the asset back")
    return_date: datetime | None = None


class AssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    asset_id: int
    assigned_to_id: int
    assigned_by_id: int
    assignment_date: datetime
    return_date: datetime | None = None
    expected_return: datetime | None = None
    notes: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime | None = None
