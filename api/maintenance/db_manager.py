# api/maintenance/db_manager.py
"""
Business logic for maintenance records.

Starting maintenance takes the asset out of stock; completing or cancelling
the last running record puts it back.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core import transitions
from core.consistency import apply, commit_or_raise, soft_delete
from core.lookups import get_or_raise, resolve_reference
from core.transitions import TransitionContext
from db_models.maintenance import MaintenanceRecord
from db_models.person import Person
from db_models.reference import Vendor
from .models import MaintenanceCreate, MaintenanceUpdate
from . import queries

logger = logging.getLogger(__name__)


async def list_records(
    db: AsyncSession,
    tenant_id: int,
    asset_id: int | None = None,
    status: str | None = None,
    maintenance_type: str | None = None,
) -> list[MaintenanceRecord]:
    stmt = queries.select_records(
        tenant_id, asset_id=asset_id, status=status, maintenance_type=maintenance_type,
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_record(db: AsyncSession, tenant_id: int, record_id: int) -> MaintenanceRecord:
    """Raises EntityNotFoundError if the record is not in the tenant."""
    return await get_or_raise(db, MaintenanceRecord, record_id, tenant_id)


async def create_record(
    db: AsyncSession,
    context: TransitionContext,
    payload: MaintenanceCreate,
) -> MaintenanceRecord:
    """
    Raises:
        IllegalTransitionError: initial status other than scheduled/in_progress
        InvalidReferenceError: unknown asset, performer or vendor
        AssetUnavailableError: starting maintenance on an assigned or retired asset
    """
    validated = await transitions.validate_new_maintenance(
        db,
        context,
        asset_id=payload.asset_id,
        maintenance_type=payload.maintenance_type.value,
        description=payload.description,
        status=payload.status.value,
        scheduled_date=payload.scheduled_date,
        performed_by_id=payload.performed_by_id,
        vendor_id=payload.vendor_id,
        cost=payload.cost,
        results=payload.results,
        next_scheduled=payload.next_scheduled,
    )
    return await apply(validated, db)


async def update_record(
    db: AsyncSession,
    context: TransitionContext,
    record_id: int,
    payload: MaintenanceUpdate,
) -> MaintenanceRecord:
    """
    Edit the record; a different `status` goes through the transition rules
    together with the edits.

    Raises:
        EntityNotFoundError, InvalidReferenceError, IllegalTransitionError,
        AssetUnavailableError
    """
    record = await get_or_raise(db, MaintenanceRecord, record_id, context.tenant_id, for_update=True)
    changes = payload.model_dump(exclude_unset=True)
    requested = changes.pop("status", None)
    completed_date = changes.pop("completed_date", None)

    if changes.get("performed_by_id") is not None:
        await resolve_reference(
            db, Person, changes["performed_by_id"], context.tenant_id,
            f"Invalid performer ID: {changes['performed_by_id']}",
        )
    if changes.get("vendor_id") is not None:
        await resolve_reference(
            db, Vendor, changes["vendor_id"], context.tenant_id,
            f"Invalid vendor ID: {changes['vendor_id']}",
        )
    if "maintenance_type" in changes and changes["maintenance_type"] is not None:
        changes["maintenance_type"] = changes["maintenance_type"].value

    for name, value in changes.items():
        if value is None and name in ("maintenance_type", "description", "scheduled_date"):
            continue
        setattr(record, name, value)

    if requested is not None and requested != record.status:
        context.completed_date = completed_date
        validated = await transitions.validate(db, record, requested, context)
        return await apply(validated, db)

    if completed_date is not None:
        record.completed_date = completed_date
    await commit_or_raise(db, f"maintenance record {record.id}")
    await db.refresh(record)
    return record


async def delete_record(db: AsyncSession, tenant_id: int, record_id: int) -> None:
    """
    Raises:
        EntityNotFoundError: If the record is not in the tenant
        StatusLockedError: If the record is in progress or completed
    """
    record = await get_record(db, tenant_id, record_id)
    await soft_delete(db, record)
