# core/lookups.py
"""
Tenant-scoped reads shared by the lifecycle core and the db_manager modules.

Every helper filters on tenant_id and ignores soft-deleted rows.
"""
from typing import Any, TypeVar

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import EntityNotFoundError, InvalidReferenceError
from core.statuses import AssignmentStatus, MaintenanceStatus
from db_models.assignment import AssetAssignment
from db_models.maintenance import MaintenanceRecord

ModelT = TypeVar("ModelT")

LABELS = {
    "Tenant": "Tenant",
    "Person": "Person",
    "AssetCategory": "Asset category",
    "Location": "Location",
    "Vendor": "Vendor",
    "Asset": "Asset",
    "AssetAssignment": "Asset assignment",
    "MaintenanceRecord": "Maintenance record",
    "ProcurementRequest": "Procurement request",
    "ProcurementItem": "Procurement item",
    "PurchaseOrder": "Purchase order",
}


def label_of(model_or_entity: Any) -> str:
    model = model_or_entity if isinstance(model_or_entity, type) else type(model_or_entity)
    return LABELS.get(model.__name__, model.__name__)


def select_live(model, tenant_id: int):
    """SELECT model rows of one tenant that are not soft-deleted."""
    return select(model).where(
        model.tenant_id == tenant_id,
        model.deleted_at.is_(None),
    )


async def get_in_tenant(
    db: AsyncSession,
    model: type[ModelT],
    entity_id: int,
    tenant_id: int,
    *,
    for_update: bool = False,
) -> ModelT | None:
    stmt = select_live(model, tenant_id).where(model.id == entity_id)
    if for_update:
        # Row lock on PostgreSQL; dialects without FOR UPDATE ignore it
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_or_raise(
    db: AsyncSession,
    model: type[ModelT],
    entity_id: int,
    tenant_id: int,
    *,
    for_update: bool = False,
) -> ModelT:
    """Get a live row of the tenant or raise EntityNotFoundError."""
    entity = await get_in_tenant(db, model, entity_id, tenant_id, for_update=for_update)
    if entity is None:
        raise EntityNotFoundError(f"{label_of(model)} {entity_id} not found")
    return entity


async def resolve_reference(
    db: AsyncSession,
    model: type[ModelT],
    entity_id: int | None,
    tenant_id: int,
    message: str,
    *,
    for_update: bool = False,
) -> ModelT:
    """
    Like get_or_raise, for ids that arrive inside a request body: a miss is
    the caller's input error, not a missing resource.
    """
    if entity_id is None:
        raise InvalidReferenceError(message)
    entity = await get_in_tenant(db, model, entity_id, tenant_id, for_update=for_update)
    if entity is None:
        raise InvalidReferenceError(message)
    return entity


async def count_live(db: AsyncSession, model, tenant_id: int, *criteria) -> int:
    stmt = (
        select(func.count(model.id))
        .where(model.tenant_id == tenant_id, model.deleted_at.is_(None))
        .where(*criteria)
    )
    result = await db.execute(stmt)
    return result.scalar() or 0


async def find_active_assignment(
    db: AsyncSession,
    asset_id: int,
    tenant_id: int,
) -> AssetAssignment | None:
    stmt = (
        select_live(AssetAssignment, tenant_id)
        .where(
            AssetAssignment.asset_id == asset_id,
            AssetAssignment.status == AssignmentStatus.ACTIVE.value,
        )
        .order_by(AssetAssignment.assignment_date.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def count_in_progress_maintenance(
    db: AsyncSession,
    asset_id: int,
    tenant_id: int,
    *,
    exclude_id: int | None = None,
) -> int:
    criteria = [
        MaintenanceRecord.asset_id == asset_id,
        MaintenanceRecord.status == MaintenanceStatus.IN_PROGRESS.value,
    ]
    if exclude_id is not None:
        criteria.append(MaintenanceRecord.id != exclude_id)
    return await count_live(db, MaintenanceRecord, tenant_id, *criteria)
