# core/consistency.py
"""
Cross-entity consistency enforcer.

Writes validated transitions (and soft deletes) together with every
dependent-row update in one commit, and guards deletes against rows that
still reference the entity.
"""
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import (
    ApplyError,
    HasDependentsError,
    InvalidReferenceError,
    StatusLockedError,
)
from core.lookups import count_live, get_in_tenant, label_of
from core.statuses import (
    AssetStatus,
    AssignmentStatus,
    MaintenanceStatus,
    ProcurementStatus,
)
from core.transitions import ValidatedTransition, utcnow
from db_models.asset import Asset
from db_models.assignment import AssetAssignment
from db_models.maintenance import MaintenanceRecord
from db_models.person import Person
from db_models.procurement import ProcurementItem, ProcurementRequest, PurchaseOrder
from db_models.reference import AssetCategory, Location, Vendor

logger = logging.getLogger(__name__)


async def commit_or_raise(db: AsyncSession, what: str) -> None:
    """
    Commit the session's unit of work; on any storage failure roll all of it
    back and raise ApplyError.
    """
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Rolled back %s: constraint violation (%s)", what, exc.orig)
        raise ApplyError(f"Conflicting change rejected while saving {what}", conflict=True) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Rolled back %s: %s", what, exc)
        raise ApplyError(f"Failed to save {what}") from exc


async def apply(validated: ValidatedTransition, db: AsyncSession) -> Any:
    """
    Persist a validated transition: new row or status change on the primary
    entity, then every dependent update, all in one commit.

    Returns the primary entity, refreshed.

    Raises:
        ApplyError: storage rejected the write; nothing was persisted
    """
    entity = validated.entity
    if validated.is_creation:
        db.add(entity)
    for name, value in validated.changes.items():
        setattr(entity, name, value)
    for dependent in validated.dependents:
        for name, value in dependent.changes.items():
            setattr(dependent.entity, name, value)

    await commit_or_raise(db, validated.describe())
    await db.refresh(entity)

    logger.info(
        "Applied %s (tenant %s, %d dependent update(s))",
        validated.describe(), entity.tenant_id, len(validated.dependents),
    )
    return entity


# ---------- Deletion guards ----------

# Entities that may only be deleted in some statuses
_DELETABLE_STATUSES: dict[type, set[str]] = {
    ProcurementRequest: {ProcurementStatus.DRAFT.value},
    MaintenanceRecord: {MaintenanceStatus.SCHEDULED.value, MaintenanceStatus.CANCELLED.value},
    AssetAssignment: {AssignmentStatus.ACTIVE.value},
}


def _plural(count: int, noun: str, plural: str | None = None) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {plural or noun + 's'}"


async def _category_dependents(db: AsyncSession, category: AssetCategory) -> list[str]:
    found = []
    assets = await count_live(db, Asset, category.tenant_id, Asset.category_id == category.id)
    if assets:
        found.append(_plural(assets, "asset"))
    children = await count_live(
        db, AssetCategory, category.tenant_id, AssetCategory.parent_id == category.id,
    )
    if children:
        found.append(_plural(children, "child category", "child categories"))
    return found


async def _location_dependents(db: AsyncSession, location: Location) -> list[str]:
    found = []
    children = await count_live(db, Location, location.tenant_id, Location.parent_id == location.id)
    if children:
        found.append(_plural(children, "child location"))
    assets = await count_live(db, Asset, location.tenant_id, Asset.location_id == location.id)
    if assets:
        found.append(_plural(assets, "asset"))
    return found


async def _vendor_dependents(db: AsyncSession, vendor: Vendor) -> list[str]:
    orders = await count_live(db, PurchaseOrder, vendor.tenant_id, PurchaseOrder.vendor_id == vendor.id)
    return [_plural(orders, "purchase order")] if orders else []


async def _asset_dependents(db: AsyncSession, asset: Asset) -> list[str]:
    found = []
    active = await count_live(
        db, AssetAssignment, asset.tenant_id,
        AssetAssignment.asset_id == asset.id,
        AssetAssignment.status == AssignmentStatus.ACTIVE.value,
    )
    if active or asset.current_assignee_id is not None:
        found.append("an active assignment")
    open_records = await count_live(
        db, MaintenanceRecord, asset.tenant_id,
        MaintenanceRecord.asset_id == asset.id,
        MaintenanceRecord.status.in_([
            MaintenanceStatus.SCHEDULED.value,
            MaintenanceStatus.IN_PROGRESS.value,
        ]),
    )
    if open_records:
        found.append(_plural(open_records, "open maintenance record"))
    return found


async def _procurement_dependents(db: AsyncSession, request: ProcurementRequest) -> list[str]:
    orders = await count_live(
        db, PurchaseOrder, request.tenant_id, PurchaseOrder.procurement_id == request.id,
    )
    return [_plural(orders, "purchase order")] if orders else []


async def _person_dependents(db: AsyncSession, person: Person) -> list[str]:
    active = await count_live(
        db, AssetAssignment, person.tenant_id,
        AssetAssignment.assigned_to_id == person.id,
        AssetAssignment.status == AssignmentStatus.ACTIVE.value,
    )
    return [_plural(active, "active asset assignment")] if active else []


_DEPENDENT_CHECKS: dict[type, Callable[[AsyncSession, Any], Awaitable[list[str]]]] = {
    AssetCategory: _category_dependents,
    Location: _location_dependents,
    Vendor: _vendor_dependents,
    Asset: _asset_dependents,
    ProcurementRequest: _procurement_dependents,
    Person: _person_dependents,
}


async def find_dependents(db: AsyncSession, entity: Any) -> list[str]:
    """Describe the live rows that still depend on `entity` (empty if none)."""
    check = _DEPENDENT_CHECKS.get(type(entity))
    if check is None:
        return []
    return await check(db, entity)


def _status_allows_delete(entity: Any) -> bool:
    allowed = _DELETABLE_STATUSES.get(type(entity))
    return allowed is None or entity.status in allowed


async def can_delete(db: AsyncSession, entity: Any) -> bool:
    if not _status_allows_delete(entity):
        return False
    return not await find_dependents(db, entity)


async def ensure_deletable(db: AsyncSession, entity: Any) -> None:
    """
    Raises:
        StatusLockedError: the entity's status does not allow deletion
        HasDependentsError: live rows still reference the entity
    """
    label = label_of(entity)
    if not _status_allows_delete(entity):
        allowed = ", ".join(sorted(_DELETABLE_STATUSES[type(entity)]))
        raise StatusLockedError(
            f"Cannot delete {label.lower()} in {entity.status} status (allowed: {allowed})"
        )

    dependents = await find_dependents(db, entity)
    if dependents:
        logger.info(
            "Blocked delete of %s %s (tenant %s): %s",
            label, entity.id, entity.tenant_id, ", ".join(dependents),
        )
        raise HasDependentsError(
            f"Cannot delete {label.lower()} {entity.id}: still referenced by "
            + ", ".join(dependents),
            dependents=dependents,
        )


async def soft_delete(
    db: AsyncSession,
    entity: Any,
    *,
    clock: Callable[[], datetime] = utcnow,
) -> None:
    """
    Mark `entity` deleted after the deletion guards pass, together with the
    rows it owns or frees, in one commit.

    Raises: StatusLockedError, HasDependentsError, ApplyError
    """
    await ensure_deletable(db, entity)
    now = clock()
    entity.deleted_at = now

    if isinstance(entity, ProcurementRequest):
        await db.execute(
            update(ProcurementItem)
            .where(
                ProcurementItem.procurement_id == entity.id,
                ProcurementItem.deleted_at.is_(None),
            )
            .values(deleted_at=now)
        )
    elif isinstance(entity, AssetAssignment):
        # Deleting a live assignment frees the asset if it is still held by
        # the same person
        asset = await get_in_tenant(db, Asset, entity.asset_id, entity.tenant_id, for_update=True)
        if asset is not None and asset.current_assignee_id == entity.assigned_to_id:
            asset.status = AssetStatus.IN_STOCK.value
            asset.current_assignee_id = None

    what = f"deletion of {label_of(entity).lower()} {entity.id}"
    await commit_or_raise(db, what)
    logger.info("Soft-deleted %s %s (tenant %s)", label_of(entity), entity.id, entity.tenant_id)


# ---------- Hierarchies ----------

async def ensure_valid_parent(
    db: AsyncSession,
    model: type,
    node_id: int | None,
    parent_id: int | None,
    tenant_id: int,
) -> None:
    """
    Check that `parent_id` can become the parent of node `node_id` (None for
    a node not created yet) in a self-referencing table.

    Raises:
        InvalidReferenceError: parent unknown in the tenant, the node itself,
            or one of the node's descendants
    """
    if parent_id is None:
        return

    label = label_of(model)
    if node_id is not None and parent_id == node_id:
        raise InvalidReferenceError(f"{label} cannot be its own parent")

    parent = await get_in_tenant(db, model, parent_id, tenant_id)
    if parent is None:
        raise InvalidReferenceError(f"Invalid parent {label.lower()} ID: {parent_id}")

    if node_id is None:
        return

    # Walk up from the new parent; meeting the node means a cycle
    seen = {parent.id}
    ancestor_id = parent.parent_id
    while ancestor_id is not None and ancestor_id not in seen:
        if ancestor_id == node_id:
            raise InvalidReferenceError(f"{label} cannot be moved under its own descendant")
        seen.add(ancestor_id)
        ancestor = await get_in_tenant(db, model, ancestor_id, tenant_id)
        ancestor_id = ancestor.parent_id if ancestor is not None else None
