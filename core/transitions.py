# core/transitions.py
"""
Transition validator for the asset/procurement lifecycle.

`validate` (and the `validate_new_*` creation variants) decide whether a
status change is allowed and describe everything that has to change with
it. They only read: the returned ValidatedTransition is written by
core.consistency.apply in a single commit.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import (
    AssetUnavailableError,
    EntityNotFoundError,
    IllegalTransitionError,
    InvalidApproverError,
    UnknownEntityTypeError,
    UnknownStatusError,
)
from core.lookups import (
    count_in_progress_maintenance,
    find_active_assignment,
    get_in_tenant,
    label_of,
    resolve_reference,
)
from core.statuses import (
    AssetStatus,
    AssignmentStatus,
    EntityType,
    MaintenanceStatus,
    MaintenanceType,
    ProcurementStatus,
    allowed_transitions,
    parse_status,
)
from db_models.asset import Asset
from db_models.assignment import AssetAssignment
from db_models.maintenance import MaintenanceRecord
from db_models.person import Person
from db_models.procurement import ProcurementRequest
from db_models.reference import Vendor

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


ENTITY_TYPES: dict[type, EntityType] = {
    Asset: EntityType.ASSET,
    AssetAssignment: EntityType.ASSET_ASSIGNMENT,
    MaintenanceRecord: EntityType.MAINTENANCE_RECORD,
    ProcurementRequest: EntityType.PROCUREMENT_REQUEST,
}

# Asset states that block starting maintenance: an assigned asset would keep
# its assignee while no longer "assigned", a retired one is out of service.
_NOT_MAINTAINABLE = {AssetStatus.ASSIGNED.value, AssetStatus.RETIRED.value}

_ASSIGNABLE = {AssetStatus.IN_STOCK.value, AssetStatus.ASSIGNED.value}


@dataclass
class TransitionContext:
    """Who is asking, on behalf of which tenant, and with what extra inputs."""

    tenant_id: int
    actor_id: int | None = None
    approver_id: int | None = None
    return_date: datetime | None = None
    completed_date: datetime | None = None
    clock: Callable[[], datetime] = utcnow


@dataclass
class EntityUpdate:
    """Field values to write on a row other than the one being transitioned."""

    entity: Any
    changes: dict[str, Any]


@dataclass
class ValidatedTransition:
    entity_type: EntityType
    entity: Any
    from_status: str | None
    to_status: str
    changes: dict[str, Any] = field(default_factory=dict)
    dependents: list[EntityUpdate] = field(default_factory=list)

    @property
    def is_creation(self) -> bool:
        """True when `entity` is a new row that apply() has to add."""
        return self.from_status is None

    def describe(self) -> str:
        entity_id = getattr(self.entity, "id", None)
        return (
            f"{self.entity_type.value} {entity_id if entity_id is not None else '(new)'}: "
            f"{self.from_status or '-'} -> {self.to_status}"
        )


def entity_type_of(entity: Any) -> EntityType:
    try:
        return ENTITY_TYPES[type(entity)]
    except KeyError:
        raise UnknownEntityTypeError(
            f"{type(entity).__name__} has no lifecycle"
        ) from None


# ---------- Status changes on existing rows ----------

async def validate(
    db: AsyncSession,
    entity: Any,
    requested_status: str,
    context: TransitionContext,
) -> ValidatedTransition:
    """
    Check a requested status change and work out its side effects.

    Raises:
        UnknownEntityTypeError / UnknownStatusError: not a lifecycle entity
            or not one of its statuses
        EntityNotFoundError: entity belongs to another tenant or is deleted
        IllegalTransitionError: requested status not reachable from current
        InvalidApproverError: approving without a valid approver
        AssetUnavailableError: the linked asset cannot follow the change
    """
    entity_type = entity_type_of(entity)
    if entity.tenant_id != context.tenant_id or entity.deleted_at is not None:
        raise EntityNotFoundError(f"{label_of(entity)} {entity.id} not found")

    to_status = parse_status(entity_type, requested_status)
    from_status = entity.status
    if to_status not in allowed_transitions(entity_type, from_status):
        raise IllegalTransitionError(entity_type.value, from_status, to_status)

    transition = ValidatedTransition(
        entity_type=entity_type,
        entity=entity,
        from_status=from_status,
        to_status=to_status,
        changes={"status": to_status},
    )

    rule = _RULES.get((entity_type, to_status))
    if rule is not None:
        await rule(db, transition, context)

    logger.debug("Validated %s", transition.describe())
    return transition


async def _approve_procurement(
    db: AsyncSession,
    transition: ValidatedTransition,
    context: TransitionContext,
) -> None:
    if context.approver_id is None:
        raise InvalidApproverError("Approved by ID is required when approving")

    approver = await get_in_tenant(db, Person, context.approver_id, context.tenant_id)
    if approver is None:
        raise InvalidApproverError(f"Invalid approver ID: {context.approver_id}")

    transition.changes["approved_by_id"] = approver.id
    transition.changes["approval_date"] = context.clock()


async def _return_assignment(
    db: AsyncSession,
    transition: ValidatedTransition,
    context: TransitionContext,
) -> None:
    assignment = transition.entity
    transition.changes["return_date"] = context.return_date or context.clock()

    asset = await resolve_reference(
        db, Asset, assignment.asset_id, context.tenant_id,
        "Assigned asset no longer exists",
        for_update=True,
    )
    # Returning always frees the asset, whoever initiates it
    transition.dependents.append(EntityUpdate(asset, {
        "status": AssetStatus.IN_STOCK.value,
        "current_assignee_id": None,
    }))


async def _start_maintenance(
    db: AsyncSession,
    transition: ValidatedTransition,
    context: TransitionContext,
) -> None:
    asset = await resolve_reference(
        db, Asset, transition.entity.asset_id, context.tenant_id,
        "Asset under maintenance no longer exists",
        for_update=True,
    )
    transition.dependents.append(_enter_maintenance(asset))


def _enter_maintenance(asset: Asset) -> EntityUpdate:
    if asset.status in _NOT_MAINTAINABLE:
        raise AssetUnavailableError(
            f"Asset {asset.id} cannot go into maintenance (current status: {asset.status})"
        )
    return EntityUpdate(asset, {"status": AssetStatus.MAINTENANCE.value})


async def _release_asset(
    db: AsyncSession,
    transition: ValidatedTransition,
    context: TransitionContext,
) -> None:
    """Put the asset back in stock once its last running maintenance ends."""
    record = transition.entity
    asset = await get_in_tenant(db, Asset, record.asset_id, context.tenant_id, for_update=True)
    if asset is None or asset.status != AssetStatus.MAINTENANCE.value:
        return

    still_running = await count_in_progress_maintenance(
        db, asset.id, context.tenant_id, exclude_id=record.id,
    )
    if still_running:
        return

    transition.dependents.append(EntityUpdate(asset, {"status": AssetStatus.IN_STOCK.value}))


async def _complete_maintenance(
    db: AsyncSession,
    transition: ValidatedTransition,
    context: TransitionContext,
) -> None:
    transition.changes["completed_date"] = context.completed_date or context.clock()
    await _release_asset(db, transition, context)


async def _cancel_maintenance(
    db: AsyncSession,
    transition: ValidatedTransition,
    context: TransitionContext,
) -> None:
    if transition.from_status == MaintenanceStatus.IN_PROGRESS.value:
        await _release_asset(db, transition, context)


_Rule = Callable[[AsyncSession, ValidatedTransition, TransitionContext], Awaitable[None]]

_RULES: dict[tuple[EntityType, str], _Rule] = {
    (EntityType.PROCUREMENT_REQUEST, ProcurementStatus.APPROVED.value): _approve_procurement,
    (EntityType.ASSET_ASSIGNMENT, AssignmentStatus.RETURNED.value): _return_assignment,
    (EntityType.MAINTENANCE_RECORD, MaintenanceStatus.IN_PROGRESS.value): _start_maintenance,
    (EntityType.MAINTENANCE_RECORD, MaintenanceStatus.COMPLETED.value): _complete_maintenance,
    (EntityType.MAINTENANCE_RECORD, MaintenanceStatus.CANCELLED.value): _cancel_maintenance,
}


# ---------- New rows that change other rows ----------

async def validate_new_assignment(
    db: AsyncSession,
    context: TransitionContext,
    *,
    asset_id: int,
    assigned_to_id: int,
    assigned_by_id: int | None = None,
    assignment_date: datetime | None = None,
    expected_return: datetime | None = None,
    notes: str | None = None,
) -> ValidatedTransition:
    """
    Validate handing an asset to a person.

    The assigner defaults to the acting person. The asset must be in stock
    (or marked assigned with no live assignment) and have no active
    assignment, whoever holds it.

    Raises: InvalidReferenceError, AssetUnavailableError
    """
    assigned_by_id = assigned_by_id if assigned_by_id is not None else context.actor_id

    asset = await resolve_reference(
        db, Asset, asset_id, context.tenant_id, f"Invalid asset ID: {asset_id}",
        for_update=True,
    )
    if asset.status not in _ASSIGNABLE:
        raise AssetUnavailableError(
            f"Asset is not available for assignment (current status: {asset.status})"
        )

    active = await find_active_assignment(db, asset.id, context.tenant_id)
    if active is not None:
        if active.assigned_to_id != assigned_to_id:
            raise AssetUnavailableError("Asset is already assigned to someone else")
        raise AssetUnavailableError("Asset is already assigned to this person")

    await resolve_reference(
        db, Person, assigned_to_id, context.tenant_id, f"Invalid assignee ID: {assigned_to_id}",
    )
    await resolve_reference(
        db, Person, assigned_by_id, context.tenant_id,
        "Assigned by ID is required" if assigned_by_id is None else f"Invalid assigner ID: {assigned_by_id}",
    )

    assignment = AssetAssignment(
        tenant_id=context.tenant_id,
        asset_id=asset.id,
        assigned_to_id=assigned_to_id,
        assigned_by_id=assigned_by_id,
        assignment_date=assignment_date or context.clock(),
        expected_return=expected_return,
        notes=notes,
        status=AssignmentStatus.ACTIVE.value,
    )

    return ValidatedTransition(
        entity_type=EntityType.ASSET_ASSIGNMENT,
        entity=assignment,
        from_status=None,
        to_status=AssignmentStatus.ACTIVE.value,
        dependents=[EntityUpdate(asset, {
            "status": AssetStatus.ASSIGNED.value,
            "current_assignee_id": assigned_to_id,
        })],
    )


_INITIAL_MAINTENANCE = {MaintenanceStatus.SCHEDULED.value, MaintenanceStatus.IN_PROGRESS.value}


async def validate_new_maintenance(
    db: AsyncSession,
    context: TransitionContext,
    *,
    asset_id: int,
    maintenance_type: str,
    description: str,
    status: str = MaintenanceStatus.SCHEDULED.value,
    scheduled_date: datetime | None = None,
    performed_by_id: int | None = None,
    vendor_id: int | None = None,
    cost: float | None = None,
    results: str | None = None,
    next_scheduled: datetime | None = None,
) -> ValidatedTransition:
    """
    Validate opening a maintenance record. Starting it straight away
    (status in_progress) puts the asset into maintenance.

    Raises: UnknownStatusError, IllegalTransitionError, InvalidReferenceError,
        AssetUnavailableError
    """
    status = parse_status(EntityType.MAINTENANCE_RECORD, status)
    if status not in _INITIAL_MAINTENANCE:
        raise IllegalTransitionError(EntityType.MAINTENANCE_RECORD.value, None, status)

    try:
        maintenance_type = MaintenanceType(maintenance_type).value
    except ValueError:
        raise UnknownStatusError(f"Unknown maintenance type: {maintenance_type!r}") from None

    asset = await resolve_reference(
        db, Asset, asset_id, context.tenant_id, f"Invalid asset ID: {asset_id}",
        for_update=True,
    )
    if performed_by_id is not None:
        await resolve_reference(
            db, Person, performed_by_id, context.tenant_id, f"Invalid performer ID: {performed_by_id}",
        )
    if vendor_id is not None:
        await resolve_reference(
            db, Vendor, vendor_id, context.tenant_id, f"Invalid vendor ID: {vendor_id}",
        )

    dependents = []
    if status == MaintenanceStatus.IN_PROGRESS.value:
        dependents.append(_enter_maintenance(asset))

    record = MaintenanceRecord(
        tenant_id=context.tenant_id,
        asset_id=asset.id,
        maintenance_type=maintenance_type,
        status=status,
        scheduled_date=scheduled_date or context.clock(),
        performed_by_id=performed_by_id,
        vendor_id=vendor_id,
        cost=cost,
        description=description,
        results=results,
        next_scheduled=next_scheduled,
    )

    return ValidatedTransition(
        entity_type=EntityType.MAINTENANCE_RECORD,
        entity=record,
        from_status=None,
        to_status=status,
        dependents=dependents,
    )
