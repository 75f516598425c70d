# api/assignments/db_manager.py
"""
Business logic for handing assets to people and taking them back.

The asset row follows every change: creating an assignment marks the asset
assigned to the assignee, returning or deleting it puts the asset back in
stock. Both sides are written in one commit.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core import transitions
from core.consistency import apply, commit_or_raise, soft_delete
from core.errors import StatusLockedError
from core.lookups import get_or_raise
from core.statuses import AssignmentStatus
from core.transitions import TransitionContext
from db_models.assignment import AssetAssignment
from .models import AssignmentCreate, AssignmentUpdate
from . import queries

logger = logging.getLogger(__name__)


async def list_assignments(
    db: AsyncSession,
    tenant_id: int,
    asset_id: int | None = None,
    assigned_to: int | None = None,
    status: str | None = None,
) -> list[AssetAssignment]:
    stmt = queries.select_assignments(tenant_id, asset_id=asset_id, assigned_to=assigned_to, status=status)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_assignment(db: AsyncSession, tenant_id: int, assignment_id: int) -> AssetAssignment:
    """Raises EntityNotFoundError if the assignment is not in the tenant."""
    return await get_or_raise(db, AssetAssignment, assignment_id, tenant_id)


async def create_assignment(
    db: AsyncSession,
    context: TransitionContext,
    payload: AssignmentCreate,
) -> AssetAssignment:
    """
    Raises:
        InvalidReferenceError: unknown asset, assignee or assigner
        AssetUnavailableError: asset not in stock or already assigned
        ApplyError: a concurrent assignment of the same asset won (conflict)
    """
    validated = await transitions.validate_new_assignment(
        db,
        context,
        asset_id=payload.asset_id,
        assigned_to_id=payload.assigned_to_id,
        assigned_by_id=payload.assigned_by_id,
        assignment_date=payload.assignment_date,
        expected_return=payload.expected_return,
        notes=payload.notes,
    )
    return await apply(validated, db)


async def update_assignment(
    db: AsyncSession,
    context: TransitionContext,
    assignment_id: int,
    payload: AssignmentUpdate,
) -> AssetAssignment:
    """
    Edit notes / expected return; `status=returned` returns the asset.

    `return_date` goes with the return itself, or corrects the date of an
    assignment that was already returned.

    Raises:
        EntityNotFoundError: If the assignment is not in the tenant
        IllegalTransitionError: If the assignment was already returned
        StatusLockedError: If a return date is sent for an active assignment
            without returning it
    """
    assignment = await get_or_raise(db, AssetAssignment, assignment_id, context.tenant_id, for_update=True)
    changes = payload.model_dump(exclude_unset=True)
    requested = changes.pop("status", None)
    return_date = changes.pop("return_date", None)
    returning = requested is not None and requested != assignment.status

    if return_date is not None and not returning and assignment.status == AssignmentStatus.ACTIVE.value:
        raise StatusLockedError(
            f"Cannot set a return date on active assignment {assignment.id} without returning it"
        )

    for name, value in changes.items():
        setattr(assignment, name, value)

    if returning:
        context.return_date = return_date
        validated = await transitions.validate(db, assignment, requested, context)
        return await apply(validated, db)

    if return_date is not None:
        assignment.return_date = return_date

    await commit_or_raise(db, f"asset assignment {assignment.id}")
    await db.refresh(assignment)
    return assignment


async def delete_assignment(db: AsyncSession, tenant_id: int, assignment_id: int) -> None:
    """
    Only active assignments can be deleted; the asset goes back in stock.

    Raises:
        EntityNotFoundError: If the assignment is not in the tenant
        StatusLockedError: If the assignment was already returned
    """
    assignment = await get_assignment(db, tenant_id, assignment_id)
    await soft_delete(db, assignment)
