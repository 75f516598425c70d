# api/assignments/views.py
"""
Asset assignment endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import TenantContext
from core.errors import (
    AssetUnavailableError,
    EntityNotFoundError,
    IllegalTransitionError,
    StatusLockedError,
)
from core.statuses import AssignmentStatus
from .models import AssignmentCreate, AssignmentRead, AssignmentUpdate
from . import db_manager

router = APIRouter(prefix="/asset-assignments", tags=["asset-assignments"])


@router.get(
    "",
    response_model=list[AssignmentRead],
    summary="List asset assignments",
)
async def list_assignments_endpoint(
    ctx: TenantContext,
    asset_id: int | None = Query(None),
    assigned_to: int | None = Query(None, description="Assignee person ID"),
    status_filter: AssignmentStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_session),
) -> list[AssignmentRead]:
    assignments = await db_manager.list_assignments(
        db,
        ctx.tenant_id,
        asset_id=asset_id,
        assigned_to=assigned_to,
        status=status_filter.value if status_filter else None,
    )
    return [AssignmentRead.model_validate(a) for a in assignments]


@router.post(
    "",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Assign an asset to a person",
)
async def create_assignment_endpoint(
    payload: AssignmentCreate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> AssignmentRead:
    """
    Assign an in-stock asset. The asset becomes `assigned` to the assignee.
    The assigner defaults to the X-Person-ID header.
    """
    try:
        assignment = await db_manager.create_assignment(db, ctx.transition_context(), payload)
    except AssetUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return AssignmentRead.model_validate(assignment)


@router.get(
    "/{assignment_id}",
    response_model=AssignmentRead,
    summary="Get asset assignment by ID",
)
async def get_assignment_endpoint(
    assignment_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> AssignmentRead:
    try:
        assignment = await db_manager.get_assignment(db, ctx.tenant_id, assignment_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return AssignmentRead.model_validate(assignment)


@router.put(
    "/{assignment_id}",
    response_model=AssignmentRead,
    summary="Update or return an asset assignment",
)
async def update_assignment_endpoint(
    assignment_id: int,
    payload: AssignmentUpdate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> AssignmentRead:
    """
    Setting `status` to `returned` stamps the return date (now if omitted)
    and puts the asset back in stock.
    """
    try:
        assignment = await db_manager.update_assignment(db, ctx.transition_context(), assignment_id, payload)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except (IllegalTransitionError, StatusLockedError) as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return AssignmentRead.model_validate(assignment)


@router.delete(
    "/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an active asset assignment",
)
async def delete_assignment_endpoint(
    assignment_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> None:
    try:
        await db_manager.delete_assignment(db, ctx.tenant_id, assignment_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except StatusLockedError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
