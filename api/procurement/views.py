# api/procurement/views.py
"""
Procurement request endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import TenantContext
from core.errors import (
    EntityNotFoundError,
    HasDependentsError,
    IllegalTransitionError,
    InvalidApproverError,
    StatusLockedError,
)
from core.statuses import ProcurementStatus
from .models import (
    ProcurementCreate,
    ProcurementDetail,
    ProcurementItemRead,
    ProcurementRead,
    ProcurementUpdate,
)
from . import db_manager

router = APIRouter(prefix="/procurement-requests", tags=["procurement-requests"])


async def _detail(db: AsyncSession, request) -> ProcurementDetail:
    items = await db_manager.list_items(db, request.tenant_id, request.id)
    detail = ProcurementDetail.model_validate(request)
    detail.items = [ProcurementItemRead.model_validate(i) for i in items]
    return detail


@router.get(
    "",
    response_model=list[ProcurementRead],
    summary="List procurement requests",
)
async def list_requests_endpoint(
    ctx: TenantContext,
    status_filter: ProcurementStatus | None = Query(None, alias="status"),
    requested_by: int | None = Query(None, description="Requester person ID"),
    db: AsyncSession = Depends(get_session),
) -> list[ProcurementRead]:
    requests = await db_manager.list_requests(
        db,
        ctx.tenant_id,
        status=status_filter.value if status_filter else None,
        requested_by=requested_by,
    )
    return [ProcurementRead.model_validate(r) for r in requests]


@router.post(
    "",
    response_model=ProcurementDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create a procurement request",
)
async def create_request_endpoint(
    payload: ProcurementCreate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> ProcurementDetail:
    """
    Create a draft request numbered PR-YYYYMMDD-NNN. The requester defaults
    to the X-Person-ID header.
    """
    request = await db_manager.create_request(db, ctx.transition_context(), payload)
    return await _detail(db, request)


@router.get(
    "/{request_id}",
    response_model=ProcurementDetail,
    summary="Get procurement request with its items",
)
async def get_request_endpoint(
    request_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> ProcurementDetail:
    try:
        request = await db_manager.get_request(db, ctx.tenant_id, request_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return await _detail(db, request)


@router.put(
    "/{request_id}",
    response_model=ProcurementDetail,
    summary="Update a procurement request",
)
async def update_request_endpoint(
    request_id: int,
    payload: ProcurementUpdate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> ProcurementDetail:
    """
    Only draft or submitted requests can be edited. Moving to `approved`
    requires `approved_by_id` and stamps the approval date.
    """
    try:
        request = await db_manager.update_request(db, ctx.transition_context(), request_id, payload)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except InvalidApproverError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except (StatusLockedError, IllegalTransitionError) as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return await _detail(db, request)


@router.delete(
    "/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a draft procurement request",
)
async def delete_request_endpoint(
    request_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> None:
    try:
        await db_manager.delete_request(db, ctx.tenant_id, request_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except (StatusLockedError, HasDependentsError) as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
