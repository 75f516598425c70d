# api/maintenance/views.py
"""
Maintenance record endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import TenantContext
from core.errors import AssetUnavailableError, EntityNotFoundError, StatusLockedError
from core.statuses import MaintenanceStatus, MaintenanceType
from .models import MaintenanceCreate, MaintenanceRead, MaintenanceUpdate
from . import db_manager

router = APIRouter(prefix="/maintenance-records", tags=["maintenance-records"])


@router.get(
    "",
    response_model=list[MaintenanceRead],
    summary="List maintenance records",
)
async def list_records_endpoint(
    ctx: TenantContext,
    asset_id: int | None = Query(None),
    status_filter: MaintenanceStatus | None = Query(None, alias="status"),
    maintenance_type: MaintenanceType | None = Query(None, alias="type"),
    db: AsyncSession = Depends(get_session),
) -> list[MaintenanceRead]:
    records = await db_manager.list_records(
        db,
        ctx.tenant_id,
        asset_id=asset_id,
        status=status_filter.value if status_filter else None,
        maintenance_type=maintenance_type.value if maintenance_type else None,
    )
    return [MaintenanceRead.model_validate(r) for r in records]


@router.post(
    "",
    response_model=MaintenanceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a maintenance record",
)
async def create_record_endpoint(
    payload: MaintenanceCreate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> MaintenanceRead:
    """
    Schedule maintenance, or start it right away with `status=in_progress`
    (the asset goes into maintenance).
    """
    try:
        record = await db_manager.create_record(db, ctx.transition_context(), payload)
    except AssetUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return MaintenanceRead.model_validate(record)


@router.get(
    "/{record_id}",
    response_model=MaintenanceRead,
    summary="Get maintenance record by ID",
)
async def get_record_endpoint(
    record_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> MaintenanceRead:
    try:
        record = await db_manager.get_record(db, ctx.tenant_id, record_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return MaintenanceRead.model_validate(record)


@router.put(
    "/{record_id}",
    response_model=MaintenanceRead,
    summary="Update a maintenance record",
)
async def update_record_endpoint(
    record_id: int,
    payload: MaintenanceUpdate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> MaintenanceRead:
    """
    Completing a record stamps `completed_date` (now if omitted); completing
    or cancelling the last running record puts the asset back in stock.
    """
    try:
        record = await db_manager.update_record(db, ctx.transition_context(), record_id, payload)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return MaintenanceRead.model_validate(record)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a maintenance record",
)
async def delete_record_endpoint(
    record_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> None:
    """
    Only scheduled or cancelled records can be deleted.
    """
    try:
        await db_manager.delete_record(db, ctx.tenant_id, record_id)
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
