# api/assets/views.py
"""
Asset endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import TenantContext
from core.errors import EntityNotFoundError, HasDependentsError, IllegalTransitionError
from core.statuses import AssetStatus
from .models import AssetCreate, AssetRead, AssetUpdate
from . import db_manager

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get(
    "",
    response_model=list[AssetRead],
    summary="List assets",
)
async def list_assets_endpoint(
    ctx: TenantContext,
    category_id: int | None = Query(None),
    status_filter: AssetStatus | None = Query(None, alias="status"),
    location_id: int | None = Query(None),
    assigned_to: int | None = Query(None, description="Current assignee person ID"),
    db: AsyncSession = Depends(get_session),
) -> list[AssetRead]:
    assets = await db_manager.list_assets(
        db,
        ctx.tenant_id,
        category_id=category_id,
        status=status_filter.value if status_filter else None,
        location_id=location_id,
        assigned_to=assigned_to,
    )
    return [AssetRead.model_validate(a) for a in assets]


@router.post(
    "",
    response_model=AssetRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an asset",
)
async def create_asset_endpoint(
    payload: AssetCreate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> AssetRead:
    """
    Create an asset in `procurement` or `in_stock` status (default in_stock).
    """
    try:
        asset = await db_manager.create_asset(db, ctx.tenant_id, payload)
    except IllegalTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return AssetRead.model_validate(asset)


@router.get(
    "/{asset_id}",
    response_model=AssetRead,
    summary="Get asset by ID",
)
async def get_asset_endpoint(
    asset_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> AssetRead:
    try:
        asset = await db_manager.get_asset(db, ctx.tenant_id, asset_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return AssetRead.model_validate(asset)


@router.put(
    "/{asset_id}",
    response_model=AssetRead,
    summary="Update an asset",
)
async def update_asset_endpoint(
    asset_id: int,
    payload: AssetUpdate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> AssetRead:
    """
    Update asset details. A status change must be a direct asset transition
    (procurement -> in_stock/retired, in_stock -> retired, retired -> in_stock);
    anything else is a 409.
    """
    try:
        asset = await db_manager.update_asset(db, ctx.transition_context(), asset_id, payload)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except IllegalTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return AssetRead.model_validate(asset)


@router.delete(
    "/{asset_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an asset",
)
async def delete_asset_endpoint(
    asset_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> None:
    """
    Refused while the asset is assigned or has scheduled/in-progress maintenance.
    """
    try:
        await db_manager.delete_asset(db, ctx.tenant_id, asset_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except HasDependentsError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
