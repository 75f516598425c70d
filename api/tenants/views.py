# api/tenants/views.py
"""
Tenant management endpoints. Not tenant-scoped themselves.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.errors import EntityNotFoundError
from .models import TenantCreate, TenantRead, TenantUpdate
from . import db_manager

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get(
    "",
    response_model=list[TenantRead],
    summary="List tenants",
)
async def list_tenants_endpoint(
    db: AsyncSession = Depends(get_session),
) -> list[TenantRead]:
    tenants = await db_manager.list_tenants(db)
    return [TenantRead.model_validate(t) for t in tenants]


@router.post(
    "",
    response_model=TenantRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tenant",
)
async def create_tenant_endpoint(
    payload: TenantCreate,
    db: AsyncSession = Depends(get_session),
) -> TenantRead:
    try:
        tenant = await db_manager.create_tenant(db, payload)
    except db_manager.DuplicateDomainError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return TenantRead.model_validate(tenant)


@router.get(
    "/{tenant_id}",
    response_model=TenantRead,
    summary="Get tenant by ID",
)
async def get_tenant_endpoint(
    tenant_id: int,
    db: AsyncSession = Depends(get_session),
) -> TenantRead:
    try:
        tenant = await db_manager.get_tenant_by_id(db, tenant_id)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return TenantRead.model_validate(tenant)


@router.put(
    "/{tenant_id}",
    response_model=TenantRead,
    summary="Update a tenant",
)
async def update_tenant_endpoint(
    tenant_id: int,
    payload: TenantUpdate,
    db: AsyncSession = Depends(get_session),
) -> TenantRead:
    try:
        tenant = await db_manager.update_tenant(db, tenant_id, payload)
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except db_manager.DuplicateDomainError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return TenantRead.model_validate(tenant)
