# api/reference_data/views.py
"""
Reference data endpoints: asset categories, locations and vendors.

Invalid parents (400) and blocked deletes (409) raised by the lifecycle core
are translated by the application-level LifecycleError handler.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from core.deps import TenantContext
from core.errors import EntityNotFoundError
from db_models.reference import AssetCategory, Location, Vendor
from .models import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    LocationCreate,
    LocationRead,
    LocationUpdate,
    VendorCreate,
    VendorRead,
    VendorUpdate,
)
from . import db_manager

categories_router = APIRouter(prefix="/asset-categories", tags=["asset-categories"])
locations_router = APIRouter(prefix="/locations", tags=["locations"])
vendors_router = APIRouter(prefix="/vendors", tags=["vendors"])


def _not_found(exc: EntityNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


# ---------- Asset categories ----------

@categories_router.get(
    "",
    response_model=list[CategoryRead],
    summary="List asset categories",
)
async def list_categories_endpoint(
    ctx: TenantContext,
    parent_id: int | None = Query(None, description="Only children of this category"),
    search: str | None = Query(None, description="Match on name"),
    db: AsyncSession = Depends(get_session),
) -> list[CategoryRead]:
    categories = await db_manager.list_categories(db, ctx.tenant_id, parent_id=parent_id, search=search)
    return [CategoryRead.model_validate(c) for c in categories]


@categories_router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an asset category",
)
async def create_category_endpoint(
    payload: CategoryCreate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> CategoryRead:
    category = await db_manager.create_item(db, AssetCategory, ctx.tenant_id, payload)
    return CategoryRead.model_validate(category)


@categories_router.get(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Get asset category by ID",
)
async def get_category_endpoint(
    category_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> CategoryRead:
    try:
        category = await db_manager.get_item(db, AssetCategory, ctx.tenant_id, category_id)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc

    return CategoryRead.model_validate(category)


@categories_router.put(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Update an asset category",
)
async def update_category_endpoint(
    category_id: int,
    payload: CategoryUpdate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> CategoryRead:
    try:
        category = await db_manager.update_item(db, AssetCategory, ctx.tenant_id, category_id, payload)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc

    return CategoryRead.model_validate(category)


@categories_router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an asset category",
)
async def delete_category_endpoint(
    category_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> None:
    """
    Refused (409) while assets or child categories still use the category.
    """
    try:
        await db_manager.delete_item(db, AssetCategory, ctx.tenant_id, category_id)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc


# ---------- Locations ----------

@locations_router.get(
    "",
    response_model=list[LocationRead],
    summary="List locations",
)
async def list_locations_endpoint(
    ctx: TenantContext,
    parent_id: int | None = Query(None, description="Only children of this location"),
    type: str | None = Query(None, description="Filter by location type"),
    search: str | None = Query(None, description="Match on name or address"),
    db: AsyncSession = Depends(get_session),
) -> list[LocationRead]:
    locations = await db_manager.list_locations(
        db, ctx.tenant_id, parent_id=parent_id, location_type=type, search=search,
    )
    return [LocationRead.model_validate(loc) for loc in locations]


@locations_router.post(
    "",
    response_model=LocationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a location",
)
async def create_location_endpoint(
    payload: LocationCreate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> LocationRead:
    location = await db_manager.create_item(db, Location, ctx.tenant_id, payload)
    return LocationRead.model_validate(location)


@locations_router.get(
    "/{location_id}",
    response_model=LocationRead,
    summary="Get location by ID",
)
async def get_location_endpoint(
    location_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> LocationRead:
    try:
        location = await db_manager.get_item(db, Location, ctx.tenant_id, location_id)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc

    return LocationRead.model_validate(location)


@locations_router.put(
    "/{location_id}",
    response_model=LocationRead,
    summary="Update a location",
)
async def update_location_endpoint(
    location_id: int,
    payload: LocationUpdate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> LocationRead:
    """
    A location cannot become its own parent or move under one of its
    descendants (400).
    """
    try:
        location = await db_manager.update_item(db, Location, ctx.tenant_id, location_id, payload)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc

    return LocationRead.model_validate(location)


@locations_router.delete(
    "/{location_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a location",
)
async def delete_location_endpoint(
    location_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> None:
    try:
        await db_manager.delete_item(db, Location, ctx.tenant_id, location_id)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc


# ---------- Vendors ----------

@vendors_router.get(
    "",
    response_model=list[VendorRead],
    summary="List vendors",
)
async def list_vendors_endpoint(
    ctx: TenantContext,
    search: str | None = Query(None, description="Match on name or contact"),
    db: AsyncSession = Depends(get_session),
) -> list[VendorRead]:
    vendors = await db_manager.list_vendors(db, ctx.tenant_id, search=search)
    return [VendorRead.model_validate(v) for v in vendors]


@vendors_router.post(
    "",
    response_model=VendorRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a vendor",
)
async def create_vendor_endpoint(
    payload: VendorCreate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> VendorRead:
    vendor = await db_manager.create_item(db, Vendor, ctx.tenant_id, payload)
    return VendorRead.model_validate(vendor)


@vendors_router.get(
    "/{vendor_id}",
    response_model=VendorRead,
    summary="Get vendor by ID",
)
async def get_vendor_endpoint(
    vendor_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> VendorRead:
    try:
        vendor = await db_manager.get_item(db, Vendor, ctx.tenant_id, vendor_id)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc

    return VendorRead.model_validate(vendor)


@vendors_router.put(
    "/{vendor_id}",
    response_model=VendorRead,
    summary="Update a vendor",
)
async def update_vendor_endpoint(
    vendor_id: int,
    payload: VendorUpdate,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> VendorRead:
    try:
        vendor = await db_manager.update_item(db, Vendor, ctx.tenant_id, vendor_id, payload)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc

    return VendorRead.model_validate(vendor)


@vendors_router.delete(
    "/{vendor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a vendor",
)
async def delete_vendor_endpoint(
    vendor_id: int,
    ctx: TenantContext,
    db: AsyncSession = Depends(get_session),
) -> None:
    """
    Refused (409) while purchase orders still reference the vendor.
    """
    try:
        await db_manager.delete_item(db, Vendor, ctx.tenant_id, vendor_id)
    except EntityNotFoundError as exc:
        raise _not_found(exc) from exc
