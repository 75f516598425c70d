# api/reference_data/db_manager.py
"""
Business logic for reference data: asset categories, locations and vendors.

Categories and locations form per-tenant trees; a parent must be a live row
of the same tenant and never the node itself or one of its descendants.
Deletes are soft and refused while anything still points at the row.
"""
import logging
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from core.consistency import commit_or_raise, ensure_valid_parent, soft_delete
from core.lookups import get_or_raise, label_of
from db_models.reference import AssetCategory, Location, Vendor
from . import queries

logger = logging.getLogger(__name__)

_HIERARCHICAL = (AssetCategory, Location)


async def _list(db: AsyncSession, stmt) -> list[Any]:
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_categories(
    db: AsyncSession,
    tenant_id: int,
    parent_id: int | None = None,
    search: str | None = None,
) -> list[AssetCategory]:
    return await _list(db, queries.select_categories(tenant_id, parent_id=parent_id, search=search))


async def list_locations(
    db: AsyncSession,
    tenant_id: int,
    parent_id: int | None = None,
    location_type: str | None = None,
    search: str | None = None,
) -> list[Location]:
    return await _list(db, queries.select_locations(
        tenant_id, parent_id=parent_id, location_type=location_type, search=search,
    ))


async def list_vendors(db: AsyncSession, tenant_id: int, search: str | None = None) -> list[Vendor]:
    return await _list(db, queries.select_vendors(tenant_id, search=search))


async def get_item(db: AsyncSession, model: type, tenant_id: int, item_id: int) -> Any:
    """Raises EntityNotFoundError if the row is not a live row of the tenant."""
    return await get_or_raise(db, model, item_id, tenant_id)


async def create_item(db: AsyncSession, model: type, tenant_id: int, payload: BaseModel) -> Any:
    """
    Raises:
        InvalidReferenceError: parent_id does not resolve in the tenant
    """
    data = payload.model_dump()
    if model in _HIERARCHICAL:
        await ensure_valid_parent(db, model, None, data.get("parent_id"), tenant_id)

    item = model(tenant_id=tenant_id, **data)
    db.add(item)
    await commit_or_raise(db, f"new {label_of(model).lower()}")
    await db.refresh(item)
    logger.info("Created %s %s in tenant %s", label_of(model), item.id, tenant_id)
    return item


async def update_item(
    db: AsyncSession,
    model: type,
    tenant_id: int,
    item_id: int,
    payload: BaseModel,
) -> Any:
    """
    Raises:
        EntityNotFoundError: If the row is not in the tenant
        InvalidReferenceError: If the new parent is unknown, the row itself,
            or one of its descendants
    """
    item = await get_item(db, model, tenant_id, item_id)
    changes = payload.model_dump(exclude_unset=True)
    if model in _HIERARCHICAL and changes.get("parent_id") is not None:
        await ensure_valid_parent(db, model, item.id, changes["parent_id"], tenant_id)

    for name, value in changes.items():
        setattr(item, name, value)
    await commit_or_raise(db, f"{label_of(model).lower()} {item.id}")
    await db.refresh(item)
    return item


async def delete_item(db: AsyncSession, model: type, tenant_id: int, item_id: int) -> None:
    """
    Raises:
        EntityNotFoundError: If the row is not in the tenant
        HasDependentsError: If assets, child rows or purchase orders still
            reference it
    """
    item = await get_item(db, model, tenant_id, item_id)
    await soft_delete(db, item)
