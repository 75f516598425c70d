# api/assets/db_manager.py
"""
Business logic for assets.

Descriptive fields are edited freely; the status only moves along the direct
asset transitions (procurement/in stock/retired). Assignment and maintenance
states belong to their own workflows.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core import transitions
from core.consistency import apply, commit_or_raise, soft_delete
from core.errors import IllegalTransitionError
from core.lookups import get_or_raise, resolve_reference
from core.statuses import AssetStatus, EntityType
from core.transitions import TransitionContext
from db_models.asset import Asset
from db_models.reference import AssetCategory, Location
from .models import AssetCreate, AssetUpdate
from . import queries

logger = logging.getLogger(__name__)

INITIAL_STATUSES = {AssetStatus.PROCUREMENT.value, AssetStatus.IN_STOCK.value}


async def list_assets(
    db: AsyncSession,
    tenant_id: int,
    category_id: int | None = None,
    status: str | None = None,
    location_id: int | None = None,
    assigned_to: int | None = None,
) -> list[Asset]:
    stmt = queries.select_assets(
        tenant_id,
        category_id=category_id,
        status=status,
        location_id=location_id,
        assigned_to=assigned_to,
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_asset(db: AsyncSession, tenant_id: int, asset_id: int) -> Asset:
    """Raises EntityNotFoundError if the asset is not in the tenant."""
    return await get_or_raise(db, Asset, asset_id, tenant_id)


async def _check_references(
    db: AsyncSession,
    tenant_id: int,
    category_id: int | None,
    location_id: int | None,
) -> None:
    if category_id is not None:
        await resolve_reference(
            db, AssetCategory, category_id, tenant_id, f"Invalid category ID: {category_id}",
        )
    if location_id is not None:
        await resolve_reference(
            db, Location, location_id, tenant_id, f"Invalid location ID: {location_id}",
        )


async def create_asset(db: AsyncSession, tenant_id: int, payload: AssetCreate) -> Asset:
    """
    Raises:
        IllegalTransitionError: If the initial status is not procurement or in_stock
        InvalidReferenceError: If category or location are not in the tenant
    """
    status = payload.status.value
    if status not in INITIAL_STATUSES:
        raise IllegalTransitionError(EntityType.ASSET.value, None, status)

    await _check_references(db, tenant_id, payload.category_id, payload.location_id)

    asset = Asset(tenant_id=tenant_id, **payload.model_dump(exclude={"status"}), status=status)
    db.add(asset)
    await commit_or_raise(db, "new asset")
    await db.refresh(asset)
    logger.info("Created asset %s (%s) in tenant %s", asset.id, status, tenant_id)
    return asset


async def update_asset(
    db: AsyncSession,
    context: TransitionContext,
    asset_id: int,
    payload: AssetUpdate,
) -> Asset:
    """
    Update descriptive fields and, when it differs from the current one, the
    status. Field edits and the status change are committed together.

    Raises:
        EntityNotFoundError: If the asset is not in the tenant
        InvalidReferenceError: If category or location are not in the tenant
        IllegalTransitionError: If the status change is not a direct asset transition
    """
    asset = await get_or_raise(db, Asset, asset_id, context.tenant_id, for_update=True)
    changes = payload.model_dump(exclude_unset=True)
    requested = changes.pop("status", None)

    await _check_references(db, context.tenant_id, changes.get("category_id"), changes.get("location_id"))

    for name, value in changes.items():
        setattr(asset, name, value)

    if requested is not None and requested != asset.status:
        validated = await transitions.validate(db, asset, requested, context)
        return await apply(validated, db)

    await commit_or_raise(db, f"asset {asset.id}")
    await db.refresh(asset)
    return asset


async def delete_asset(db: AsyncSession, tenant_id: int, asset_id: int) -> None:
    """
    Raises:
        EntityNotFoundError: If the asset is not in the tenant
        HasDependentsError: If the asset is assigned or has open maintenance
    """
    asset = await get_asset(db, tenant_id, asset_id)
    await soft_delete(db, asset)
