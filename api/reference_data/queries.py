# api/reference_data/queries.py
"""
SQLAlchemy query builders for categories, locations and vendors.
"""
from sqlalchemy import or_

from core.lookups import select_live
from db_models.reference import AssetCategory, Location, Vendor


def select_categories(tenant_id: int, parent_id: int | None = None, search: str | None = None):
    stmt = select_live(AssetCategory, tenant_id)
    if parent_id is not None:
        stmt = stmt.where(AssetCategory.parent_id == parent_id)
    if search:
        stmt = stmt.where(AssetCategory.name.ilike(f"%{search}%"))
    return stmt.order_by(AssetCategory.name)


def select_locations(
    tenant_id: int,
    parent_id: int | None = None,
    location_type: str | None = None,
    search: str | None = None,
):
    stmt = select_live(Location, tenant_id)
    if parent_id is not None:
        stmt = stmt.where(Location.parent_id == parent_id)
    if location_type:
        stmt = stmt.where(Location.type == location_type)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Location.name.ilike(pattern), Location.address.ilike(pattern)))
    return stmt.order_by(Location.name)


def select_vendors(tenant_id: int, search: str | None = None):
    stmt = select_live(Vendor, tenant_id)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Vendor.name.ilike(pattern), Vendor.contact_name.ilike(pattern)))
    return stmt.order_by(Vendor.name)
