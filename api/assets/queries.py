# api/assets/queries.py
"""
SQLAlchemy query builders for assets.
"""
from core.lookups import select_live
from db_models.asset import Asset


def select_assets(
    tenant_id: int,
    category_id: int | None = None,
    status: str | None = None,
    location_id: int | None = None,
    assigned_to: int | None = None,
):
    """Select live assets of a tenant with optional filters, newest first."""
    stmt = select_live(Asset, tenant_id)
    if category_id is not None:
        stmt = stmt.where(Asset.category_id == category_id)
    if status:
        stmt = stmt.where(Asset.status == status)
    if location_id is not None:
        stmt = stmt.where(Asset.location_id == location_id)
    if assigned_to is not None:
        stmt = stmt.where(Asset.current_assignee_id == assigned_to)
    return stmt.order_by(Asset.id.desc())
