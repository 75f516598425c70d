# api/assignments/queries.py
"""
SQLAlchemy query builders for asset assignments.
"""
from core.lookups import select_live
from db_models.assignment import AssetAssignment


def select_assignments(
    tenant_id: int,
    asset_id: int | None = None,
    assigned_to: int | None = None,
    status: str | None = None,
):
    """Select live assignments of a tenant, most recent first."""
    stmt = select_live(AssetAssignment, tenant_id)
    if asset_id is not None:
        stmt = stmt.where(AssetAssignment.asset_id == asset_id)
    if assigned_to is not None:
        stmt = stmt.where(AssetAssignment.assigned_to_id == assigned_to)
    if status:
        stmt = stmt.where(AssetAssignment.status == status)
    return stmt.order_by(AssetAssignment.assignment_date.desc(), AssetAssignment.id.desc())
