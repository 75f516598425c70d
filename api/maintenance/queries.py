# api/maintenance/queries.py
"""
SQLAlchemy query builders for maintenance records.
"""
from core.lookups import select_live
from db_models.maintenance import MaintenanceRecord


def select_records(
    tenant_id: int,
    asset_id: int | None = None,
    status: str | None = None,
    maintenance_type: str | None = None,
):
    """Select live maintenance records of a tenant, latest scheduled first."""
    stmt = select_live(MaintenanceRecord, tenant_id)
    if asset_id is not None:
        stmt = stmt.where(MaintenanceRecord.asset_id == asset_id)
    if status:
        stmt = stmt.where(MaintenanceRecord.status == status)
    if maintenance_type:
        stmt = stmt.where(MaintenanceRecord.maintenance_type == maintenance_type)
    return stmt.order_by(MaintenanceRecord.scheduled_date.desc(), MaintenanceRecord.id.desc())
