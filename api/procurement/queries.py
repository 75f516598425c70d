# api/procurement/queries.py
"""
SQLAlchemy query builders for procurement requests.
"""
from core.lookups import select_live
from db_models.procurement import ProcurementItem, ProcurementRequest


def select_requests(
    tenant_id: int,
    status: str | None = None,
    requested_by: int | None = None,
):
    """Select live procurement requests of a tenant, newest first."""
    stmt = select_live(ProcurementRequest, tenant_id)
    if status:
        stmt = stmt.where(ProcurementRequest.status == status)
    if requested_by is not None:
        stmt = stmt.where(ProcurementRequest.requested_by_id == requested_by)
    return stmt.order_by(ProcurementRequest.request_date.desc(), ProcurementRequest.id.desc())


def select_items(tenant_id: int, procurement_id: int):
    """Select the live items of a request in insertion order."""
    return (
        select_live(ProcurementItem, tenant_id)
        .where(ProcurementItem.procurement_id == procurement_id)
        .order_by(ProcurementItem.id)
    )
