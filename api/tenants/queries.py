# api/tenants/queries.py
"""
SQLAlchemy query builders for tenants.
"""
from sqlalchemy import select

from db_models.tenant import Tenant


def select_tenant_by_id(tenant_id: int):
    return select(Tenant).where(Tenant.id == tenant_id)


def select_tenant_by_domain(domain: str):
    return select(Tenant).where(Tenant.domain == domain)


def select_all_tenants():
    """Select all tenants, oldest first."""
    return select(Tenant).order_by(Tenant.id)
