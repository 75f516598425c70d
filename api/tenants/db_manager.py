# api/tenants/db_manager.py
"""
Business logic for tenant management.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.consistency import commit_or_raise
from core.errors import EntityNotFoundError
from db_models.tenant import Tenant
from .models import TenantCreate, TenantUpdate
from . import queries

logger = logging.getLogger(__name__)


class DuplicateDomainError(Exception):
    """Raised when another tenant already uses the domain."""
    pass


async def get_tenant_by_id(db: AsyncSession, tenant_id: int) -> Tenant:
    """Get a tenant by ID. Raises EntityNotFoundError if not found."""
    result = await db.execute(queries.select_tenant_by_id(tenant_id))
    tenant = result.scalar_one_or_none()
    if tenant is None:
        raise EntityNotFoundError(f"Tenant {tenant_id} not found")
    return tenant


async def list_tenants(db: AsyncSession) -> list[Tenant]:
    result = await db.execute(queries.select_all_tenants())
    return list(result.scalars().all())


async def _ensure_domain_free(db: AsyncSession, domain: str | None, tenant_id: int | None = None) -> None:
    if not domain:
        return
    result = await db.execute(queries.select_tenant_by_domain(domain))
    existing = result.scalar_one_or_none()
    if existing is not None and existing.id != tenant_id:
        raise DuplicateDomainError(f"Tenant with domain '{domain}' already exists")


async def create_tenant(db: AsyncSession, payload: TenantCreate) -> Tenant:
    """
    Raises:
        DuplicateDomainError: If the domain is taken
    """
    await _ensure_domain_free(db, payload.domain)

    tenant = Tenant(**payload.model_dump())
    db.add(tenant)
    await commit_or_raise(db, "new tenant")
    await db.refresh(tenant)
    logger.info("Created tenant %s (%s)", tenant.id, tenant.name)
    return tenant


async def update_tenant(db: AsyncSession, tenant_id: int, payload: TenantUpdate) -> Tenant:
    tenant = await get_tenant_by_id(db, tenant_id)
    changes = payload.model_dump(exclude_unset=True)
    if "domain" in changes:
        await _ensure_domain_free(db, changes["domain"], tenant.id)

    for name, value in changes.items():
        setattr(tenant, name, value)
    await commit_or_raise(db, f"tenant {tenant.id}")
    await db.refresh(tenant)
    return tenant
