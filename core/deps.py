# core/deps.py
"""
FastAPI dependencies resolving the tenant (and optionally the acting person)
of a request.

The tenant id is trusted as sent: `X-Tenant-ID` header, then `tenant_id`
header, then `tenant_id` query parameter.
"""
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from db_models.person import Person
from db_models.tenant import Tenant
from core.lookups import get_in_tenant
from core.transitions import TransitionContext

TENANT_HEADER = "X-Tenant-ID"
TENANT_FALLBACK_HEADER = "tenant_id"
TENANT_QUERY_PARAM = "tenant_id"
PERSON_HEADER = "X-Person-ID"


class TenantRequiredError(HTTPException):
    """Raised when the request carries no usable tenant id."""
    def __init__(self, detail: str = "Tenant ID is required"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@dataclass
class RequestContext:
    """Tenant and acting person of the current request."""

    tenant_id: int
    person_id: int | None = None

    def transition_context(self, **kwargs) -> TransitionContext:
        return TransitionContext(tenant_id=self.tenant_id, actor_id=self.person_id, **kwargs)


def _parse_id(raw: str) -> int | None:
    # isdigit() alone also accepts digits like "²" that int() rejects
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


def _raw_tenant_id(request: Request) -> str | None:
    for value in (
        request.headers.get(TENANT_HEADER),
        request.headers.get(TENANT_FALLBACK_HEADER),
        request.query_params.get(TENANT_QUERY_PARAM),
    ):
        if value:
            return value.strip()
    return None


async def get_tenant(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> Tenant:
    """
    Resolve the tenant of the request.

    Raises:
        TenantRequiredError: tenant id missing or not a positive integer (400)
        HTTPException: no such tenant (404)
    """
    raw = _raw_tenant_id(request)
    if raw is None:
        raise TenantRequiredError()
    tenant_id = _parse_id(raw)
    if not tenant_id:
        raise TenantRequiredError("Invalid tenant ID format")

    tenant = await db.get(Tenant, tenant_id)
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant {raw} not found",
        )
    return tenant


async def get_request_context(
    request: Request,
    tenant: Annotated[Tenant, Depends(get_tenant)],
    db: AsyncSession = Depends(get_session),
) -> RequestContext:
    """Tenant plus the optional X-Person-ID, which must be a person of that tenant."""
    raw = request.headers.get(PERSON_HEADER)
    if not raw:
        return RequestContext(tenant_id=tenant.id)

    person_id = _parse_id(raw)
    if person_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid person ID format",
        )
    person = await get_in_tenant(db, Person, person_id, tenant.id)
    if person is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid person ID: {raw.strip()}",
        )
    return RequestContext(tenant_id=tenant.id, person_id=person.id)


# Type aliases for cleaner endpoint signatures
CurrentTenant = Annotated[Tenant, Depends(get_tenant)]
TenantContext = Annotated[RequestContext, Depends(get_request_context)]
