# api/procurement/db_manager.py
"""
Business logic for procurement requests.

Requests are numbered PR-YYYYMMDD-NNN per tenant and day, start as drafts,
and can only be edited while draft or submitted. Status changes go through
the lifecycle validator; approval needs an approver of the tenant.
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core import transitions
from core.consistency import apply, commit_or_raise, soft_delete
from core.errors import ApplyError, StatusLockedError
from core.lookups import get_or_raise, resolve_reference
from core.request_numbers import next_request_number
from core.statuses import ProcurementStatus
from core.transitions import TransitionContext
from db_models.person import Person
from db_models.procurement import ProcurementItem, ProcurementRequest
from db_models.reference import AssetCategory, Vendor
from .models import ProcurementCreate, ProcurementItemCreate, ProcurementUpdate
from . import queries

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = {ProcurementStatus.DRAFT.value, ProcurementStatus.SUBMITTED.value}


async def list_requests(
    db: AsyncSession,
    tenant_id: int,
    status: str | None = None,
    requested_by: int | None = None,
) -> list[ProcurementRequest]:
    result = await db.execute(queries.select_requests(tenant_id, status=status, requested_by=requested_by))
    return list(result.scalars().all())


async def get_request(db: AsyncSession, tenant_id: int, request_id: int) -> ProcurementRequest:
    """Raises EntityNotFoundError if the request is not in the tenant."""
    return await get_or_raise(db, ProcurementRequest, request_id, tenant_id)


async def list_items(db: AsyncSession, tenant_id: int, request_id: int) -> list[ProcurementItem]:
    result = await db.execute(queries.select_items(tenant_id, request_id))
    return list(result.scalars().all())


async def _check_items(db: AsyncSession, tenant_id: int, items: list[ProcurementItemCreate]) -> None:
    for position, item in enumerate(items, start=1):
        await resolve_reference(
            db, AssetCategory, item.category_id, tenant_id,
            f"Invalid category ID in item {position}",
        )
        if item.preferred_vendor_id is not None:
            await resolve_reference(
                db, Vendor, item.preferred_vendor_id, tenant_id,
                f"Invalid preferred vendor ID in item {position}",
            )


async def create_request(
    db: AsyncSession,
    context: TransitionContext,
    payload: ProcurementCreate,
) -> ProcurementRequest:
    """
    Create a draft request with its items under a fresh request number.

    A number taken by a concurrent creator is detected by the unique
    constraint; the insert is retried with the next number up to
    REQUEST_NUMBER_MAX_RETRIES times.

    Raises:
        InvalidReferenceError: unknown requester, category or vendor
        ApplyError: no free number after all retries, or storage failure
    """
    requested_by_id = payload.requested_by_id if payload.requested_by_id is not None else context.actor_id
    await resolve_reference(
        db, Person, requested_by_id, context.tenant_id,
        "Requested by ID is required" if requested_by_id is None else f"Invalid requester ID: {requested_by_id}",
    )
    await _check_items(db, context.tenant_id, payload.items)

    retries = max(1, settings.REQUEST_NUMBER_MAX_RETRIES)
    for attempt in range(1, retries + 1):
        now = context.clock()
        number = await next_request_number(db, context.tenant_id, now.date())
        request = ProcurementRequest(
            tenant_id=context.tenant_id,
            request_number=number,
            requested_by_id=requested_by_id,
            status=ProcurementStatus.DRAFT.value,
            request_date=now,
            expected_date=payload.expected_date,
            total_budget=payload.total_budget,
            notes=payload.notes,
        )
        try:
            db.add(request)
            await db.flush()
            db.add_all([
                ProcurementItem(
                    tenant_id=context.tenant_id,
                    procurement_id=request.id,
                    status="pending",
                    **item.model_dump(),
                )
                for item in payload.items
            ])
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            if attempt == retries:
                logger.error("Gave up numbering procurement request after %d attempts", attempt)
                raise ApplyError(
                    f"Could not allocate a unique request number after {attempt} attempts",
                    conflict=True,
                ) from exc
            logger.warning("Request number %s already taken, retrying (attempt %d)", number, attempt)
            continue
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("Rolled back new procurement request %s: %s", number, exc)
            raise ApplyError("Failed to save procurement request") from exc

        await db.refresh(request)
        logger.info(
            "Created procurement request %s (%s) with %d item(s) in tenant %s",
            request.id, number, len(payload.items), context.tenant_id,
        )
        return request


async def update_request(
    db: AsyncSession,
    context: TransitionContext,
    request_id: int,
    payload: ProcurementUpdate,
) -> ProcurementRequest:
    """
    Edit a draft or submitted request; a different `status` goes through the
    transition rules together with the edits.

    Raises:
        EntityNotFoundError: If the request is not in the tenant
        StatusLockedError: If the request is past submitted
        IllegalTransitionError: If the status change is not allowed
        InvalidApproverError: If approving without a valid approver
    """
    request = await get_or_raise(db, ProcurementRequest, request_id, context.tenant_id, for_update=True)
    if request.status not in EDITABLE_STATUSES:
        raise StatusLockedError(
            f"Cannot update procurement request in {request.status} status "
            "(only draft or submitted requests can be edited)"
        )

    changes = payload.model_dump(exclude_unset=True)
    requested = changes.pop("status", None)
    approver_id = changes.pop("approved_by_id", None)

    for name, value in changes.items():
        setattr(request, name, value)

    if requested is not None and requested != request.status:
        context.approver_id = approver_id
        validated = await transitions.validate(db, request, requested, context)
        return await apply(validated, db)

    await commit_or_raise(db, f"procurement request {request.id}")
    await db.refresh(request)
    return request


async def delete_request(db: AsyncSession, tenant_id: int, request_id: int) -> None:
    """
    Delete a draft request and its items.

    Raises:
        EntityNotFoundError: If the request is not in the tenant
        StatusLockedError: If the request is no longer a draft
        HasDependentsError: If purchase orders were raised from it
    """
    request = await get_request(db, tenant_id, request_id)
    await soft_delete(db, request)
