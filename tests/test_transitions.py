from datetime import datetime, timezone

import pytest
from sqlalchemy import select

from core import transitions
from core.errors import (
    AssetUnavailableError,
    EntityNotFoundError,
    IllegalTransitionError,
    InvalidApproverError,
    InvalidReferenceError,
    UnknownStatusError,
)
from core.lookups import get_or_raise
from core.statuses import STATUS_ENUMS, TRANSITIONS
from core.transitions import ENTITY_TYPES, TransitionContext
from db_models.asset import Asset
from db_models.assignment import AssetAssignment
from db_models.maintenance import MaintenanceRecord
from db_models.procurement import ProcurementRequest

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

_MODELS = {entity_type: model for model, entity_type in ENTITY_TYPES.items()}

ILLEGAL = [
    (entity_type, from_status.value, to_status.value)
    for entity_type, enum in STATUS_ENUMS.items()
    for from_status in enum
    for to_status in enum
    if to_status.value not in TRANSITIONS[entity_type][from_status.value]
]


def ctx(seed, **kwargs) -> TransitionContext:
    return TransitionContext(tenant_id=seed.tenant.id, clock=lambda: FIXED_NOW, **kwargs)


@pytest.mark.anyio
@pytest.mark.parametrize("entity_type,from_status,to_status", ILLEGAL)
async def test_transitions_outside_the_table_are_illegal(db_session, entity_type, from_status, to_status):
    entity = _MODELS[entity_type](tenant_id=1, status=from_status)

    with pytest.raises(IllegalTransitionError) as exc_info:
        await transitions.validate(db_session, entity, to_status, TransitionContext(tenant_id=1))

    assert exc_info.value.from_status == from_status
    assert exc_info.value.to_status == to_status


@pytest.mark.anyio
async def test_unknown_requested_status(db_session):
    entity = ProcurementRequest(tenant_id=1, status="draft")
    with pytest.raises(UnknownStatusError):
        await transitions.validate(db_session, entity, "shipped", TransitionContext(tenant_id=1))


@pytest.mark.anyio
async def test_entity_of_another_tenant_is_not_found(db_session):
    entity = ProcurementRequest(id=7, tenant_id=2, status="draft")
    with pytest.raises(EntityNotFoundError):
        await transitions.validate(db_session, entity, "submitted", TransitionContext(tenant_id=1))


async def _draft_request(db_session, seed, status: str = "submitted") -> ProcurementRequest:
    request = ProcurementRequest(
        tenant_id=seed.tenant.id,
        request_number="PR-20240601-001",
        requested_by_id=seed.requester.id,
        status=status,
        request_date=FIXED_NOW,
    )
    db_session.add(request)
    await db_session.commit()
    return request


@pytest.mark.anyio
async def test_approve_requires_approver(db_session, seed):
    request = await _draft_request(db_session, seed)

    with pytest.raises(InvalidApproverError):
        await transitions.validate(db_session, request, "approved", ctx(seed))


@pytest.mark.anyio
async def test_approve_rejects_approver_of_another_tenant(db_session, seed, other_seed):
    request = await _draft_request(db_session, seed)

    with pytest.raises(InvalidApproverError):
        await transitions.validate(
            db_session, request, "approved", ctx(seed, approver_id=other_seed.approver.id),
        )


@pytest.mark.anyio
async def test_approve_stamps_approver_and_date_without_mutating(db_session, seed):
    request = await _draft_request(db_session, seed)

    validated = await transitions.validate(
        db_session, request, "approved", ctx(seed, approver_id=seed.approver.id),
    )

    assert validated.changes == {
        "status": "approved",
        "approved_by_id": seed.approver.id,
        "approval_date": FIXED_NOW,
    }
    assert validated.dependents == []
    # validate only describes the change
    assert request.status == "submitted"
    assert request.approved_by_id is None


@pytest.mark.anyio
async def test_new_assignment_flips_asset(db_session, seed):
    validated = await transitions.validate_new_assignment(
        db_session, ctx(seed),
        asset_id=seed.asset.id,
        assigned_to_id=seed.assignee.id,
        assigned_by_id=seed.assigner.id,
    )

    assert validated.is_creation
    assert validated.entity.status == "active"
    assert validated.entity.assignment_date == FIXED_NOW
    [dependent] = validated.dependents
    assert dependent.entity.id == seed.asset.id
    assert dependent.changes == {"status": "assigned", "current_assignee_id": seed.assignee.id}


@pytest.mark.anyio
async def test_new_assignment_assigner_defaults_to_actor(db_session, seed):
    validated = await transitions.validate_new_assignment(
        db_session, ctx(seed, actor_id=seed.assigner.id),
        asset_id=seed.asset.id,
        assigned_to_id=seed.assignee.id,
    )
    assert validated.entity.assigned_by_id == seed.assigner.id


@pytest.mark.anyio
async def test_new_assignment_requires_assigner(db_session, seed):
    with pytest.raises(InvalidReferenceError, match="Assigned by ID is required"):
        await transitions.validate_new_assignment(
            db_session, ctx(seed), asset_id=seed.asset.id, assigned_to_id=seed.assignee.id,
        )


@pytest.mark.anyio
async def test_new_assignment_rejects_unknown_people(db_session, seed, other_seed):
    with pytest.raises(InvalidReferenceError, match="Invalid assignee ID"):
        await transitions.validate_new_assignment(
            db_session, ctx(seed),
            asset_id=seed.asset.id,
            assigned_to_id=other_seed.assignee.id,
            assigned_by_id=seed.assigner.id,
        )


@pytest.mark.anyio
async def test_new_assignment_refused_for_retired_asset(db_session, seed):
    asset = await get_or_raise(db_session, Asset, seed.asset.id, seed.tenant.id)
    asset.status = "retired"
    await db_session.commit()

    with pytest.raises(AssetUnavailableError, match="not available"):
        await transitions.validate_new_assignment(
            db_session, ctx(seed),
            asset_id=seed.asset.id,
            assigned_to_id=seed.assignee.id,
            assigned_by_id=seed.assigner.id,
        )


@pytest.mark.anyio
async def test_new_assignment_refused_while_actively_assigned(db_session, seed):
    asset = await get_or_raise(db_session, Asset, seed.asset.id, seed.tenant.id)
    asset.status = "assigned"
    asset.current_assignee_id = seed.assignee.id
    db_session.add(AssetAssignment(
        tenant_id=seed.tenant.id,
        asset_id=asset.id,
        assigned_to_id=seed.assignee.id,
        assigned_by_id=seed.assigner.id,
        assignment_date=FIXED_NOW,
        status="active",
    ))
    await db_session.commit()

    with pytest.raises(AssetUnavailableError, match="someone else"):
        await transitions.validate_new_assignment(
            db_session, ctx(seed),
            asset_id=seed.asset.id,
            assigned_to_id=seed.other.id,
            assigned_by_id=seed.assigner.id,
        )
    with pytest.raises(AssetUnavailableError, match="this person"):
        await transitions.validate_new_assignment(
            db_session, ctx(seed),
            asset_id=seed.asset.id,
            assigned_to_id=seed.assignee.id,
            assigned_by_id=seed.assigner.id,
        )


@pytest.mark.anyio
async def test_return_always_frees_the_asset(db_session, seed):
    asset = await get_or_raise(db_session, Asset, seed.asset.id, seed.tenant.id)
    asset.status = "assigned"
    asset.current_assignee_id = seed.assignee.id
    assignment = AssetAssignment(
        tenant_id=seed.tenant.id,
        asset_id=asset.id,
        assigned_to_id=seed.assignee.id,
        assigned_by_id=seed.assigner.id,
        assignment_date=FIXED_NOW,
        status="active",
    )
    db_session.add(assignment)
    await db_session.commit()

    # Returned by someone other than the assigner
    validated = await transitions.validate(
        db_session, assignment, "returned", ctx(seed, actor_id=seed.other.id),
    )

    assert validated.changes == {"status": "returned", "return_date": FIXED_NOW}
    [dependent] = validated.dependents
    assert dependent.changes == {"status": "in_stock", "current_assignee_id": None}


async def _record(db_session, seed, status: str) -> MaintenanceRecord:
    record = MaintenanceRecord(
        tenant_id=seed.tenant.id,
        asset_id=seed.asset.id,
        maintenance_type="corrective",
        status=status,
        scheduled_date=FIXED_NOW,
        description="Replace battery",
    )
    db_session.add(record)
    await db_session.commit()
    return record


@pytest.mark.anyio
async def test_starting_maintenance_moves_asset_into_maintenance(db_session, seed):
    record = await _record(db_session, seed, "scheduled")

    validated = await transitions.validate(db_session, record, "in_progress", ctx(seed))

    [dependent] = validated.dependents
    assert dependent.changes == {"status": "maintenance"}


@pytest.mark.anyio
async def test_starting_maintenance_refused_for_assigned_asset(db_session, seed):
    record = await _record(db_session, seed, "scheduled")
    asset = await get_or_raise(db_session, Asset, seed.asset.id, seed.tenant.id)
    asset.status = "assigned"
    asset.current_assignee_id = seed.assignee.id
    await db_session.commit()

    with pytest.raises(AssetUnavailableError):
        await transitions.validate(db_session, record, "in_progress", ctx(seed))


@pytest.mark.anyio
async def test_completing_last_running_record_releases_asset(db_session, seed):
    record = await _record(db_session, seed, "in_progress")
    asset = await get_or_raise(db_session, Asset, seed.asset.id, seed.tenant.id)
    asset.status = "maintenance"
    await db_session.commit()

    validated = await transitions.validate(db_session, record, "completed", ctx(seed))

    assert validated.changes["completed_date"] == FIXED_NOW
    [dependent] = validated.dependents
    assert dependent.changes == {"status": "in_stock"}


@pytest.mark.anyio
async def test_completing_keeps_asset_while_other_work_runs(db_session, seed):
    record = await _record(db_session, seed, "in_progress")
    await _record(db_session, seed, "in_progress")
    asset = await get_or_raise(db_session, Asset, seed.asset.id, seed.tenant.id)
    asset.status = "maintenance"
    await db_session.commit()

    validated = await transitions.validate(db_session, record, "completed", ctx(seed))

    assert validated.dependents == []


@pytest.mark.anyio
async def test_cancelling_scheduled_record_leaves_asset_alone(db_session, seed):
    record = await _record(db_session, seed, "scheduled")

    validated = await transitions.validate(db_session, record, "cancelled", ctx(seed))

    assert validated.dependents == []


@pytest.mark.anyio
async def test_new_maintenance_initial_status(db_session, seed):
    with pytest.raises(IllegalTransitionError):
        await transitions.validate_new_maintenance(
            db_session, ctx(seed),
            asset_id=seed.asset.id,
            maintenance_type="inspection",
            description="Annual check",
            status="completed",
        )

    validated = await transitions.validate_new_maintenance(
        db_session, ctx(seed),
        asset_id=seed.asset.id,
        maintenance_type="inspection",
        description="Annual check",
        status="in_progress",
        vendor_id=seed.vendor.id,
    )
    assert validated.entity.status == "in_progress"
    [dependent] = validated.dependents
    assert dependent.changes == {"status": "maintenance"}


@pytest.mark.anyio
async def test_new_maintenance_rejects_unknown_type(db_session, seed):
    with pytest.raises(UnknownStatusError):
        await transitions.validate_new_maintenance(
            db_session, ctx(seed),
            asset_id=seed.asset.id,
            maintenance_type="cleaning",
            description="Dust off",
        )


@pytest.mark.anyio
async def test_validate_does_not_write(db_session, seed):
    record = await _record(db_session, seed, "scheduled")
    await transitions.validate(db_session, record, "in_progress", ctx(seed))
    await db_session.rollback()

    result = await db_session.execute(select(Asset.status).where(Asset.id == seed.asset.id))
    assert result.scalar_one() == "in_stock"
