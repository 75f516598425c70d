from datetime import date, datetime, timezone

import pytest

from core.request_numbers import format_request_number, next_request_number, parse_sequence
from db_models.procurement import ProcurementRequest


def test_format_pads_to_three_digits():
    assert format_request_number(date(2024, 1, 1), 1) == "PR-20240101-001"
    assert format_request_number(date(2024, 12, 31), 42) == "PR-20241231-042"


def test_format_grows_past_999():
    assert format_request_number(date(2024, 1, 1), 999) == "PR-20240101-999"
    assert format_request_number(date(2024, 1, 1), 1000) == "PR-20240101-1000"


def test_parse_sequence():
    assert parse_sequence("PR-20240101-007", "PR-20240101-") == 7
    assert parse_sequence("PR-20240101-1000", "PR-20240101-") == 1000
    assert parse_sequence("PR-20240102-007", "PR-20240101-") == 0
    assert parse_sequence("PR-20240101-abc", "PR-20240101-") == 0


def _request(seed, number: str, deleted: bool = False) -> ProcurementRequest:
    now = datetime.now(timezone.utc)
    return ProcurementRequest(
        tenant_id=seed.tenant.id,
        request_number=number,
        requested_by_id=seed.requester.id,
        status="draft",
        request_date=now,
        deleted_at=now if deleted else None,
    )


@pytest.mark.anyio
async def test_first_number_of_the_day(db_session, seed):
    assert await next_request_number(db_session, seed.tenant.id, date(2024, 3, 5)) == "PR-20240305-001"


@pytest.mark.anyio
async def test_next_number_follows_highest_and_counts_deleted(db_session, seed):
    db_session.add_all([
        _request(seed, "PR-20240305-001"),
        _request(seed, "PR-20240305-004", deleted=True),
        _request(seed, "PR-20240304-009"),
    ])
    await db_session.commit()

    assert await next_request_number(db_session, seed.tenant.id, date(2024, 3, 5)) == "PR-20240305-005"
    assert await next_request_number(db_session, seed.tenant.id, date(2024, 3, 4)) == "PR-20240304-010"


@pytest.mark.anyio
async def test_numbers_are_per_tenant(db_session, seed, other_seed):
    db_session.add(_request(seed, "PR-20240305-001"))
    await db_session.commit()

    assert await next_request_number(db_session, other_seed.tenant.id, date(2024, 3, 5)) == "PR-20240305-001"


@pytest.mark.anyio
async def test_sequence_beyond_999(db_session, seed):
    db_session.add(_request(seed, "PR-20240305-999"))
    await db_session.commit()

    assert await next_request_number(db_session, seed.tenant.id, date(2024, 3, 5)) == "PR-20240305-1000"
