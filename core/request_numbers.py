# core/request_numbers.py
"""
Human-readable procurement request numbers: PR-YYYYMMDD-NNN, sequential per
tenant per day.

The number is derived from rows already issued, so two concurrent creators
can compute the same one; the (tenant_id, request_number) unique constraint
rejects the loser, which asks for a fresh number and retries.
"""
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models.procurement import ProcurementRequest

PREFIX = "PR"
SEQUENCE_WIDTH = 3


def day_prefix(on_date: date) -> str:
    return f"{PREFIX}-{on_date:%Y%m%d}-"


def format_request_number(on_date: date, sequence: int) -> str:
    """
    >>> format_request_number(date(2024, 1, 1), 3)
    'PR-20240101-003'
    >>> format_request_number(date(2024, 1, 1), 1000)
    'PR-20240101-1000'
    """
    return f"{day_prefix(on_date)}{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(request_number: str, prefix: str) -> int:
    """Sequence part of a number issued under `prefix`; 0 if it has none."""
    if not request_number.startswith(prefix):
        return 0
    tail = request_number[len(prefix):]
    return int(tail) if tail.isdigit() else 0


async def next_request_number(db: AsyncSession, tenant_id: int, on_date: date) -> str:
    """
    Next free request number for the tenant on `on_date`.

    Soft-deleted requests keep their numbers, so they are counted too. Past
    999 the sequence keeps growing instead of wrapping.
    """
    prefix = day_prefix(on_date)
    stmt = select(ProcurementRequest.request_number).where(
        ProcurementRequest.tenant_id == tenant_id,
        ProcurementRequest.request_number.like(f"{prefix}%"),
    )
    result = await db.execute(stmt)
    highest = max((parse_sequence(n, prefix) for n in result.scalars()), default=0)
    return format_request_number(on_date, highest + 1)
