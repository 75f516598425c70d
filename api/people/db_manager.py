# api/people/db_manager.py
"""
Business logic for the people of a tenant.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.consistency import commit_or_raise, soft_delete
from core.lookups import get_or_raise
from db_models.person import Person
from .models import PersonCreate, PersonUpdate
from . import queries

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when the email is already used by a person of the tenant."""
    pass


async def list_people(
    db: AsyncSession,
    tenant_id: int,
    role: str | None = None,
    search: str | None = None,
) -> list[Person]:
    result = await db.execute(queries.select_people(tenant_id, role=role, search=search))
    return list(result.scalars().all())


async def get_person(db: AsyncSession, tenant_id: int, person_id: int) -> Person:
    """Raises EntityNotFoundError if the person is not in the tenant."""
    return await get_or_raise(db, Person, person_id, tenant_id)


async def _ensure_email_free(
    db: AsyncSession,
    tenant_id: int,
    email: str,
    person_id: int | None = None,
) -> None:
    result = await db.execute(queries.select_person_by_email(tenant_id, email))
    existing = result.scalar_one_or_none()
    if existing is not None and existing.id != person_id:
        raise DuplicateEmailError(f"Person with email '{email}' already exists")


async def create_person(db: AsyncSession, tenant_id: int, payload: PersonCreate) -> Person:
    await _ensure_email_free(db, tenant_id, payload.email)

    person = Person(tenant_id=tenant_id, **payload.model_dump())
    db.add(person)
    await commit_or_raise(db, "new person")
    await db.refresh(person)
    logger.info("Created person %s in tenant %s", person.id, tenant_id)
    return person


async def update_person(
    db: AsyncSession,
    tenant_id: int,
    person_id: int,
    payload: PersonUpdate,
) -> Person:
    person = await get_person(db, tenant_id, person_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("email"):
        await _ensure_email_free(db, tenant_id, changes["email"], person.id)

    for name, value in changes.items():
        setattr(person, name, value)
    await commit_or_raise(db, f"person {person.id}")
    await db.refresh(person)
    return person


async def delete_person(db: AsyncSession, tenant_id: int, person_id: int) -> None:
    """
    Raises:
        EntityNotFoundError: If the person is not in the tenant
        HasDependentsError: If the person still holds assets
    """
    person = await get_person(db, tenant_id, person_id)
    await soft_delete(db, person)
