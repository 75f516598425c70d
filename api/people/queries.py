# api/people/queries.py
"""
SQLAlchemy query builders for people.
"""
from sqlalchemy import or_

from core.lookups import select_live
from db_models.person import Person


def select_people(tenant_id: int, role: str | None = None, search: str | None = None):
    """Select live people of a tenant, optionally filtered, by name."""
    stmt = select_live(Person, tenant_id)
    if role:
        stmt = stmt.where(Person.role == role)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Person.name.ilike(pattern), Person.email.ilike(pattern)))
    return stmt.order_by(Person.name)


def select_person_by_email(tenant_id: int, email: str):
    return select_live(Person, tenant_id).where(Person.email == email)
