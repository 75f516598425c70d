# db_models/person.py
from sqlalchemy import Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base, TenantScopedMixin

_LIVE_ROW = "deleted_at IS NULL"


class Person(TenantScopedMixin, Base):
    """A member of a tenant: requester, approver, assignee, technician."""

    __tablename__ = "people"
    # Email is unique among the tenant's live people; a soft-deleted person
    # frees the address
    __table_args__ = (
        Index(
            "uq_people_tenant_email",
            "tenant_id",
            "email",
            unique=True,
            postgresql_where=text(_LIVE_ROW),
            sqlite_where=text(_LIVE_ROW),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
