# db_models/assignment.py
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base, TenantScopedMixin
from core.statuses import AssignmentStatus

_ACTIVE_ROW = "status = 'active' AND deleted_at IS NULL"


class AssetAssignment(TenantScopedMixin, Base):
    __tablename__ = "asset_assignments"
    # At most one live active assignment per asset, enforced by storage so
    # two racing requests cannot both commit.
    __table_args__ = (
        Index(
            "uq_asset_assignments_active_asset",
            "tenant_id",
            "asset_id",
            unique=True,
            postgresql_where=text(_ACTIVE_ROW),
            sqlite_where=text(_ACTIVE_ROW),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    asset_id: Mapped[int] = mapped_column(
        ForeignKey("assets.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    assigned_to_id: Mapped[int] = mapped_column(
        ForeignKey("people.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    assigned_by_id: Mapped[int] = mapped_column(
        ForeignKey("people.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    assignment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    return_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expected_return: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # active / returned
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AssignmentStatus.ACTIVE.value,
        server_default=AssignmentStatus.ACTIVE.value,
    )
