# db_models/maintenance.py
from datetime import datetime

from sqlalchemy import String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base, TenantScopedMixin
from core.statuses import MaintenanceStatus


class MaintenanceRecord(TenantScopedMixin, Base):
    __tablename__ = "maintenance_records"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    asset_id: Mapped[int] = mapped_column(
        ForeignKey("assets.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # preventive / corrective / calibration / inspection
    maintenance_type: Mapped[str] = mapped_column(String(20), nullable=False)

    # scheduled / in_progress / completed / cancelled
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MaintenanceStatus.SCHEDULED.value,
        server_default=MaintenanceStatus.SCHEDULED.value,
    )

    scheduled_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    performed_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("people.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    vendor_id: Mapped[int | None] = mapped_column(
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    results: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_scheduled: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
