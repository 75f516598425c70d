# db_models/procurement.py
from datetime import datetime

from sqlalchemy import (
    String,
    Text,
    Float,
    Integer,
    DateTime,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base, TenantScopedMixin
from core.statuses import ProcurementStatus, PurchaseOrderStatus


class ProcurementRequest(TenantScopedMixin, Base):
    __tablename__ = "procurement_requests"
    # Request numbers are generated from existing rows; the constraint is
    # what makes concurrent creation safe (the creator retries on conflict).
    __table_args__ = (
        UniqueConstraint("tenant_id", "request_number", name="uq_procurement_requests_number"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # PR-YYYYMMDD-NNN
    request_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    requested_by_id: Mapped[int] = mapped_column(
        ForeignKey("people.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    approved_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("people.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # draft / submitted / approved / rejected / ordered / received / cancelled
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ProcurementStatus.DRAFT.value,
        server_default=ProcurementStatus.DRAFT.value,
    )

    request_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    approval_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expected_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    total_budget: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class ProcurementItem(TenantScopedMixin, Base):
    __tablename__ = "procurement_items"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    procurement_id: Mapped[int] = mapped_column(
        ForeignKey("procurement_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("asset_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_price: Mapped[float | None] = mapped_column(Float, nullable=True)

    preferred_vendor_id: Mapped[int | None] = mapped_column(
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    justification: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        server_default="pending",
    )


class PurchaseOrder(TenantScopedMixin, Base):
    """
    Order placed with a vendor. Only the columns the deletion guards need are
    modelled here; the ordering/receiving workflow is not part of this service.
    """

    __tablename__ = "purchase_orders"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    order_number: Mapped[str] = mapped_column(String(50), nullable=False)

    procurement_id: Mapped[int | None] = mapped_column(
        ForeignKey("procurement_requests.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    vendor_id: Mapped[int] = mapped_column(
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PurchaseOrderStatus.DRAFT.value,
        server_default=PurchaseOrderStatus.DRAFT.value,
    )
    order_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total_amount: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_by_id: Mapped[int] = mapped_column(
        ForeignKey("people.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
