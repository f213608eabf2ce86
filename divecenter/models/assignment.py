import enum
from datetime import datetime, timezone, date
from decimal import Decimal
from sqlalchemy import String, Boolean, Date, DateTime, Numeric, ForeignKey, Enum as SAEnum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from divecenter.database import Base


class EquipmentSource(str, enum.Enum):
    center = "Center"
    customer_own = "Customer Own"


class AssignmentStatus(str, enum.Enum):
    pending = "Pending"
    checked_out = "Checked Out"
    returned = "Returned"
    lost = "Lost"


# Statuses that hold an equipment item and therefore block overlapping windows
ACTIVE_STATUSES = (AssignmentStatus.pending, AssignmentStatus.checked_out)
TERMINAL_STATUSES = (AssignmentStatus.returned, AssignmentStatus.lost)


class Assignment(Base):
    """One piece of equipment committed to one customer for a date window.

    Linked to a booking, a basket, or both. Center equipment references an
    ``EquipmentItem``; customer-own equipment is described free-form and never
    takes part in availability checking.
    """

    __tablename__ = "assignments"
    __table_args__ = (
        Index("ix_assignments_item_status", "equipment_item_id", "assignment_status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    booking_id: Mapped[int | None] = mapped_column(ForeignKey("bookings.id"), nullable=True, index=True)
    basket_id: Mapped[int | None] = mapped_column(ForeignKey("equipment_baskets.id"), nullable=True, index=True)
    equipment_source: Mapped[str] = mapped_column(
        SAEnum(EquipmentSource, values_callable=lambda e: [x.value for x in e]),
        default=EquipmentSource.center,
        nullable=False,
    )
    equipment_item_id: Mapped[int | None] = mapped_column(ForeignKey("equipment_items.id"), nullable=True)

    customer_equipment_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_equipment_brand: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_equipment_model: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_equipment_serial: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_equipment_notes: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    checkout_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    actual_return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    assignment_status: Mapped[str] = mapped_column(
        SAEnum(AssignmentStatus, values_callable=lambda e: [x.value for x in e]),
        default=AssignmentStatus.pending,
        nullable=False,
    )

    damage_reported: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    damage_description: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    damage_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    charge_customer: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    damage_charge_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    # Set once when the invoicing side bills the damage
    damage_charged_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    damage_invoice_ref: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    booking: Mapped["Booking | None"] = relationship(back_populates="assignments")
    basket: Mapped["EquipmentBasket | None"] = relationship(back_populates="assignments")
    equipment_item: Mapped["EquipmentItem | None"] = relationship(back_populates="assignments")

    @property
    def is_center(self) -> bool:
        return self.equipment_source == EquipmentSource.center

    @property
    def customer_name(self) -> str:
        if self.basket is not None and self.basket.customer is not None:
            return self.basket.customer.full_name
        if self.booking is not None and self.booking.customer is not None:
            return self.booking.customer.full_name
        return "Unknown"
