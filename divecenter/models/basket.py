import enum
from datetime import datetime, timezone, date
from sqlalchemy import String, Date, DateTime, ForeignKey, Enum as SAEnum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from divecenter.database import Base


class BasketStatus(str, enum.Enum):
    active = "Active"
    returned = "Returned"


class EquipmentBasket(Base):
    """Groups a customer's assignments for one checkout/return cycle."""

    __tablename__ = "equipment_baskets"

    __table_args__ = (
        UniqueConstraint("dive_center_id", "basket_no", name="uq_basket_no_per_center"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    dive_center_id: Mapped[int] = mapped_column(ForeignKey("dive_centers.id"), nullable=False, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    booking_id: Mapped[int | None] = mapped_column(ForeignKey("bookings.id"), nullable=True)
    basket_no: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    center_bucket_no: Mapped[str | None] = mapped_column(String(255), nullable=True)
    checkout_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    expected_return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    actual_return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        SAEnum(BasketStatus, values_callable=lambda e: [x.value for x in e]),
        default=BasketStatus.active,
        nullable=False,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(String(2000), nullable=True)
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

    customer: Mapped["Customer"] = relationship()
    booking: Mapped["Booking | None"] = relationship()
    assignments: Mapped[list["Assignment"]] = relationship(
        back_populates="basket", order_by="Assignment.id"
    )
