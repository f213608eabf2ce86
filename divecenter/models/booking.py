from datetime import datetime, timezone, date
from sqlalchemy import String, Date, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from divecenter.database import Base


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    dive_center_id: Mapped[int] = mapped_column(ForeignKey("dive_centers.id"), nullable=False, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    dive_package_id: Mapped[int | None] = mapped_column(ForeignKey("dive_packages.id"), nullable=True, index=True)
    booking_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default="Pending", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    customer: Mapped["Customer"] = relationship(back_populates="bookings")
    dive_package: Mapped["DivePackage | None"] = relationship(back_populates="bookings")
    assignments: Mapped[list["Assignment"]] = relationship(back_populates="booking")
    dives: Mapped[list["BookingDive"]] = relationship(back_populates="booking", order_by="BookingDive.id")
