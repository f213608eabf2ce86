from datetime import datetime, timezone, date
from decimal import Decimal
from sqlalchemy import Integer, String, Date, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from divecenter.database import Base


class BookingDive(Base):
    __tablename__ = "booking_dives"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    booking_id: Mapped[int] = mapped_column(ForeignKey("bookings.id"), nullable=False, index=True)
    dive_package_id: Mapped[int | None] = mapped_column(ForeignKey("dive_packages.id"), nullable=True, index=True)
    package_dive_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dive_site: Mapped[str] = mapped_column(String(255), nullable=False)
    dive_date: Mapped[date] = mapped_column(Date, nullable=False)
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    status: Mapped[str] = mapped_column(String(32), default="Scheduled", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    booking: Mapped["Booking"] = relationship(back_populates="dives")
    dive_package: Mapped["DivePackage | None"] = relationship(back_populates="dives")
