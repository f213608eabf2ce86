import enum
from datetime import datetime, timezone, date
from decimal import Decimal
from sqlalchemy import Integer, String, Date, DateTime, Numeric, ForeignKey, Enum as SAEnum, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from divecenter.database import Base


class PackageStatus(str, enum.Enum):
    active = "Active"
    completed = "Completed"
    expired = "Expired"
    cancelled = "Cancelled"


class DivePackage(Base):
    """Pre-purchased bundle of dives. ``dives_used`` only ever grows."""

    __tablename__ = "dive_packages"

    __table_args__ = (
        CheckConstraint("dives_used >= 0 AND dives_used <= total_dives", name="ck_package_dives_used"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    dive_center_id: Mapped[int] = mapped_column(ForeignKey("dive_centers.id"), nullable=False, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    total_dives: Mapped[int] = mapped_column(Integer, nullable=False)
    dives_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    per_dive_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    duration_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(
        SAEnum(PackageStatus, values_callable=lambda e: [x.value for x in e]),
        default=PackageStatus.active,
        nullable=False,
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
    bookings: Mapped[list["Booking"]] = relationship(back_populates="dive_package")
    dives: Mapped[list["BookingDive"]] = relationship(back_populates="dive_package")

    @property
    def remaining_dives(self) -> int:
        return self.total_dives - self.dives_used
