import enum
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from divecenter.database import Base


class ItemStatus(str, enum.Enum):
    available = "Available"
    rented = "Rented"
    maintenance = "Maintenance"


class EquipmentItem(Base):
    """A single serialized unit (BCD size M, regulator #12, ...).

    ``status`` is derived from the item's assignments and never written by clients.
    """

    __tablename__ = "equipment_items"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    dive_center_id: Mapped[int] = mapped_column(ForeignKey("dive_centers.id"), nullable=False, index=True)
    equipment_type: Mapped[str] = mapped_column(String(128), nullable=False)
    inventory_code: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    serial_no: Mapped[str | None] = mapped_column(String(128), nullable=True)
    size: Mapped[str | None] = mapped_column(String(32), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(128), nullable=True)
    status: Mapped[str] = mapped_column(
        SAEnum(ItemStatus, values_callable=lambda e: [x.value for x in e]),
        default=ItemStatus.available,
        nullable=False,
    )
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

    assignments: Mapped[list["Assignment"]] = relationship(
        back_populates="equipment_item", order_by="Assignment.id"
    )
