import logging
from sqlalchemy import select
from sqlalchemy.orm import Session

from divecenter.exceptions import NotFoundError
from divecenter.models.booking import Booking
from divecenter.models.dive import BookingDive
from divecenter.schemas.dive import DiveCreate
from divecenter.services.package_service import consume_package

logger = logging.getLogger(__name__)


def get_booking(db: Session, dive_center_id: int, booking_id: int) -> Booking:
    booking = db.scalar(
        select(Booking).where(Booking.id == booking_id, Booking.dive_center_id == dive_center_id)
    )
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def log_dive(db: Session, dive_center_id: int, booking_id: int, data: DiveCreate) -> BookingDive:
    """Record a dive on a booking, drawing it from the booking's package if any."""
    booking = get_booking(db, dive_center_id, booking_id)

    dive = BookingDive(
        booking_id=booking.id,
        dive_site=data.dive_site,
        dive_date=data.dive_date,
        price=data.price,
    )
    if booking.dive_package_id is not None:
        # Raises before anything is added when the package is exhausted
        package = consume_package(db, dive_center_id, booking.dive_package_id)
        dive.dive_package_id = package.id
        dive.package_dive_number = package.dives_used
        if dive.price is None:
            dive.price = package.per_dive_price

    db.add(dive)
    db.commit()
    db.refresh(dive)
    logger.info("Dive %s logged on booking %s (package %s)", dive.id, booking.id, dive.dive_package_id)
    return dive


def get_dives(db: Session, dive_center_id: int, booking_id: int) -> list[BookingDive]:
    booking = get_booking(db, dive_center_id, booking_id)
    return list(db.scalars(
        select(BookingDive).where(BookingDive.booking_id == booking.id).order_by(BookingDive.id)
    ).all())
