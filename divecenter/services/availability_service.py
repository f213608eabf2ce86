"""Availability of center-owned equipment items.

Single create, bulk create and both pre-check endpoints go through
``get_conflicts`` so a pre-check and a real create can never disagree.
"""
import logging
from datetime import date
from sqlalchemy import select
from sqlalchemy.orm import Session

from divecenter.exceptions import NotFoundError, ValidationError
from divecenter.models.assignment import Assignment, EquipmentSource, ACTIVE_STATUSES
from divecenter.models.item import EquipmentItem
from divecenter.schemas.assignment import AvailabilityRequest

logger = logging.getLogger(__name__)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive overlap: a return on day N and a checkout on day N conflict."""
    return a_start <= b_end and b_start <= a_end


def get_item(db: Session, dive_center_id: int, item_id: int, lock: bool = False) -> EquipmentItem:
    query = select(EquipmentItem).where(
        EquipmentItem.id == item_id,
        EquipmentItem.dive_center_id == dive_center_id,
    )
    if lock:
        query = query.with_for_update()
    item = db.scalar(query)
    if not item:
        logger.warning("Equipment item %s not found in dive center %s", item_id, dive_center_id)
        raise NotFoundError("Equipment item not found")
    return item


def get_conflicts(
    db: Session,
    item_id: int,
    checkout_date: date,
    return_date: date,
    exclude_id: int | None = None,
) -> list[Assignment]:
    # Booking- and basket-linked records alike: both paths hang off the item
    query = select(Assignment).where(
        Assignment.equipment_item_id == item_id,
        Assignment.equipment_source == EquipmentSource.center,
        Assignment.assignment_status.in_(ACTIVE_STATUSES),
        Assignment.checkout_date.is_not(None),
        Assignment.return_date.is_not(None),
    )
    if exclude_id is not None:
        query = query.where(Assignment.id != exclude_id)
    candidates = db.scalars(query.order_by(Assignment.checkout_date)).all()
    return [
        a for a in candidates
        if ranges_overlap(a.checkout_date, a.return_date, checkout_date, return_date)
    ]


def is_available(db: Session, item_id: int, checkout_date: date, return_date: date) -> bool:
    return not get_conflicts(db, item_id, checkout_date, return_date)


def describe_conflict(assignment: Assignment) -> dict:
    """JSON-safe summary used in conflict errors and pre-check responses."""
    return {
        "id": assignment.id,
        "customer_name": assignment.customer_name,
        "checkout_date": assignment.checkout_date.isoformat() if assignment.checkout_date else None,
        "return_date": assignment.return_date.isoformat() if assignment.return_date else None,
        "basket_no": assignment.basket.basket_no if assignment.basket else None,
        "assignment_status": assignment.assignment_status.value,
        "booking_id": assignment.booking_id,
        "basket_id": assignment.basket_id,
    }


def validate_window(checkout_date: date, return_date: date) -> None:
    if checkout_date > return_date:
        raise ValidationError("return_date must be on or after checkout_date")


def check_availability(db: Session, dive_center_id: int, data: AvailabilityRequest) -> dict:
    validate_window(data.checkout_date, data.return_date)
    get_item(db, dive_center_id, data.equipment_item_id)
    conflicts = get_conflicts(db, data.equipment_item_id, data.checkout_date, data.return_date)
    return {
        "equipment_item_id": data.equipment_item_id,
        "checkout_date": data.checkout_date,
        "return_date": data.return_date,
        "available": not conflicts,
        "conflicting_assignments": [describe_conflict(c) for c in conflicts],
    }
