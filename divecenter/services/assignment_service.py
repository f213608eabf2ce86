import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import NamedTuple
from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from divecenter.config import settings
from divecenter.exceptions import NotFoundError, ValidationError, StateError, ConflictError
from divecenter.models.assignment import Assignment, AssignmentStatus, EquipmentSource, ACTIVE_STATUSES
from divecenter.models.basket import EquipmentBasket, BasketStatus
from divecenter.models.booking import Booking
from divecenter.schemas.assignment import AssignmentCreate, AssignmentUpdate, DamageInfo, DamageChargeRequest
from divecenter.schemas.pagination import Page, paginate
from divecenter.services.availability_service import (
    get_item, get_conflicts, describe_conflict, validate_window,
)
from divecenter.services.basket_status_service import lock_basket, refresh_basket_status
from divecenter.services.item_status_service import sync_item_status

logger = logging.getLogger(__name__)


class ParentLink(NamedTuple):
    """Resolved booking/basket linkage of an assignment, at least one is set."""

    booking: Booking | None
    basket: EquipmentBasket | None


def resolve_parent(
    db: Session,
    dive_center_id: int,
    booking_id: int | None,
    basket_id: int | None,
    lock: bool = False,
) -> ParentLink:
    if booking_id is None and basket_id is None:
        raise ValidationError("Either booking_id or basket_id must be provided")

    basket = None
    if basket_id is not None:
        query = select(EquipmentBasket).where(
            EquipmentBasket.id == basket_id,
            EquipmentBasket.dive_center_id == dive_center_id,
        )
        if lock:
            query = query.with_for_update().execution_options(populate_existing=True)
        basket = db.scalar(query)
        if not basket:
            raise NotFoundError("Basket not found")
        if booking_id is None:
            booking_id = basket.booking_id
        elif basket.booking_id is not None and basket.booking_id != booking_id:
            raise ValidationError("booking_id does not match the basket's booking")

    booking = None
    if booking_id is not None:
        booking = db.scalar(
            select(Booking).where(Booking.id == booking_id, Booking.dive_center_id == dive_center_id)
        )
        if not booking:
            raise NotFoundError("Booking not found")

    return ParentLink(booking=booking, basket=basket)


def resolve_window(checkout_date: date | None, return_date: date | None) -> tuple[date, date]:
    checkout = checkout_date or date.today()
    return checkout, return_date or checkout + timedelta(days=settings.DEFAULT_RENTAL_DAYS)


def _reject_conflicts(item_id: int, checkout: date, ret: date, conflicts: list[Assignment]) -> None:
    logger.warning(
        "Equipment item %s not available %s..%s, %d conflicting assignment(s)",
        item_id, checkout, ret, len(conflicts),
    )
    raise ConflictError(
        "Equipment is not available for the requested dates",
        [describe_conflict(c) for c in conflicts],
        equipment_item_id=item_id,
        checkout_date=checkout.isoformat(),
        return_date=ret.isoformat(),
    )


def build_assignment(db: Session, dive_center_id: int, data: AssignmentCreate) -> Assignment:
    """Validate and insert one assignment without committing.

    The basket row is locked before the item row. A member created as
    Returned leaves the basket re-check to the caller.
    """
    if data.assignment_status == AssignmentStatus.lost:
        raise ValidationError("An assignment cannot be created as Lost")

    link = resolve_parent(db, dive_center_id, data.booking_id, data.basket_id, lock=True)
    if link.basket is not None and link.basket.status == BasketStatus.returned:
        raise StateError(f"Basket {link.basket.basket_no} is already returned")

    values = data.model_dump(exclude={"booking_id", "basket_id", "price"})
    assignment = Assignment(
        **values,
        booking_id=link.booking.id if link.booking else None,
        basket_id=link.basket.id if link.basket else None,
        price=data.price if data.price is not None else Decimal("0"),
    )

    if data.equipment_source == EquipmentSource.center:
        if data.equipment_item_id is None:
            raise ValidationError("equipment_item_id is required for center equipment")
        checkout, ret = resolve_window(data.checkout_date, data.return_date)
        validate_window(checkout, ret)

        # Row lock serialises concurrent reservations of the same item
        get_item(db, dive_center_id, data.equipment_item_id, lock=True)
        conflicts = get_conflicts(db, data.equipment_item_id, checkout, ret)
        if conflicts:
            _reject_conflicts(data.equipment_item_id, checkout, ret, conflicts)
        assignment.checkout_date = checkout
        assignment.return_date = ret
    else:
        assignment.equipment_item_id = None
        if data.checkout_date and data.return_date:
            validate_window(data.checkout_date, data.return_date)

    if assignment.assignment_status == AssignmentStatus.returned:
        assignment.actual_return_date = date.today()

    db.add(assignment)
    db.flush()
    if assignment.assignment_status == AssignmentStatus.checked_out:
        sync_item_status(db, assignment)
    return assignment


def create_assignment(db: Session, dive_center_id: int, data: AssignmentCreate) -> Assignment:
    assignment = build_assignment(db, dive_center_id, data)
    if assignment.basket is not None and assignment.assignment_status == AssignmentStatus.returned:
        refresh_basket_status(db, assignment.basket)
    db.commit()
    db.refresh(assignment)
    return assignment


def _scoped(query, dive_center_id: int):
    """Restrict an Assignment query to the tenant via booking or basket."""
    return (
        query.outerjoin(Booking, Assignment.booking_id == Booking.id)
        .outerjoin(EquipmentBasket, Assignment.basket_id == EquipmentBasket.id)
        .where(or_(Booking.dive_center_id == dive_center_id, EquipmentBasket.dive_center_id == dive_center_id))
    )


def get_assignment(db: Session, dive_center_id: int, assignment_id: int, lock: bool = False) -> Assignment:
    query = _scoped(select(Assignment).where(Assignment.id == assignment_id), dive_center_id)
    if lock:
        query = query.with_for_update(of=Assignment).execution_options(populate_existing=True)
    assignment = db.scalar(query)
    if not assignment:
        logger.warning("Assignment %s not found in dive center %s", assignment_id, dive_center_id)
        raise NotFoundError("Assignment not found")
    return assignment


def get_assignments_by_ids(db: Session, dive_center_id: int, assignment_ids: list[int]) -> list[Assignment]:
    query = _scoped(select(Assignment).where(Assignment.id.in_(assignment_ids)), dive_center_id)
    return list(db.scalars(query.order_by(Assignment.id)).all())


def get_assignments(
    db: Session,
    dive_center_id: int,
    page: int = 1,
    size: int = 50,
    status: AssignmentStatus | None = None,
    booking_id: int | None = None,
    basket_id: int | None = None,
    equipment_item_id: int | None = None,
) -> Page:
    query = _scoped(select(Assignment), dive_center_id)
    if status is not None:
        query = query.where(Assignment.assignment_status == status)
    if booking_id is not None:
        query = query.where(Assignment.booking_id == booking_id)
    if basket_id is not None:
        query = query.where(Assignment.basket_id == basket_id)
    if equipment_item_id is not None:
        query = query.where(Assignment.equipment_item_id == equipment_item_id)
    query = query.order_by(Assignment.id.desc())

    return paginate(db, query, page, size)


def checkout_assignment(db: Session, dive_center_id: int, assignment_id: int) -> Assignment:
    """Physical handover of a pending reservation."""
    assignment = get_assignment(db, dive_center_id, assignment_id, lock=True)
    if assignment.assignment_status != AssignmentStatus.pending:
        raise StateError(f"Cannot check out an assignment in status {assignment.assignment_status.value}")
    assignment.assignment_status = AssignmentStatus.checked_out
    db.flush()
    sync_item_status(db, assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


def update_assignment(db: Session, dive_center_id: int, assignment_id: int, data: AssignmentUpdate) -> Assignment:
    """Change the window, item or customer-equipment details of an open assignment.

    The new window is re-checked against every other active record of the
    target item while that item is locked. Swapping the item is only
    possible before checkout.
    """
    assignment = get_assignment(db, dive_center_id, assignment_id, lock=True)
    if assignment.assignment_status not in ACTIVE_STATUSES:
        raise StateError(f"Cannot edit an assignment in status {assignment.assignment_status.value}")
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)

    if assignment.is_center:
        item_id = update_data.get("equipment_item_id", assignment.equipment_item_id)
        if item_id != assignment.equipment_item_id and assignment.assignment_status == AssignmentStatus.checked_out:
            raise StateError("Checked out equipment must be returned before swapping the item")
        checkout = update_data.get("checkout_date", assignment.checkout_date)
        ret = update_data.get("return_date", assignment.return_date)
        validate_window(checkout, ret)

        get_item(db, dive_center_id, item_id, lock=True)
        conflicts = get_conflicts(db, item_id, checkout, ret, exclude_id=assignment.id)
        if conflicts:
            _reject_conflicts(item_id, checkout, ret, conflicts)
    else:
        update_data.pop("equipment_item_id", None)
        checkout = update_data.get("checkout_date", assignment.checkout_date)
        ret = update_data.get("return_date", assignment.return_date)
        if checkout and ret:
            validate_window(checkout, ret)

    for field, value in update_data.items():
        setattr(assignment, field, value)
    db.commit()
    db.refresh(assignment)
    logger.info("Assignment %s updated: %s", assignment.id, sorted(update_data))
    return assignment


def cancel_assignment(db: Session, dive_center_id: int, assignment_id: int) -> None:
    """Delete a reservation made in error. Only Pending records qualify."""
    assignment = get_assignment(db, dive_center_id, assignment_id)
    basket = lock_basket(db, assignment.basket_id) if assignment.basket_id else None
    assignment = get_assignment(db, dive_center_id, assignment_id, lock=True)
    if assignment.assignment_status != AssignmentStatus.pending:
        raise StateError(f"Cannot cancel an assignment in status {assignment.assignment_status.value}")

    item_id = assignment.equipment_item_id
    db.delete(assignment)
    db.flush()
    if basket is not None:
        remaining = db.scalar(
            select(func.count()).select_from(Assignment).where(Assignment.basket_id == basket.id)
        )
        # An emptied basket stays open for new members
        if remaining:
            refresh_basket_status(db, basket)
    db.commit()
    logger.info("Assignment %s cancelled (equipment item %s)", assignment_id, item_id)


def apply_return(db: Session, assignment: Assignment, damage: DamageInfo | None = None, today: date | None = None) -> Assignment:
    """Mark one assignment returned and resync its item. Does not commit."""
    if assignment.assignment_status == AssignmentStatus.returned:
        raise StateError("Assignment is already returned")
    if assignment.assignment_status == AssignmentStatus.lost:
        raise StateError("Lost equipment cannot be returned")

    assignment.assignment_status = AssignmentStatus.returned
    assignment.actual_return_date = today or date.today()
    if damage is not None:
        for field, value in damage.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(assignment, field, value)
    db.flush()
    sync_item_status(db, assignment)
    return assignment


def return_assignment(db: Session, dive_center_id: int, assignment_id: int, damage: DamageInfo | None = None) -> Assignment:
    assignment = get_assignment(db, dive_center_id, assignment_id)
    # Lock order: basket, then assignment, then item
    basket = lock_basket(db, assignment.basket_id) if assignment.basket_id else None
    assignment = get_assignment(db, dive_center_id, assignment_id, lock=True)

    apply_return(db, assignment, damage)
    if basket is not None:
        refresh_basket_status(db, basket)

    db.commit()
    db.refresh(assignment)
    return assignment


def mark_lost(db: Session, dive_center_id: int, assignment_id: int) -> Assignment:
    assignment = get_assignment(db, dive_center_id, assignment_id, lock=True)
    if assignment.assignment_status != AssignmentStatus.checked_out:
        raise StateError("Only checked out equipment can be reported lost")
    assignment.assignment_status = AssignmentStatus.lost
    db.commit()
    db.refresh(assignment)
    logger.warning(
        "Assignment %s reported lost (equipment item %s, basket %s)",
        assignment.id, assignment.equipment_item_id, assignment.basket_id,
    )
    return assignment


def attach_damage_charge(db: Session, dive_center_id: int, assignment_id: int, data: DamageChargeRequest) -> Assignment:
    """Mark the damage of a returned assignment as billed. Allowed once."""
    assignment = get_assignment(db, dive_center_id, assignment_id, lock=True)
    if assignment.damage_charged_at is not None:
        raise StateError("Damage charge already added to an invoice")
    if not (assignment.damage_reported and assignment.charge_customer):
        raise StateError("Damage must be reported and charge_customer must be true")

    amount = data.charge_amount if data.charge_amount is not None else assignment.damage_charge_amount
    if amount is None:
        raise ValidationError("charge_amount is required when no damage_charge_amount was recorded")

    assignment.damage_charge_amount = amount
    assignment.damage_invoice_ref = data.invoice_ref
    assignment.damage_charged_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(assignment)
    logger.info("Damage charge %s attached to assignment %s", amount, assignment.id)
    return assignment
