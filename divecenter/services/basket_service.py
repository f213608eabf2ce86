import logging
from datetime import date
from sqlalchemy import select
from sqlalchemy.orm import Session

from divecenter.config import settings
from divecenter.exceptions import NotFoundError, ValidationError, StateError
from divecenter.models.assignment import Assignment, AssignmentStatus
from divecenter.models.basket import EquipmentBasket, BasketStatus
from divecenter.models.booking import Booking
from divecenter.models.customer import Customer
from divecenter.models.dive_center import DiveCenter
from divecenter.schemas.basket import BasketCreate, BasketUpdate, BasketReturnRequest, BasketForceClose
from divecenter.schemas.pagination import Page, paginate
from divecenter.services.assignment_service import apply_return
from divecenter.services.basket_status_service import lock_basket, refresh_basket_status

logger = logging.getLogger(__name__)


def generate_basket_number(db: Session, dive_center_id: int, today: date | None = None) -> str:
    """Next ``BASK-<year>-<NNN>`` for the tenant.

    The dive center row is locked so two concurrent creates cannot read
    the same last number.
    """
    today = today or date.today()
    db.scalar(select(DiveCenter).where(DiveCenter.id == dive_center_id).with_for_update())

    prefix = f"{settings.BASKET_NUMBER_PREFIX}-{today.year}-"
    numbers = db.scalars(
        select(EquipmentBasket.basket_no).where(
            EquipmentBasket.dive_center_id == dive_center_id,
            EquipmentBasket.basket_no.like(f"{prefix}%"),
        )
    ).all()
    last = max((int(n[len(prefix):]) for n in numbers if n[len(prefix):].isdigit()), default=0)
    return f"{prefix}{last + 1:03d}"


def create_basket(db: Session, dive_center_id: int, data: BasketCreate) -> EquipmentBasket:
    customer = db.scalar(
        select(Customer).where(Customer.id == data.customer_id, Customer.dive_center_id == dive_center_id)
    )
    if not customer:
        raise NotFoundError("Customer not found")

    if data.booking_id is not None:
        booking = db.scalar(
            select(Booking).where(Booking.id == data.booking_id, Booking.dive_center_id == dive_center_id)
        )
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.customer_id != customer.id:
            raise ValidationError("Booking belongs to a different customer")

    checkout = date.today()
    if data.expected_return_date is not None and data.expected_return_date < checkout:
        raise ValidationError("expected_return_date must be on or after the checkout date")

    basket = EquipmentBasket(
        dive_center_id=dive_center_id,
        customer_id=customer.id,
        booking_id=data.booking_id,
        basket_no=generate_basket_number(db, dive_center_id, checkout),
        center_bucket_no=data.center_bucket_no,
        checkout_date=checkout,
        expected_return_date=data.expected_return_date,
        status=BasketStatus.active,
        notes=data.notes,
    )
    db.add(basket)
    db.commit()
    db.refresh(basket)
    logger.info("Basket %s created for customer %s", basket.basket_no, customer.id)
    return basket


def get_basket(db: Session, dive_center_id: int, basket_id: int, lock: bool = False) -> EquipmentBasket:
    query = select(EquipmentBasket).where(
        EquipmentBasket.id == basket_id,
        EquipmentBasket.dive_center_id == dive_center_id,
    )
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)
    basket = db.scalar(query)
    if not basket:
        raise NotFoundError("Basket not found")
    return basket


def get_baskets(
    db: Session,
    dive_center_id: int,
    page: int = 1,
    size: int = 50,
    status: BasketStatus | None = None,
    customer_id: int | None = None,
    search: str | None = None,
) -> Page:
    query = select(EquipmentBasket).where(EquipmentBasket.dive_center_id == dive_center_id)
    if status is not None:
        query = query.where(EquipmentBasket.status == status)
    if customer_id is not None:
        query = query.where(EquipmentBasket.customer_id == customer_id)
    if search:
        like = f"%{search}%"
        query = query.where(
            EquipmentBasket.basket_no.ilike(like) | EquipmentBasket.center_bucket_no.ilike(like)
        )
    query = query.order_by(EquipmentBasket.created_at.desc(), EquipmentBasket.id.desc())

    return paginate(db, query, page, size)


def update_basket(db: Session, dive_center_id: int, basket_id: int, data: BasketUpdate) -> EquipmentBasket:
    basket = get_basket(db, dive_center_id, basket_id, lock=True)
    update_data = data.model_dump(exclude_unset=True)
    expected = update_data.get("expected_return_date")
    if expected is not None and basket.checkout_date is not None and expected < basket.checkout_date:
        raise ValidationError("expected_return_date must be on or after the checkout date")

    for field, value in update_data.items():
        setattr(basket, field, value)
    db.commit()
    db.refresh(basket)
    return basket


def return_basket(db: Session, dive_center_id: int, basket_id: int, data: BasketReturnRequest) -> EquipmentBasket:
    """Return the listed members (or every open one) and re-check the basket.

    Members already Returned are skipped. An id outside the basket or a
    Lost member fails the whole call.
    """
    get_basket(db, dive_center_id, basket_id)
    basket = lock_basket(db, basket_id)
    if basket.status == BasketStatus.returned:
        raise StateError(f"Basket {basket.basket_no} is already returned")

    query = (
        select(Assignment)
        .where(Assignment.basket_id == basket.id)
        .order_by(Assignment.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if data.assignment_ids is not None:
        query = query.where(Assignment.id.in_(data.assignment_ids))
    members = db.scalars(query).all()

    if data.assignment_ids is not None:
        missing = set(data.assignment_ids) - {a.id for a in members}
        if missing:
            raise ValidationError(f"Assignments {sorted(missing)} do not belong to basket {basket.basket_no}")

    returned = 0
    for assignment in members:
        if assignment.assignment_status == AssignmentStatus.returned:
            continue
        if assignment.assignment_status == AssignmentStatus.lost and data.assignment_ids is None:
            continue
        apply_return(db, assignment, data.damage_info.get(assignment.id))
        returned += 1

    refresh_basket_status(db, basket)
    db.commit()
    db.refresh(basket)
    logger.info("Basket %s: %d assignment(s) returned, status %s", basket.basket_no, returned, basket.status.value)
    return basket


def force_close_basket(
    db: Session,
    dive_center_id: int,
    basket_id: int,
    data: BasketForceClose,
    user_id: int | None = None,
) -> EquipmentBasket:
    """Administrative close of a basket that cannot finish on its own, e.g. lost gear."""
    get_basket(db, dive_center_id, basket_id)
    basket = lock_basket(db, basket_id)
    if basket.status == BasketStatus.returned:
        raise StateError(f"Basket {basket.basket_no} is already returned")

    open_members = [
        a.id for a in basket.assignments
        if a.assignment_status != AssignmentStatus.returned
    ]
    basket.status = BasketStatus.returned
    basket.actual_return_date = date.today()
    note = f"Force closed: {data.reason}"
    basket.notes = f"{basket.notes}\n{note}" if basket.notes else note
    db.commit()
    db.refresh(basket)
    logger.warning(
        "AUDIT: basket %s force closed by user %s, open assignments %s, reason: %s",
        basket.basket_no, user_id, open_members, data.reason,
    )
    return basket
