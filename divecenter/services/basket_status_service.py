"""Basket completion re-check shared by every return path.

Single return, bulk return and basket return all finish with
``refresh_basket_status`` so they agree on when a basket is done.
"""
import logging
from datetime import date
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from divecenter.models.assignment import Assignment, AssignmentStatus
from divecenter.models.basket import EquipmentBasket, BasketStatus

logger = logging.getLogger(__name__)


def lock_basket(db: Session, basket_id: int) -> EquipmentBasket | None:
    return db.scalar(
        select(EquipmentBasket)
        .where(EquipmentBasket.id == basket_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def refresh_basket_status(db: Session, basket: EquipmentBasket, today: date | None = None) -> bool:
    """Flip the basket to Returned once no member is outside Returned.

    A Lost member keeps the basket Active; only an administrative close
    can finish such a basket.
    """
    db.flush()
    open_members = db.scalar(
        select(func.count()).select_from(Assignment).where(
            Assignment.basket_id == basket.id,
            Assignment.assignment_status != AssignmentStatus.returned,
        )
    )
    if open_members or basket.status == BasketStatus.returned:
        return False

    basket.status = BasketStatus.returned
    basket.actual_return_date = today or date.today()
    logger.info("Basket %s (%s) returned, all equipment is back", basket.id, basket.basket_no)
    return True
