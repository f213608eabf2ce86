"""Batch create, return and availability check.

Every element runs inside its own savepoint: a failing element is rolled
back and reported in ``failed`` while the rest of the batch commits
together. Only when nothing succeeds is the whole call rejected.
"""
import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, DataError
from sqlalchemy.orm import Session

from divecenter.exceptions import DiveCenterError, ConflictError, ValidationError
from divecenter.models.assignment import AssignmentStatus, EquipmentSource
from divecenter.models.basket import EquipmentBasket
from divecenter.models.item import EquipmentItem
from divecenter.schemas.assignment import BulkAssignmentCreate, BulkReturnRequest, BulkAvailabilityRequest
from divecenter.services.assignment_service import (
    build_assignment, get_assignment, get_assignments_by_ids, apply_return,
)
from divecenter.services.availability_service import check_availability
from divecenter.services.basket_status_service import lock_basket, refresh_basket_status

logger = logging.getLogger(__name__)


def _failure(index: int, error: Exception, **extra) -> dict:
    entry = {"index": index, **extra}
    if isinstance(error, DiveCenterError):
        entry["error"] = error.message
        if isinstance(error, ConflictError):
            entry["conflicting_assignments"] = error.conflicts
    else:
        entry["error"] = "Database constraint violated"
    return entry


def _reject_empty(db: Session, message: str, failed: list[dict]) -> None:
    db.rollback()
    logger.warning("%s: all %d element(s) failed", message, len(failed))
    raise ValidationError({"message": message, "failed": failed})


def bulk_create_assignments(db: Session, dive_center_id: int, data: BulkAssignmentCreate) -> dict:
    # Lock order: baskets, then items, each in id order
    basket_ids = sorted({i.basket_id for i in data.items if i.basket_id is not None})
    baskets = {}
    if basket_ids:
        baskets = {b.id: b for b in db.scalars(
            select(EquipmentBasket)
            .where(EquipmentBasket.id.in_(basket_ids), EquipmentBasket.dive_center_id == dive_center_id)
            .order_by(EquipmentBasket.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).all()}

    item_ids = sorted({
        i.equipment_item_id for i in data.items
        if i.equipment_source == EquipmentSource.center and i.equipment_item_id is not None
    })
    if item_ids:
        db.scalars(
            select(EquipmentItem)
            .where(EquipmentItem.id.in_(item_ids), EquipmentItem.dive_center_id == dive_center_id)
            .order_by(EquipmentItem.id)
            .with_for_update()
        ).all()

    success = []
    failed = []
    for index, item in enumerate(data.items):
        try:
            with db.begin_nested():
                assignment = build_assignment(db, dive_center_id, item)
        except (DiveCenterError, IntegrityError, DataError) as e:
            if not isinstance(e, DiveCenterError):
                logger.warning("Bulk create element %d hit a database constraint: %s", index, e)
            failed.append(_failure(index, e, item=item.model_dump(mode="json")))
            continue
        success.append(assignment)

    if not success:
        _reject_empty(db, "No assignments were created", failed)

    # Members created as Returned may complete their basket
    for basket_id in sorted({
        a.basket_id for a in success
        if a.basket_id in baskets and a.assignment_status == AssignmentStatus.returned
    }):
        refresh_basket_status(db, baskets[basket_id])

    db.commit()
    for assignment in success:
        db.refresh(assignment)
    logger.info("Bulk create: %d created, %d failed", len(success), len(failed))
    return {
        "message": f"{len(success)} assignment(s) created, {len(failed)} failed",
        "success_count": len(success),
        "failed_count": len(failed),
        "success": success,
        "failed": failed,
    }


def bulk_return_assignments(db: Session, dive_center_id: int, data: BulkReturnRequest) -> dict:
    assignment_ids = list(dict.fromkeys(data.assignment_ids))

    # Lock order: baskets, then assignments, then items
    known = get_assignments_by_ids(db, dive_center_id, assignment_ids)
    baskets = {}
    for basket_id in sorted({a.basket_id for a in known if a.basket_id is not None}):
        baskets[basket_id] = lock_basket(db, basket_id)

    returned = []
    failed = []
    for index, assignment_id in enumerate(assignment_ids):
        try:
            with db.begin_nested():
                assignment = get_assignment(db, dive_center_id, assignment_id, lock=True)
                apply_return(db, assignment, data.damage_info.get(assignment_id))
        except (DiveCenterError, IntegrityError, DataError) as e:
            failed.append(_failure(index, e, assignment_id=assignment_id))
            continue
        returned.append(assignment)

    if not returned:
        _reject_empty(db, "No assignments were returned", failed)

    # Each touched basket is re-checked once, after all of its members
    for basket_id in sorted({a.basket_id for a in returned if a.basket_id is not None}):
        refresh_basket_status(db, baskets[basket_id])

    db.commit()
    for assignment in returned:
        db.refresh(assignment)
    logger.info("Bulk return: %d returned, %d failed", len(returned), len(failed))
    return {
        "message": f"{len(returned)} assignment(s) returned, {len(failed)} failed",
        "returned": returned,
        "failed": failed,
    }


def bulk_check_availability(db: Session, dive_center_id: int, data: BulkAvailabilityRequest) -> dict:
    """Read-only pre-check of several windows; a bad element gets an error entry."""
    results = []
    for index, request in enumerate(data.items):
        try:
            result = check_availability(db, dive_center_id, request)
        except DiveCenterError as e:
            result = {
                "equipment_item_id": request.equipment_item_id,
                "checkout_date": request.checkout_date,
                "return_date": request.return_date,
                "available": False,
                "error": e.message,
            }
        results.append({"index": index, **result})
    return {"results": results}
