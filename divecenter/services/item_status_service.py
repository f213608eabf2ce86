import logging
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from divecenter.models.assignment import Assignment, AssignmentStatus
from divecenter.models.item import EquipmentItem, ItemStatus

logger = logging.getLogger(__name__)


def derive_item_status(assignment_status: AssignmentStatus, damage_reported: bool) -> ItemStatus | None:
    """New item status implied by an assignment transition, None = leave as is.

    Lost is deliberately left alone.
    """
    if assignment_status == AssignmentStatus.checked_out:
        return ItemStatus.rented
    if assignment_status == AssignmentStatus.returned:
        return ItemStatus.maintenance if damage_reported else ItemStatus.available
    return None


def sync_item_status(db: Session, assignment: Assignment) -> EquipmentItem | None:
    """Rewrite the item's status after ``assignment`` changed state.

    Customer-own equipment has no item and is ignored.
    """
    if not assignment.is_center or assignment.equipment_item_id is None:
        return None

    new_status = derive_item_status(assignment.assignment_status, assignment.damage_reported)
    if new_status is None:
        return None

    item = db.scalar(
        select(EquipmentItem).where(EquipmentItem.id == assignment.equipment_item_id).with_for_update()
    )
    if item is None:
        return None

    if new_status == ItemStatus.available:
        # Another commitment still has the item out
        still_out = db.scalar(
            select(func.count()).select_from(Assignment).where(
                Assignment.equipment_item_id == item.id,
                Assignment.id != assignment.id,
                Assignment.assignment_status == AssignmentStatus.checked_out,
            )
        )
        if still_out:
            new_status = ItemStatus.rented

    if item.status != new_status:
        logger.info(
            "Equipment item %s status %s -> %s (assignment %s)",
            item.id, item.status.value, new_status.value, assignment.id,
        )
        item.status = new_status
    return item
