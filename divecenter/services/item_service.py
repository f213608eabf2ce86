from sqlalchemy.orm import Session
from sqlalchemy import select
from divecenter.models.item import EquipmentItem, ItemStatus
from divecenter.models.assignment import Assignment
from divecenter.schemas.pagination import Page, paginate
from divecenter.services.availability_service import get_item


def get_items(
    db: Session,
    dive_center_id: int,
    page: int = 1,
    size: int = 50,
    search: str = "",
    equipment_type: str = "",
    status: ItemStatus | None = None,
) -> Page:
    query = select(EquipmentItem).where(EquipmentItem.dive_center_id == dive_center_id)
    if search:
        query = query.where(
            EquipmentItem.inventory_code.ilike(f"%{search}%")
            | EquipmentItem.serial_no.ilike(f"%{search}%")
            | EquipmentItem.brand.ilike(f"%{search}%")
        )
    if equipment_type:
        query = query.where(EquipmentItem.equipment_type == equipment_type)
    if status is not None:
        query = query.where(EquipmentItem.status == status)
    query = query.order_by(EquipmentItem.id)
    return paginate(db, query, page, size)


def get_item_history(db: Session, dive_center_id: int, item_id: int) -> list[Assignment]:
    get_item(db, dive_center_id, item_id)
    return db.scalars(
        select(Assignment)
        .where(Assignment.equipment_item_id == item_id)
        .order_by(Assignment.checkout_date, Assignment.id)
    ).all()
