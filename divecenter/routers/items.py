from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from divecenter.database import get_db
from divecenter.models.item import ItemStatus
from divecenter.schemas.item import EquipmentItemResponse
from divecenter.schemas.assignment import AssignmentResponse
from divecenter.schemas.pagination import Page
from divecenter.routers.auth import current_dive_center
from divecenter.services.availability_service import get_item as find_item
import divecenter.services.item_service as svc

router = APIRouter(prefix="/api/equipment-items", tags=["equipment-items"])


@router.get("", response_model=Page[EquipmentItemResponse])
def list_items(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    search: str = Query(""),
    equipment_type: str = Query(""),
    status: ItemStatus | None = Query(None),
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.get_items(
        db, dive_center_id, page=page, size=size, search=search, equipment_type=equipment_type, status=status,
    )


@router.get("/{item_id}", response_model=EquipmentItemResponse)
def get_item(item_id: int, db: Session = Depends(get_db), dive_center_id: int = Depends(current_dive_center)):
    return find_item(db, dive_center_id, item_id)


@router.get("/{item_id}/assignments", response_model=list[AssignmentResponse])
def item_history(item_id: int, db: Session = Depends(get_db), dive_center_id: int = Depends(current_dive_center)):
    return svc.get_item_history(db, dive_center_id, item_id)
