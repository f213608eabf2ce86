from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from divecenter.database import get_db
from divecenter.schemas.dive import DiveCreate, DiveResponse
from divecenter.routers.auth import current_dive_center
import divecenter.services.dive_service as svc

router = APIRouter(prefix="/api/bookings", tags=["dives"])


@router.get("/{booking_id}/dives", response_model=list[DiveResponse])
def list_dives(booking_id: int, db: Session = Depends(get_db), dive_center_id: int = Depends(current_dive_center)):
    return svc.get_dives(db, dive_center_id, booking_id)


@router.post("/{booking_id}/dives", response_model=DiveResponse, status_code=201)
def log_dive(
    booking_id: int,
    data: DiveCreate,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.log_dive(db, dive_center_id, booking_id, data)
