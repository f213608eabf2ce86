from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from divecenter.database import get_db
from divecenter.models.assignment import AssignmentStatus
from divecenter.schemas.assignment import (
    AssignmentCreate, AssignmentUpdate, AssignmentResponse, DamageInfo, DamageChargeRequest,
    AvailabilityRequest, AvailabilityResponse,
    BulkAssignmentCreate, BulkReturnRequest, BulkAvailabilityRequest,
    BulkCreateResponse, BulkReturnResponse, BulkAvailabilityResponse,
)
from divecenter.schemas.pagination import Page
from divecenter.routers.auth import current_dive_center
import divecenter.services.assignment_service as svc
import divecenter.services.availability_service as availability_svc
import divecenter.services.bulk_service as bulk_svc

router = APIRouter(prefix="/api/assignments", tags=["assignments"])


@router.get("", response_model=Page[AssignmentResponse])
def list_assignments(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    status: AssignmentStatus | None = Query(None),
    booking_id: int | None = Query(None),
    basket_id: int | None = Query(None),
    equipment_item_id: int | None = Query(None),
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.get_assignments(
        db, dive_center_id, page=page, size=size, status=status,
        booking_id=booking_id, basket_id=basket_id, equipment_item_id=equipment_item_id,
    )


@router.post("", response_model=AssignmentResponse, status_code=201)
def create_assignment(
    data: AssignmentCreate,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.create_assignment(db, dive_center_id, data)


@router.post("/check-availability", response_model=AvailabilityResponse)
def check_availability(
    data: AvailabilityRequest,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return availability_svc.check_availability(db, dive_center_id, data)


# Bulk routes are declared before /{assignment_id}
@router.post("/bulk", response_model=BulkCreateResponse, status_code=201)
def bulk_create(
    data: BulkAssignmentCreate,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return bulk_svc.bulk_create_assignments(db, dive_center_id, data)


@router.post("/bulk-return", response_model=BulkReturnResponse, status_code=201)
def bulk_return(
    data: BulkReturnRequest,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return bulk_svc.bulk_return_assignments(db, dive_center_id, data)


@router.post("/bulk-check-availability", response_model=BulkAvailabilityResponse)
def bulk_check_availability(
    data: BulkAvailabilityRequest,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return bulk_svc.bulk_check_availability(db, dive_center_id, data)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.get_assignment(db, dive_center_id, assignment_id)


@router.put("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: int,
    data: AssignmentUpdate,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.update_assignment(db, dive_center_id, assignment_id, data)


@router.delete("/{assignment_id}", status_code=204)
def cancel_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    svc.cancel_assignment(db, dive_center_id, assignment_id)
    return Response(status_code=204)


@router.put("/{assignment_id}/checkout", response_model=AssignmentResponse)
def checkout_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.checkout_assignment(db, dive_center_id, assignment_id)


@router.put("/{assignment_id}/return", response_model=AssignmentResponse)
def return_assignment(
    assignment_id: int,
    damage: DamageInfo | None = None,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.return_assignment(db, dive_center_id, assignment_id, damage)


@router.put("/{assignment_id}/lost", response_model=AssignmentResponse)
def mark_lost(
    assignment_id: int,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.mark_lost(db, dive_center_id, assignment_id)


@router.post("/{assignment_id}/damage-charge", response_model=AssignmentResponse)
def attach_damage_charge(
    assignment_id: int,
    data: DamageChargeRequest,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.attach_damage_charge(db, dive_center_id, assignment_id, data)
