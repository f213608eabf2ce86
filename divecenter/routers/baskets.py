from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from divecenter.database import get_db
from divecenter.models.basket import BasketStatus
from divecenter.schemas.basket import (
    BasketCreate, BasketUpdate, BasketReturnRequest, BasketForceClose, BasketResponse, BasketDetailResponse,
)
from divecenter.schemas.pagination import Page
from divecenter.routers.auth import current_dive_center, require_session_admin
import divecenter.services.basket_service as svc

router = APIRouter(prefix="/api/baskets", tags=["baskets"])


@router.get("", response_model=Page[BasketResponse])
def list_baskets(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    status: BasketStatus | None = Query(None),
    customer_id: int | None = Query(None),
    search: str = Query(""),
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.get_baskets(
        db, dive_center_id, page=page, size=size, status=status, customer_id=customer_id, search=search,
    )


@router.post("", response_model=BasketResponse, status_code=201)
def create_basket(
    data: BasketCreate,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.create_basket(db, dive_center_id, data)


@router.get("/{basket_id}", response_model=BasketDetailResponse)
def get_basket(
    basket_id: int,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.get_basket(db, dive_center_id, basket_id)


@router.put("/{basket_id}", response_model=BasketResponse)
def update_basket(
    basket_id: int,
    data: BasketUpdate,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.update_basket(db, dive_center_id, basket_id, data)


@router.put("/{basket_id}/return", response_model=BasketDetailResponse)
def return_basket(
    basket_id: int,
    data: BasketReturnRequest | None = None,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.return_basket(db, dive_center_id, basket_id, data or BasketReturnRequest())


@router.post("/{basket_id}/force-close", response_model=BasketDetailResponse)
def force_close_basket(
    basket_id: int,
    data: BasketForceClose,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
    user_id: int = Depends(require_session_admin),
):
    return svc.force_close_basket(db, dive_center_id, basket_id, data, user_id=user_id)
