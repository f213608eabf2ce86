from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from divecenter.database import get_db
from divecenter.models.package import PackageStatus
from divecenter.schemas.package import PackageCreate, PackageUpdate, PackageResponse, PackageStatusResponse
from divecenter.schemas.pagination import Page
from divecenter.routers.auth import current_dive_center
import divecenter.services.package_service as svc

router = APIRouter(prefix="/api/packages", tags=["packages"])


@router.get("", response_model=Page[PackageResponse])
def list_packages(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    status: PackageStatus | None = Query(None),
    customer_id: int | None = Query(None),
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.get_packages(db, dive_center_id, page=page, size=size, status=status, customer_id=customer_id)


@router.post("", response_model=PackageResponse, status_code=201)
def create_package(data: PackageCreate, db: Session = Depends(get_db), dive_center_id: int = Depends(current_dive_center)):
    return svc.create_package(db, dive_center_id, data)


@router.get("/{package_id}", response_model=PackageResponse)
def get_package(package_id: int, db: Session = Depends(get_db), dive_center_id: int = Depends(current_dive_center)):
    return svc.get_package(db, dive_center_id, package_id)


@router.put("/{package_id}", response_model=PackageResponse)
def update_package(
    package_id: int,
    data: PackageUpdate,
    db: Session = Depends(get_db),
    dive_center_id: int = Depends(current_dive_center),
):
    return svc.update_package(db, dive_center_id, package_id, data)


@router.get("/{package_id}/status", response_model=PackageStatusResponse)
def package_status(package_id: int, db: Session = Depends(get_db), dive_center_id: int = Depends(current_dive_center)):
    return svc.package_status(db, dive_center_id, package_id)
