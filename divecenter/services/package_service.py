import logging
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import select
from sqlalchemy.orm import Session

from divecenter.exceptions import NotFoundError, ValidationError, StateError
from divecenter.models.customer import Customer
from divecenter.models.package import DivePackage, PackageStatus
from divecenter.schemas.package import PackageCreate, PackageUpdate
from divecenter.schemas.pagination import Page, paginate

logger = logging.getLogger(__name__)

# Statuses an operator may set by hand; Completed only comes from consumption
_MANUAL_STATUSES = {PackageStatus.active, PackageStatus.expired, PackageStatus.cancelled}


def can_consume(package: DivePackage, today: date | None = None) -> bool:
    today = today or date.today()
    if package.status != PackageStatus.active:
        return False
    if package.dives_used >= package.total_dives:
        return False
    if package.end_date is not None and today > package.end_date:
        return False
    return True


def consume(db: Session, package: DivePackage, today: date | None = None) -> DivePackage:
    """Use one dive of an already locked package. Does not commit."""
    if not can_consume(package, today):
        raise StateError("Package has no remaining dives or is expired")

    package.dives_used += 1
    if package.dives_used >= package.total_dives:
        package.status = PackageStatus.completed
        logger.info("Dive package %s completed (%d/%d)", package.id, package.dives_used, package.total_dives)
    db.flush()
    return package


def get_package(db: Session, dive_center_id: int, package_id: int, lock: bool = False) -> DivePackage:
    query = select(DivePackage).where(
        DivePackage.id == package_id,
        DivePackage.dive_center_id == dive_center_id,
    )
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)
    package = db.scalar(query)
    if not package:
        raise NotFoundError("Dive package not found")
    return package


def can_consume_package(db: Session, dive_center_id: int, package_id: int) -> bool:
    return can_consume(get_package(db, dive_center_id, package_id))


def consume_package(db: Session, dive_center_id: int, package_id: int) -> DivePackage:
    """Lock the package and use one dive, in the caller's transaction."""
    package = get_package(db, dive_center_id, package_id, lock=True)
    return consume(db, package)


def package_status(db: Session, dive_center_id: int, package_id: int) -> dict:
    package = get_package(db, dive_center_id, package_id)
    return {
        "package_id": package.id,
        "status": package.status,
        "total_dives": package.total_dives,
        "dives_used": package.dives_used,
        "remaining_dives": package.remaining_dives,
        "can_consume": can_consume(package),
    }


def create_package(db: Session, dive_center_id: int, data: PackageCreate) -> DivePackage:
    customer = db.scalar(
        select(Customer).where(Customer.id == data.customer_id, Customer.dive_center_id == dive_center_id)
    )
    if not customer:
        raise NotFoundError("Customer not found")

    end_date = data.end_date
    if end_date is None and data.duration_days is not None:
        end_date = data.start_date + timedelta(days=data.duration_days)
    if end_date is not None and end_date <= data.start_date:
        raise ValidationError("end_date must be after start_date")

    per_dive_price = data.per_dive_price
    if per_dive_price is None:
        per_dive_price = (data.total_price / data.total_dives).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    package = DivePackage(
        dive_center_id=dive_center_id,
        customer_id=customer.id,
        total_dives=data.total_dives,
        dives_used=0,
        total_price=data.total_price,
        per_dive_price=per_dive_price,
        start_date=data.start_date,
        end_date=end_date,
        duration_days=data.duration_days,
        status=PackageStatus.active,
        notes=data.notes,
    )
    db.add(package)
    db.commit()
    db.refresh(package)
    logger.info("Dive package %s created for customer %s (%d dives)", package.id, customer.id, package.total_dives)
    return package


def get_packages(
    db: Session,
    dive_center_id: int,
    page: int = 1,
    size: int = 50,
    status: PackageStatus | None = None,
    customer_id: int | None = None,
) -> Page:
    query = select(DivePackage).where(DivePackage.dive_center_id == dive_center_id)
    if status is not None:
        query = query.where(DivePackage.status == status)
    if customer_id is not None:
        query = query.where(DivePackage.customer_id == customer_id)
    query = query.order_by(DivePackage.id.desc())

    return paginate(db, query, page, size)


def update_package(db: Session, dive_center_id: int, package_id: int, data: PackageUpdate) -> DivePackage:
    package = get_package(db, dive_center_id, package_id, lock=True)
    update_data = data.model_dump(exclude_unset=True)

    status = update_data.get("status")
    if status is not None:
        if status not in _MANUAL_STATUSES:
            raise ValidationError("status can only be set to Active, Expired or Cancelled")
        if package.status == PackageStatus.completed:
            raise StateError("A completed package cannot change status")
        if status == PackageStatus.active and package.dives_used >= package.total_dives:
            raise StateError("Package has no remaining dives")

    end_date = update_data.get("end_date")
    if end_date is not None and end_date <= package.start_date:
        raise ValidationError("end_date must be after start_date")

    for field, value in update_data.items():
        setattr(package, field, value)
    db.commit()
    db.refresh(package)
    return package
