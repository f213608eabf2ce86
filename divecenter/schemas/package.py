from datetime import datetime, date
from decimal import Decimal
from pydantic import BaseModel, Field
from divecenter.models.package import PackageStatus


class PackageCreate(BaseModel):
    customer_id: int
    total_dives: int = Field(..., ge=1)
    total_price: Decimal = Field(..., ge=0)
    per_dive_price: Decimal | None = Field(None, ge=0)  # defaults to total / dives
    start_date: date
    end_date: date | None = None
    duration_days: int | None = Field(None, ge=1)
    notes: str | None = None


class PackageUpdate(BaseModel):
    end_date: date | None = None
    status: PackageStatus | None = None
    notes: str | None = None


class PackageResponse(BaseModel):
    id: int
    customer_id: int
    total_dives: int
    dives_used: int
    remaining_dives: int
    total_price: Decimal
    per_dive_price: Decimal
    start_date: date
    end_date: date | None
    duration_days: int | None
    status: PackageStatus
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class PackageStatusResponse(BaseModel):
    package_id: int
    status: PackageStatus
    total_dives: int
    dives_used: int
    remaining_dives: int
    can_consume: bool
