from datetime import datetime, date
from decimal import Decimal
from pydantic import BaseModel, Field


class DiveCreate(BaseModel):
    dive_site: str = Field(..., min_length=1, max_length=255)
    dive_date: date
    price: Decimal | None = Field(None, ge=0)  # package dives default to the per-dive price


class DiveResponse(BaseModel):
    id: int
    booking_id: int
    dive_package_id: int | None
    package_dive_number: int | None
    dive_site: str
    dive_date: date
    price: Decimal | None
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
