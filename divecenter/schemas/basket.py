from datetime import datetime, date
from pydantic import BaseModel, Field
from divecenter.models.basket import BasketStatus
from divecenter.schemas.assignment import AssignmentResponse, DamageInfo


class BasketCreate(BaseModel):
    customer_id: int
    booking_id: int | None = None
    center_bucket_no: str | None = Field(None, max_length=255)
    expected_return_date: date | None = None
    notes: str | None = None


class BasketUpdate(BaseModel):
    center_bucket_no: str | None = Field(None, max_length=255)
    expected_return_date: date | None = None
    notes: str | None = None


class BasketReturnRequest(BaseModel):
    assignment_ids: list[int] | None = None  # None → return every member
    damage_info: dict[int, DamageInfo] = {}


class BasketForceClose(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class BasketResponse(BaseModel):
    id: int
    basket_no: str
    customer_id: int
    booking_id: int | None
    center_bucket_no: str | None
    checkout_date: date | None
    expected_return_date: date | None
    actual_return_date: date | None
    status: BasketStatus
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class BasketDetailResponse(BasketResponse):
    assignments: list[AssignmentResponse]
