from datetime import datetime, date
from decimal import Decimal
from typing import Any
from pydantic import BaseModel, Field
from divecenter.models.assignment import AssignmentStatus, EquipmentSource
from divecenter.schemas.item import EquipmentItemSummary


class AssignmentCreate(BaseModel):
    booking_id: int | None = None
    basket_id: int | None = None
    equipment_source: EquipmentSource = EquipmentSource.center
    equipment_item_id: int | None = None
    price: Decimal | None = Field(None, ge=0)
    checkout_date: date | None = None  # defaults to today for Center equipment
    return_date: date | None = None    # defaults to checkout + DEFAULT_RENTAL_DAYS
    assignment_status: AssignmentStatus = AssignmentStatus.pending
    customer_equipment_type: str | None = Field(None, max_length=255)
    customer_equipment_brand: str | None = Field(None, max_length=255)
    customer_equipment_model: str | None = Field(None, max_length=255)
    customer_equipment_serial: str | None = Field(None, max_length=255)
    customer_equipment_notes: str | None = None

    # Damage is only recorded on return
    model_config = {"extra": "forbid"}


class AssignmentUpdate(BaseModel):
    equipment_item_id: int | None = None
    price: Decimal | None = Field(None, ge=0)
    checkout_date: date | None = None
    return_date: date | None = None
    customer_equipment_type: str | None = Field(None, max_length=255)
    customer_equipment_brand: str | None = Field(None, max_length=255)
    customer_equipment_model: str | None = Field(None, max_length=255)
    customer_equipment_serial: str | None = Field(None, max_length=255)
    customer_equipment_notes: str | None = None

    # Status moves through checkout/return/lost, never through an edit
    model_config = {"extra": "forbid"}


class DamageInfo(BaseModel):
    damage_reported: bool | None = None
    damage_description: str | None = None
    damage_cost: Decimal | None = Field(None, ge=0)
    charge_customer: bool | None = None
    damage_charge_amount: Decimal | None = Field(None, ge=0)


class DamageChargeRequest(BaseModel):
    charge_amount: Decimal | None = Field(None, ge=0)
    invoice_ref: str | None = Field(None, max_length=255)


class AvailabilityRequest(BaseModel):
    equipment_item_id: int
    checkout_date: date
    return_date: date


class ConflictDetail(BaseModel):
    id: int
    customer_name: str
    checkout_date: date | None
    return_date: date | None
    basket_no: str | None = None
    assignment_status: AssignmentStatus
    booking_id: int | None = None
    basket_id: int | None = None


class AvailabilityResponse(BaseModel):
    equipment_item_id: int
    checkout_date: date
    return_date: date
    available: bool
    conflicting_assignments: list[ConflictDetail] = []


class AssignmentResponse(BaseModel):
    id: int
    booking_id: int | None
    basket_id: int | None
    equipment_source: EquipmentSource
    equipment_item_id: int | None
    customer_equipment_type: str | None
    customer_equipment_brand: str | None
    customer_equipment_model: str | None
    customer_equipment_serial: str | None
    customer_equipment_notes: str | None
    price: Decimal
    checkout_date: date | None
    return_date: date | None
    actual_return_date: date | None
    assignment_status: AssignmentStatus
    damage_reported: bool
    damage_description: str | None
    damage_cost: Decimal | None
    charge_customer: bool
    damage_charge_amount: Decimal | None
    damage_charged_at: datetime | None
    damage_invoice_ref: str | None
    created_at: datetime
    # Denormalized for list views
    customer_name: str
    equipment_item: EquipmentItemSummary | None = None

    model_config = {"from_attributes": True}


# ── Bulk ─────────────────────────────────────────────────────────────────────

class BulkAssignmentCreate(BaseModel):
    items: list[AssignmentCreate] = Field(..., min_length=1)


class BulkReturnRequest(BaseModel):
    assignment_ids: list[int] = Field(..., min_length=1)
    damage_info: dict[int, DamageInfo] = {}


class BulkAvailabilityRequest(BaseModel):
    items: list[AvailabilityRequest] = Field(..., min_length=1)


class BulkFailure(BaseModel):
    index: int
    item: dict[str, Any] | None = None
    assignment_id: int | None = None
    error: str
    conflicting_assignments: list[ConflictDetail] = []


class BulkCreateResponse(BaseModel):
    message: str
    success_count: int
    failed_count: int
    success: list[AssignmentResponse]
    failed: list[BulkFailure]


class BulkReturnResponse(BaseModel):
    message: str
    returned: list[AssignmentResponse]
    failed: list[BulkFailure]


class BulkAvailabilityResult(BaseModel):
    index: int
    equipment_item_id: int
    checkout_date: date
    return_date: date
    available: bool
    conflicting_assignments: list[ConflictDetail] = []
    error: str | None = None


class BulkAvailabilityResponse(BaseModel):
    results: list[BulkAvailabilityResult]
