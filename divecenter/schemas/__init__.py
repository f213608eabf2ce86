from divecenter.schemas.user import LoginRequest, SessionResponse
from divecenter.schemas.item import EquipmentItemSummary, EquipmentItemResponse
from divecenter.schemas.assignment import (
    AssignmentCreate, AssignmentResponse, DamageInfo, DamageChargeRequest,
    AvailabilityRequest, AvailabilityResponse, ConflictDetail,
    BulkAssignmentCreate, BulkReturnRequest, BulkAvailabilityRequest,
    BulkCreateResponse, BulkReturnResponse, BulkAvailabilityResponse,
)
from divecenter.schemas.basket import (
    BasketCreate, BasketReturnRequest, BasketForceClose, BasketResponse, BasketDetailResponse,
)
from divecenter.schemas.package import PackageCreate, PackageUpdate, PackageResponse, PackageStatusResponse
from divecenter.schemas.dive import DiveCreate, DiveResponse
from divecenter.schemas.pagination import Page

__all__ = [
    "LoginRequest", "SessionResponse",
    "EquipmentItemSummary", "EquipmentItemResponse",
    "AssignmentCreate", "AssignmentResponse", "DamageInfo", "DamageChargeRequest",
    "AvailabilityRequest", "AvailabilityResponse", "ConflictDetail",
    "BulkAssignmentCreate", "BulkReturnRequest", "BulkAvailabilityRequest",
    "BulkCreateResponse", "BulkReturnResponse", "BulkAvailabilityResponse",
    "BasketCreate", "BasketReturnRequest", "BasketForceClose", "BasketResponse", "BasketDetailResponse",
    "PackageCreate", "PackageUpdate", "PackageResponse", "PackageStatusResponse",
    "DiveCreate", "DiveResponse",
    "Page",
]
