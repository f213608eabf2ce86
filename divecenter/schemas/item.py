from datetime import datetime
from pydantic import BaseModel
from divecenter.models.item import ItemStatus


class EquipmentItemSummary(BaseModel):
    id: int
    equipment_type: str
    inventory_code: str | None
    size: str | None
    status: ItemStatus

    model_config = {"from_attributes": True}


class EquipmentItemResponse(EquipmentItemSummary):
    serial_no: str | None
    brand: str | None
    created_at: datetime
    updated_at: datetime
