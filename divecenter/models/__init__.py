from divecenter.models.dive_center import DiveCenter
from divecenter.models.user import User
from divecenter.models.customer import Customer
from divecenter.models.booking import Booking
from divecenter.models.item import EquipmentItem, ItemStatus
from divecenter.models.assignment import Assignment, AssignmentStatus, EquipmentSource
from divecenter.models.basket import EquipmentBasket, BasketStatus
from divecenter.models.package import DivePackage, PackageStatus
from divecenter.models.dive import BookingDive

__all__ = [
    "DiveCenter", "User", "Customer", "Booking",
    "EquipmentItem", "ItemStatus",
    "Assignment", "AssignmentStatus", "EquipmentSource",
    "EquipmentBasket", "BasketStatus",
    "DivePackage", "PackageStatus",
    "BookingDive",
]
