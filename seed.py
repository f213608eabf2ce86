"""Seed script: fills the database with demo data for local development."""
import os
import sys

# Ensure we're in the project root
sys.path.insert(0, os.path.dirname(__file__))

from datetime import date, timedelta
from decimal import Decimal

from divecenter.database import Base, engine, SessionLocal
from divecenter.models import (
    DiveCenter, User, Customer, Booking, EquipmentItem, DivePackage, PackageStatus,
)
from divecenter.schemas.assignment import AssignmentCreate
from divecenter.schemas.basket import BasketCreate
from divecenter.services import assignment_service, basket_service
from divecenter.services.user_service import hash_password


def seed():
    os.makedirs("data", exist_ok=True)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    if db.query(DiveCenter).filter_by(name="Blue Reef Divers").first():
        print("Seed data already present, nothing to do.")
        db.close()
        return

    today = date.today()
    center = DiveCenter(name="Blue Reef Divers")
    db.add(center)
    db.flush()

    if not db.query(User).filter_by(username="admin").first():
        db.add(User(
            dive_center_id=center.id,
            username="admin",
            email="admin@divecenter.local",
            hashed_password=hash_password("admin123"),
            role="admin",
        ))
    db.add(User(
        dive_center_id=center.id,
        username="guide",
        email="guide@divecenter.local",
        hashed_password=hash_password("guide123"),
        role="staff",
    ))

    # Customers
    customers = [
        Customer(dive_center_id=center.id, full_name="Alice Diver", email="alice@example.com"),
        Customer(dive_center_id=center.id, full_name="Bob Bubbles", email="bob@example.com"),
        Customer(dive_center_id=center.id, full_name="Dana Deep"),
    ]
    db.add_all(customers)
    db.flush()
    alice, bob, dana = customers

    package = DivePackage(
        dive_center_id=center.id,
        customer_id=alice.id,
        total_dives=10,
        dives_used=0,
        total_price=Decimal("850.00"),
        per_dive_price=Decimal("85.00"),
        start_date=today,
        end_date=today + timedelta(days=30),
        duration_days=30,
        status=PackageStatus.active,
    )
    db.add(package)
    db.flush()

    bookings = [
        Booking(dive_center_id=center.id, customer_id=alice.id, booking_date=today, dive_package_id=package.id),
        Booking(dive_center_id=center.id, customer_id=bob.id, booking_date=today),
        Booking(dive_center_id=center.id, customer_id=dana.id, booking_date=today + timedelta(days=3)),
    ]
    db.add_all(bookings)

    # Rental equipment
    items_data = [
        ("BCD", "BCD-S-01", "S", "Scubapro"),
        ("BCD", "BCD-M-01", "M", "Scubapro"),
        ("BCD", "BCD-L-01", "L", "Aqualung"),
        ("Regulator", "REG-01", None, "Apeks"),
        ("Regulator", "REG-02", None, "Apeks"),
        ("Wetsuit", "WS-M-01", "M", "Bare"),
        ("Wetsuit", "WS-L-01", "L", "Bare"),
        ("Fins", "FIN-40", "40", "Mares"),
        ("Fins", "FIN-43", "43", "Mares"),
        ("Mask", "MSK-01", None, "Cressi"),
    ]
    items = [
        EquipmentItem(dive_center_id=center.id, equipment_type=t, inventory_code=code, size=size, brand=brand)
        for t, code, size, brand in items_data
    ]
    db.add_all(items)
    db.commit()
    by_code = {i.inventory_code: i for i in items}

    # Bob takes a basket of gear out today
    basket = basket_service.create_basket(db, center.id, BasketCreate(
        customer_id=bob.id, booking_id=bookings[1].id, center_bucket_no="B-07",
        expected_return_date=today + timedelta(days=2),
    ))
    for code in ("BCD-L-01", "REG-01", "WS-L-01"):
        assignment_service.create_assignment(db, center.id, AssignmentCreate(
            basket_id=basket.id,
            equipment_item_id=by_code[code].id,
            checkout_date=today,
            return_date=today + timedelta(days=2),
            assignment_status="Checked Out",
            price=Decimal("12.00"),
        ))

    # Dana reserved a BCD for later in the week
    assignment_service.create_assignment(db, center.id, AssignmentCreate(
        booking_id=bookings[2].id,
        equipment_item_id=by_code["BCD-M-01"].id,
        checkout_date=today + timedelta(days=3),
        return_date=today + timedelta(days=5),
        price=Decimal("15.00"),
    ))

    db.close()
    print("Seed completed.")


if __name__ == "__main__":
    seed()
