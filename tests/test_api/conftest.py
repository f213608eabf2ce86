from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from divecenter.main import app
from divecenter.database import get_db
from divecenter.models import (
    DiveCenter, User, Customer, Booking, EquipmentItem, DivePackage, PackageStatus,
)
from divecenter.services.user_service import hash_password

PASSWORD = "secret123"


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow, hash once per run
    return hash_password(PASSWORD)


@pytest.fixture(scope="function")
def session_factory(engine):
    TestSession = sessionmaker(bind=engine, autoflush=False)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def seed(session_factory, password_hash):
    """Two tenants; ids of everything the API tests touch."""
    db = session_factory()
    today = date.today()

    center_a = DiveCenter(name="Blue Reef Divers")
    center_b = DiveCenter(name="Coral Bay Diving")
    db.add_all([center_a, center_b])
    db.flush()

    db.add_all([
        User(dive_center_id=center_a.id, username="admin_a", email="admin@bluereef.test",
             hashed_password=password_hash, role="admin"),
        User(dive_center_id=center_a.id, username="staff_a", email="staff@bluereef.test",
             hashed_password=password_hash, role="staff"),
        User(dive_center_id=center_b.id, username="staff_b", email="staff@coralbay.test",
             hashed_password=password_hash, role="staff"),
    ])

    alice = Customer(dive_center_id=center_a.id, full_name="Alice Diver")
    bob = Customer(dive_center_id=center_a.id, full_name="Bob Bubbles")
    carol = Customer(dive_center_id=center_b.id, full_name="Carol Coral")
    db.add_all([alice, bob, carol])
    db.flush()

    package = DivePackage(
        dive_center_id=center_a.id,
        customer_id=alice.id,
        total_dives=3,
        dives_used=0,
        total_price=Decimal("300.00"),
        per_dive_price=Decimal("100.00"),
        start_date=today - timedelta(days=1),
        end_date=today + timedelta(days=30),
        status=PackageStatus.active,
    )
    db.add(package)
    db.flush()

    booking_alice = Booking(dive_center_id=center_a.id, customer_id=alice.id)
    booking_bob = Booking(dive_center_id=center_a.id, customer_id=bob.id)
    booking_pkg = Booking(dive_center_id=center_a.id, customer_id=alice.id, dive_package_id=package.id)
    booking_carol = Booking(dive_center_id=center_b.id, customer_id=carol.id)
    db.add_all([booking_alice, booking_bob, booking_pkg, booking_carol])

    bcd = EquipmentItem(dive_center_id=center_a.id, equipment_type="BCD", inventory_code="BCD-M-01", size="M")
    regulator = EquipmentItem(dive_center_id=center_a.id, equipment_type="Regulator", inventory_code="REG-01")
    wetsuit = EquipmentItem(dive_center_id=center_a.id, equipment_type="Wetsuit", inventory_code="WS-L-01", size="L")
    fins = EquipmentItem(dive_center_id=center_a.id, equipment_type="Fins", inventory_code="FIN-42", size="42")
    tank_b = EquipmentItem(dive_center_id=center_b.id, equipment_type="Tank", inventory_code="TANK-12L")
    db.add_all([bcd, regulator, wetsuit, fins, tank_b])
    db.commit()

    ids = {
        "center_a": center_a.id,
        "center_b": center_b.id,
        "alice": alice.id,
        "bob": bob.id,
        "carol": carol.id,
        "package": package.id,
        "booking_alice": booking_alice.id,
        "booking_bob": booking_bob.id,
        "booking_pkg": booking_pkg.id,
        "booking_carol": booking_carol.id,
        "bcd": bcd.id,
        "regulator": regulator.id,
        "wetsuit": wetsuit.id,
        "fins": fins.id,
        "tank_b": tank_b.id,
    }
    db.close()
    return ids


def _login(username: str):
    c = TestClient(app)
    res = c.post("/api/auth/login", json={"username": username, "password": PASSWORD})
    assert res.status_code == 200, res.text
    return c


@pytest.fixture(scope="function")
def client(seed):
    """Staff of the first dive center."""
    with _login("staff_a") as c:
        yield c


@pytest.fixture(scope="function")
def admin_client(seed):
    with _login("admin_a") as c:
        yield c


@pytest.fixture(scope="function")
def other_client(seed):
    """Staff of the second dive center."""
    with _login("staff_b") as c:
        yield c


@pytest.fixture(scope="function")
def anon_client(seed):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()
