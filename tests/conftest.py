import os

# Settings are read at import time; keep the app engine off the real data/ file
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from divecenter.database import Base, make_engine
import divecenter.models  # noqa: F401 (registers the mappers)
from divecenter.models.dive_center import DiveCenter
from divecenter.models.customer import Customer
from divecenter.models.booking import Booking
from divecenter.models.item import EquipmentItem


TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def engine():
    engine = make_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def dive_center(db):
    center = DiveCenter(name="Blue Reef Divers")
    db.add(center)
    db.commit()
    return center


@pytest.fixture
def customer(db, dive_center):
    c = Customer(dive_center_id=dive_center.id, full_name="Alice Diver", email="alice@example.com")
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def booking(db, dive_center, customer):
    b = Booking(dive_center_id=dive_center.id, customer_id=customer.id)
    db.add(b)
    db.commit()
    return b


@pytest.fixture
def make_item(db, dive_center):
    counter = iter(range(1, 1000))

    def _make(equipment_type="BCD", size="M", dive_center_id=None):
        n = next(counter)
        item = EquipmentItem(
            dive_center_id=dive_center_id or dive_center.id,
            equipment_type=equipment_type,
            inventory_code=f"EQ-{n:03d}",
            size=size,
        )
        db.add(item)
        db.commit()
        return item

    return _make
