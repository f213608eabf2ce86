"""Availability rules and item status derivation, exercised against the services."""
from datetime import date

import pytest

from divecenter.exceptions import ConflictError, NotFoundError, ValidationError
from divecenter.models import AssignmentStatus, EquipmentSource, ItemStatus, DiveCenter
from divecenter.schemas.assignment import AssignmentCreate, AvailabilityRequest, DamageInfo
from divecenter.services import assignment_service, availability_service
from divecenter.services.availability_service import ranges_overlap
from divecenter.services.item_status_service import derive_item_status


# ─── ranges_overlap ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("a, b, expected", [
    ((date(2024, 1, 10), date(2024, 1, 12)), (date(2024, 1, 12), date(2024, 1, 14)), True),
    ((date(2024, 1, 10), date(2024, 1, 12)), (date(2024, 1, 13), date(2024, 1, 15)), False),
    ((date(2024, 1, 10), date(2024, 1, 20)), (date(2024, 1, 12), date(2024, 1, 14)), True),
    ((date(2024, 1, 12), date(2024, 1, 14)), (date(2024, 1, 10), date(2024, 1, 12)), True),
    ((date(2024, 1, 10), date(2024, 1, 10)), (date(2024, 1, 10), date(2024, 1, 10)), True),
])
def test_ranges_overlap_is_inclusive(a, b, expected):
    assert ranges_overlap(*a, *b) is expected
    assert ranges_overlap(*b, *a) is expected


# ─── derive_item_status ──────────────────────────────────────────────────────

@pytest.mark.parametrize("status, damaged, expected", [
    (AssignmentStatus.checked_out, False, ItemStatus.rented),
    (AssignmentStatus.returned, False, ItemStatus.available),
    (AssignmentStatus.returned, True, ItemStatus.maintenance),
    (AssignmentStatus.pending, False, None),
    (AssignmentStatus.lost, False, None),
])
def test_derive_item_status(status, damaged, expected):
    assert derive_item_status(status, damaged) == expected


# ─── Service level ───────────────────────────────────────────────────────────

def _reserve(db, booking, item, start, end, **kwargs):
    data = AssignmentCreate(
        booking_id=booking.id,
        equipment_item_id=item.id,
        checkout_date=start,
        return_date=end,
        **kwargs,
    )
    return assignment_service.create_assignment(db, booking.dive_center_id, data)


def test_overlapping_window_rejected(db, booking, make_item):
    item = make_item()
    first = _reserve(db, booking, item, date(2024, 1, 10), date(2024, 1, 12))

    with pytest.raises(ConflictError) as exc:
        _reserve(db, booking, item, date(2024, 1, 12), date(2024, 1, 14))
    db.rollback()

    assert exc.value.status_code == 409
    assert [c["id"] for c in exc.value.conflicts] == [first.id]
    assert exc.value.detail["conflicting_assignments"][0]["checkout_date"] == "2024-01-10"

    accepted = _reserve(db, booking, item, date(2024, 1, 13), date(2024, 1, 15))
    assert accepted.assignment_status == AssignmentStatus.pending


def test_returned_assignment_frees_window(db, booking, make_item):
    item = make_item()
    first = _reserve(db, booking, item, date(2024, 1, 10), date(2024, 1, 12))
    assignment_service.return_assignment(db, booking.dive_center_id, first.id)

    second = _reserve(db, booking, item, date(2024, 1, 11), date(2024, 1, 12))
    assert second.id != first.id


def test_customer_own_skips_availability(db, booking, make_item):
    item = make_item()
    _reserve(db, booking, item, date(2024, 1, 10), date(2024, 1, 12))

    own = assignment_service.create_assignment(db, booking.dive_center_id, AssignmentCreate(
        booking_id=booking.id,
        equipment_source=EquipmentSource.customer_own,
        equipment_item_id=item.id,
        checkout_date=date(2024, 1, 10),
        return_date=date(2024, 1, 12),
        customer_equipment_type="Computer",
    ))
    assert own.equipment_item_id is None
    assert own.customer_equipment_type == "Computer"


def test_pre_check_agrees_with_create(db, booking, make_item):
    item = make_item()
    _reserve(db, booking, item, date(2024, 1, 10), date(2024, 1, 12))

    busy = availability_service.check_availability(db, booking.dive_center_id, AvailabilityRequest(
        equipment_item_id=item.id, checkout_date=date(2024, 1, 12), return_date=date(2024, 1, 14),
    ))
    free = availability_service.check_availability(db, booking.dive_center_id, AvailabilityRequest(
        equipment_item_id=item.id, checkout_date=date(2024, 1, 13), return_date=date(2024, 1, 15),
    ))
    assert busy["available"] is False
    assert busy["conflicting_assignments"][0]["customer_name"] == "Alice Diver"
    assert free["available"] is True


def test_pre_check_rejects_inverted_window(db, booking, make_item):
    item = make_item()
    with pytest.raises(ValidationError):
        availability_service.check_availability(db, booking.dive_center_id, AvailabilityRequest(
            equipment_item_id=item.id, checkout_date=date(2024, 1, 14), return_date=date(2024, 1, 12),
        ))


def test_item_of_other_center_not_found(db, booking, make_item):
    other = DiveCenter(name="Coral Bay")
    db.add(other)
    db.commit()
    foreign = make_item(dive_center_id=other.id)

    with pytest.raises(NotFoundError):
        _reserve(db, booking, foreign, date(2024, 1, 10), date(2024, 1, 12))


def test_clean_return_keeps_item_rented_while_other_checked_out(db, booking, make_item):
    item = make_item()
    first = _reserve(db, booking, item, date(2024, 1, 10), date(2024, 1, 11),
                     assignment_status=AssignmentStatus.checked_out)
    # Overlap only with a record that is no longer active
    assignment_service.return_assignment(db, booking.dive_center_id, first.id)
    second = _reserve(db, booking, item, date(2024, 1, 10), date(2024, 1, 11),
                      assignment_status=AssignmentStatus.checked_out)
    pending = _reserve(db, booking, item, date(2024, 2, 1), date(2024, 2, 2))
    db.refresh(item)
    assert item.status == ItemStatus.rented

    assignment_service.return_assignment(db, booking.dive_center_id, pending.id)
    db.refresh(item)
    assert item.status == ItemStatus.rented

    assignment_service.return_assignment(
        db, booking.dive_center_id, second.id, DamageInfo(damage_reported=True, damage_description="Torn strap"),
    )
    db.refresh(item)
    assert item.status == ItemStatus.maintenance


def test_lost_record_stops_blocking_window(db, booking, make_item):
    item = make_item()
    gone = _reserve(db, booking, item, date(2024, 1, 10), date(2024, 1, 12),
                    assignment_status=AssignmentStatus.checked_out)
    assignment_service.mark_lost(db, booking.dive_center_id, gone.id)

    check = availability_service.check_availability(db, booking.dive_center_id, AvailabilityRequest(
        equipment_item_id=item.id, checkout_date=date(2024, 1, 11), return_date=date(2024, 1, 13),
    ))
    assert check["available"] is True

    replacement = _reserve(db, booking, item, date(2024, 1, 11), date(2024, 1, 13))
    assert replacement.assignment_status == AssignmentStatus.pending
    db.refresh(gone)
    assert gone.assignment_status == AssignmentStatus.lost
