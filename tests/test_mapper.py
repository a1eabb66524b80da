from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.errors import ValidationError
from src.shifts.mapper import shift_to_model, shift_to_storage, shifts_to_models, to_utc_naive
from src.shifts.models import ShiftStatus
from src.shifts.schemas import ShiftDraft
from src.users.mapper import to_model, to_storage, update_to_storage
from src.users.models import UserRole
from src.users.schemas import AddressUpdate, EmployeePatch, EmployeeUpdate, ProfilePatch
from src.utils.field_update import CLEAR, UNSET, SetValue, from_payload


FULL_ROW = {
    "id": "e1",
    "email": "olena@example.com",
    "first_name": "Olena",
    "last_name": "Koval",
    "role": "admin",
    "employee_id": "EMP-7",
    "position": "Cook",
    "department": "Kitchen",
    "hourly_rate": Decimal("21.50"),
    "phone_number": "+380501112233",
    "avatar_url": "/media/profile-photos/e1/e1-1.png",
    "street": "Khreshchatyk 1",
    "city": "Kyiv",
    "state": "Kyiv",
    "country": "UA",
    "zip_code": "01001",
}


def test_sparse_row_gets_defaults():
    employee = to_model({"id": "e1"})

    assert employee.email == ""
    assert employee.role == UserRole.EMPLOYEE
    assert employee.hourly_rate == Decimal("0")
    assert employee.avatar == ""
    assert employee.address.city == ""


def test_no_none_leaks_into_model():
    row = {key: None for key in FULL_ROW}
    row["id"] = "e1"

    dumped = to_model(row).model_dump()

    assert None not in dumped.values()
    assert None not in dumped["address"].values()


def test_bad_role_and_rate_fall_back():
    assert to_model({"id": "1", "role": "manager"}).role == UserRole.EMPLOYEE
    assert to_model({"id": "1", "role": UserRole.ADMIN}).role == UserRole.ADMIN
    for bad in ("abc", "-3", "NaN", "Infinity", ""):
        assert to_model({"id": "1", "hourly_rate": bad}).hourly_rate == Decimal("0")
    assert to_model({"id": "1", "hourly_rate": "12.5"}).hourly_rate == Decimal("12.5")


def test_storage_round_trip_keeps_non_null_fields():
    row = to_storage(to_model(FULL_ROW))

    assert row == FULL_ROW


def test_avatar_maps_to_avatar_url_column():
    row = to_storage(to_model({"id": "e1", "avatar_url": "/x.png"}))

    assert row["avatar_url"] == "/x.png"
    assert "avatar" not in row


def test_update_emits_only_touched_columns():
    update = EmployeeUpdate(
        first_name=SetValue("Olha"),
        phone_number=CLEAR,
        role=SetValue(UserRole.ADMIN),
        address=AddressUpdate(city=SetValue("Lviv")),
    )

    assert update_to_storage(update) == {
        "first_name": "Olha",
        "phone_number": None,
        "role": "admin",
        "city": "Lviv",
    }


def test_empty_update_is_empty():
    assert update_to_storage(EmployeeUpdate()) == {}


def test_set_empty_string_is_not_clear():
    assert update_to_storage(EmployeeUpdate(position=SetValue(""))) == {"position": ""}


def test_from_payload_distinguishes_absent_null_and_value():
    sent = {"a", "b"}

    assert from_payload(sent, "a", None) is CLEAR
    assert from_payload(sent, "b", "x") == SetValue("x")
    assert from_payload(sent, "c", None) is UNSET


def test_patch_body_to_update():
    patch = EmployeePatch.model_validate({
        "firstName": "Olha",
        "phoneNumber": None,
        "address": {"city": "Lviv"},
    })

    update = patch.to_update()

    assert update.first_name == SetValue("Olha")
    assert update.phone_number is CLEAR
    assert update.last_name is UNSET
    assert update.address.city == SetValue("Lviv")
    assert update.address.street is UNSET


def test_profile_patch_ignores_admin_fields():
    patch = ProfilePatch.model_validate({"lastName": "Bondar", "role": "admin", "hourlyRate": 99})

    update = patch.to_update()

    assert update.last_name == SetValue("Bondar")
    assert update.role is UNSET
    assert update.hourly_rate is UNSET


def test_to_utc_naive():
    kyiv = timezone(timedelta(hours=2))

    assert to_utc_naive(datetime(2024, 1, 10, 15, 0, tzinfo=kyiv)) == datetime(2024, 1, 10, 13, 0)
    assert to_utc_naive(datetime(2024, 1, 10, 15, 0)) == datetime(2024, 1, 10, 15, 0)


def test_shift_row_defaults():
    shift = shift_to_model({
        "id": "s1",
        "employee_id": "e1",
        "start_time": "2024-01-10T09:00:00",
        "end_time": datetime(2024, 1, 10, 13, 0),
        "status": "bogus",
        "notes": None,
    })

    assert shift.start_time == datetime(2024, 1, 10, 9, 0)
    assert shift.status == ShiftStatus.scheduled
    assert shift.notes == ""


def test_shift_row_without_time_is_a_validation_error():
    with pytest.raises(ValidationError):
        shift_to_model({"id": "s1", "start_time": None, "end_time": datetime(2024, 1, 10, 13, 0)})


def test_shift_rows_without_time_are_skipped():
    rows = [
        {"id": "s1", "start_time": datetime(2024, 1, 10, 9, 0), "end_time": datetime(2024, 1, 10, 13, 0)},
        {"id": "s2", "start_time": datetime(2024, 1, 11, 9, 0), "end_time": None},
        {"id": "s3", "end_time": datetime(2024, 1, 12, 13, 0)},
    ]

    assert [s.id for s in shifts_to_models(rows)] == ["s1"]


def test_shift_storage_omits_missing_optionals():
    draft = ShiftDraft(
        start_time=datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc),
        end_time=datetime(2024, 1, 10, 13, 0, tzinfo=timezone.utc),
        position="Cook",
    )

    row = shift_to_storage("e1", draft)

    assert row == {
        "employee_id": "e1",
        "start_time": datetime(2024, 1, 10, 9, 0),
        "end_time": datetime(2024, 1, 10, 13, 0),
        "status": "scheduled",
        "position": "Cook",
    }
