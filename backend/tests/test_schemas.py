# tests/test_schemas.py
from datetime import time
from decimal import Decimal

import pytest
from pydantic import ValidationError

from hms.config.constants import DayOfWeek, Gender
from hms.schemas.doctor import DoctorIn
from hms.schemas.patient import PatientIn
from hms.schemas.schedule import ScheduleIn
from tests.payloads import doctor_payload, patient_payload


def test_patient_accepts_camel_and_snake_case_keys():
    camel = PatientIn.model_validate(patient_payload())
    snake = PatientIn(
        user_id=1,
        first_name="Anna",
        last_name="Smith",
        date_of_birth="1990-04-12",
    )
    assert camel.first_name == snake.first_name == "Anna"
    assert camel.gender is Gender.FEMALE
    assert snake.phone is None


@pytest.mark.parametrize("field", ["firstName", "lastName"])
@pytest.mark.parametrize("value", ["", "   ", None])
def test_patient_required_names_reject_blank(field, value):
    with pytest.raises(ValidationError):
        PatientIn.model_validate(patient_payload(**{field: value}))


def test_patient_name_length_limit():
    PatientIn.model_validate(patient_payload(firstName="a" * 50))
    with pytest.raises(ValidationError):
        PatientIn.model_validate(patient_payload(firstName="a" * 51))


@pytest.mark.parametrize("phone", ["+14155552671", "14155552671", "12", "+123456789012345"])
def test_phone_pattern_accepts(phone):
    assert PatientIn.model_validate(patient_payload(phone=phone)).phone == phone


@pytest.mark.parametrize(
    "phone",
    ["0123", "+0123", "12a4", "+", "1", "", "1234567890123456", "+1 415 555 2671", "+1٤١٥٥٥٥", "١٤١٥٥٥٥"],
)
def test_phone_pattern_rejects(phone):
    with pytest.raises(ValidationError):
        PatientIn.model_validate(patient_payload(phone=phone))


def test_emergency_contact_uses_phone_pattern():
    with pytest.raises(ValidationError):
        PatientIn.model_validate(patient_payload(emergencyContact="call-me"))
    assert PatientIn.model_validate(patient_payload(emergencyContact=None)).emergency_contact is None


def test_patient_size_bounded_fields():
    with pytest.raises(ValidationError):
        PatientIn.model_validate(patient_payload(bloodGroup="AB+ve!"))
    with pytest.raises(ValidationError):
        PatientIn.model_validate(patient_payload(insuranceProvider="x" * 101))
    with pytest.raises(ValidationError):
        PatientIn.model_validate(patient_payload(insuranceNumber="x" * 51))


def test_patient_rejects_unknown_gender():
    with pytest.raises(ValidationError):
        PatientIn.model_validate(patient_payload(gender="UNKNOWN"))


def test_patient_ignores_server_managed_fields():
    patient = PatientIn.model_validate(patient_payload(id=99, createdAt="2020-01-01T00:00:00"))
    assert not hasattr(patient, "id")


@pytest.mark.parametrize("years, ok", [(0, True), (50, True), (51, False), (-1, False)])
def test_doctor_experience_years_bounds(years, ok):
    if ok:
        assert DoctorIn.model_validate(doctor_payload(experienceYears=years)).experience_years == years
    else:
        with pytest.raises(ValidationError):
            DoctorIn.model_validate(doctor_payload(experienceYears=years))


def test_doctor_consultation_fee_rules():
    assert DoctorIn.model_validate(doctor_payload(consultationFee="0")).consultation_fee == Decimal("0")
    assert DoctorIn.model_validate(doctor_payload(consultationFee="99.95")).consultation_fee == Decimal("99.95")
    with pytest.raises(ValidationError):
        DoctorIn.model_validate(doctor_payload(consultationFee="-0.01"))
    with pytest.raises(ValidationError):
        DoctorIn.model_validate(doctor_payload(consultationFee="10.555"))


def test_doctor_license_number_required_and_not_blank():
    with pytest.raises(ValidationError):
        DoctorIn.model_validate(doctor_payload(licenseNumber="  "))
    payload = doctor_payload()
    del payload["licenseNumber"]
    with pytest.raises(ValidationError):
        DoctorIn.model_validate(payload)


def test_doctor_is_available_defaults_true():
    payload = doctor_payload()
    del payload["isAvailable"]
    assert DoctorIn.model_validate(payload).is_available is True


def test_schedule_requires_start_before_end():
    schedule = ScheduleIn(doctor_id=1, day_of_week="MONDAY", start_time="09:00", end_time="12:00")
    assert schedule.day_of_week is DayOfWeek.MONDAY
    assert schedule.start_time == time(9, 0)
    with pytest.raises(ValidationError):
        ScheduleIn(doctor_id=1, day_of_week="MONDAY", start_time="12:00", end_time="12:00")
    with pytest.raises(ValidationError):
        ScheduleIn(doctor_id=1, day_of_week="FUNDAY", start_time="09:00", end_time="12:00")
