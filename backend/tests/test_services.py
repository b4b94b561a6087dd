# tests/test_services.py
from datetime import date, datetime, time, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from hms.config.constants import DayOfWeek, Gender
from hms.core.events import InMemoryEventPublisher
from hms.core.exceptions import DuplicateFieldError, EntityNotFoundError
from hms.db.crud import patient as patient_crud
from hms.db import session as session_module
from hms.db.base import create_tables, get_engine, get_session_factory
from hms.db.crud.common import commit_unique, to_naive_utc, utcnow
from hms.db.models import PatientModel
from hms.db.session import script_db_session, set_global_session_factory
from hms.routes.doctors.services import DoctorService
from hms.routes.patients.services import PatientService
from hms.routes.schedules.services import ScheduleService
from hms.schemas.doctor import DoctorIn
from hms.schemas.patient import PatientIn
from hms.schemas.schedule import ScheduleIn
from tests.payloads import doctor_payload, patient_payload


def _patient_row(**overrides):
    now = utcnow()
    values = dict(
        user_id=1,
        first_name="Anna",
        last_name="Smith",
        date_of_birth=date(1990, 4, 12),
        phone="+14155552671",
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return PatientModel(**values)


class TestCommitUnique:
    @pytest.mark.asyncio
    async def test_unique_violation_becomes_duplicate_field_error(self, db_session):
        db_session.add(_patient_row())
        await db_session.commit()

        db_session.add(_patient_row(user_id=2))
        with pytest.raises(DuplicateFieldError) as info:
            await commit_unique(
                db_session,
                "Patient",
                "patients",
                {
                    "user_id": ("userId", 2),
                    "phone": ("phone", "+14155552671"),
                },
            )
        assert info.value.field == "phone"
        assert info.value.message == "Patient with phone +14155552671 already exists"

        # the session is usable again after the rollback
        assert len(await patient_crud.get_all_patients(db_session)) == 1

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self, db_session):
        db_session.add(_patient_row(first_name=None))
        with pytest.raises(IntegrityError):
            await commit_unique(db_session, "Patient", "patients", {"phone": ("phone", "+14155552671")})


class TestPatientService:
    @pytest.mark.asyncio
    async def test_duplicate_that_slips_past_the_pre_check(self, db_session, monkeypatch):
        publisher = InMemoryEventPublisher()
        service = PatientService(db_session, publisher, "patient-events")
        await service.create_patient(PatientIn(**patient_payload()))

        async def never_exists(*args, **kwargs):
            return False

        # simulate a concurrent insert the pre-check could not see
        monkeypatch.setattr(patient_crud, "patient_exists_by_user_id", never_exists)

        with pytest.raises(DuplicateFieldError) as info:
            await service.create_patient(
                PatientIn(**patient_payload(phone="+14155559999", insuranceNumber="OTHER-1"))
            )
        assert info.value.field == "userId"
        assert publisher.tokens() == ["PATIENT_CREATED:1"]

    @pytest.mark.asyncio
    async def test_update_returns_none_for_missing_patient(self, db_session):
        service = PatientService(db_session, InMemoryEventPublisher(), "patient-events")
        assert await service.update_patient(5, PatientIn(**patient_payload())) is None
        assert await service.delete_patient(5) is False

    @pytest.mark.asyncio
    async def test_statistics(self, db_session):
        service = PatientService(db_session, InMemoryEventPublisher(), "patient-events")
        await service.create_patient(
            PatientIn(**patient_payload(gender=Gender.FEMALE.value, allergies="  "))
        )

        stats = await service.get_statistics()
        assert stats.total_patients == 1
        assert stats.female_patients == 1
        assert stats.patients_with_insurance == 1
        assert stats.patients_with_allergies == 0


class TestScheduleService:
    @pytest.mark.asyncio
    async def test_schedule_requires_existing_doctor(self, db_session):
        service = ScheduleService(db_session, InMemoryEventPublisher(), "doctor-events")
        with pytest.raises(EntityNotFoundError):
            await service.create_schedule(
                ScheduleIn(doctor_id=7, day_of_week=DayOfWeek.MONDAY, start_time=time(9), end_time=time(10))
            )

    @pytest.mark.asyncio
    async def test_schedule_events_go_to_doctor_topic(self, db_session):
        publisher = InMemoryEventPublisher()
        doctor = await DoctorService(db_session, publisher, "doctor-events").create_doctor(
            DoctorIn(**doctor_payload())
        )
        schedule = await ScheduleService(db_session, publisher, "doctor-events").create_schedule(
            ScheduleIn(doctor_id=doctor.id, day_of_week=DayOfWeek.SUNDAY, start_time=time(9), end_time=time(10))
        )
        assert publisher.tokens("doctor-events") == [
            f"DOCTOR_CREATED:{doctor.id}",
            f"DOCTOR_SCHEDULE_CREATED:{schedule.id}",
        ]


def test_to_naive_utc():
    naive = datetime(2024, 3, 1, 12, 30)
    assert to_naive_utc(naive) is naive
    aware = datetime(2024, 3, 1, 17, 30, tzinfo=timezone(timedelta(hours=5)))
    assert to_naive_utc(aware) == naive


@pytest.mark.asyncio
async def test_script_session_uses_global_factory(monkeypatch):
    engine = await get_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    factory = await get_session_factory(engine)
    monkeypatch.setattr(session_module, "_global_session_factory", None)

    with pytest.raises(RuntimeError):
        async with script_db_session():
            pass

    set_global_session_factory(factory)
    assert session_module._global_session_factory is factory
    async with script_db_session() as db:
        assert await patient_crud.get_all_patients(db) == []
    await engine.dispose()
