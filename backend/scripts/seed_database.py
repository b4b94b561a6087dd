# backend/scripts/seed_database.py
"""
Seed sample doctors, their weekly schedules and patients.

Goes through the service layer so validation, uniqueness checks and
lifecycle events behave exactly as they do behind the API. Records that
already exist (same license number / user id) are skipped.

    python scripts/seed_database.py
"""
import asyncio
import logging
from datetime import date, time
from decimal import Decimal

# Add project root to sys.path to allow importing from hms
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from hms.config.constants import DayOfWeek, Gender
from hms.config.settings import settings
from hms.core.events import create_event_publisher
from hms.core.exceptions import DuplicateFieldError
from hms.db.base import create_tables, get_engine, get_session_factory
from hms.db.session import script_db_session, set_global_session_factory
from hms.routes.doctors.services import DoctorService
from hms.routes.patients.services import PatientService
from hms.routes.schedules.services import ScheduleService
from hms.schemas.doctor import DoctorIn
from hms.schemas.patient import PatientIn
from hms.schemas.schedule import ScheduleIn

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

# (user_id, first, last, specialization, department, license, phone, years, fee)
DOCTORS = [
    (1001, "John", "Smith", "Cardiology", 1, "LIC-CARD-0001", "+14155550101", 22, "180.00"),
    (1002, "Alice", "Johnson", "Cardiology", 1, "LIC-CARD-0002", "+14155550102", 15, "160.00"),
    (1003, "Gregory", "House", "Diagnostic Medicine", 2, "LIC-DIAG-0001", "+14155550103", 30, "250.00"),
    (1004, "Mei", "Chen", "Neurology", 3, "LIC-NEUR-0001", "+14155550104", 12, "200.00"),
    (1005, "Sarah", "Brown", "Pediatrics", 4, "LIC-PEDI-0001", "+14155550105", 9, "120.00"),
    (1006, "Michael", "Jones", "Orthopedics", 5, "LIC-ORTH-0001", "+14155550106", 18, "170.00"),
]

WEEKLY_SLOTS = [
    (DayOfWeek.MONDAY, time(9, 0), time(13, 0)),
    (DayOfWeek.WEDNESDAY, time(13, 0), time(17, 0)),
    (DayOfWeek.FRIDAY, time(9, 0), time(12, 0)),
]

# (user_id, first, last, dob, gender, phone, blood group, allergies, insurer, insurance no.)
PATIENTS = [
    (2001, "Anna", "Smith", date(1990, 4, 12), Gender.FEMALE, "+14155552671", "A+", "Penicillin", "BlueCross", "BC-100200"),
    (2002, "Susan", "Anderson", date(1985, 11, 3), Gender.FEMALE, "+14155552672", "O-", None, "Aetna", "AE-553311"),
    (2003, "Mark", "Taylor", date(1978, 1, 27), Gender.MALE, "+14155552673", "B+", "Peanuts, Latex", None, None),
    (2004, "Robin", "Lee", date(2001, 7, 19), Gender.OTHER, None, "AB+", None, "Cigna", "CG-778899"),
]


async def seed_doctors(doctor_service: DoctorService, schedule_service: ScheduleService) -> None:
    for user_id, first, last, specialization, department, license_no, phone, years, fee in DOCTORS:
        try:
            doctor = await doctor_service.create_doctor(
                DoctorIn(
                    user_id=user_id,
                    first_name=first,
                    last_name=last,
                    specialization=specialization,
                    department_id=department,
                    license_number=license_no,
                    phone=phone,
                    experience_years=years,
                    consultation_fee=Decimal(fee),
                )
            )
        except DuplicateFieldError as e:
            logger.info(f"Skipping doctor {first} {last}: {e.message}")
            continue

        for day, start, end in WEEKLY_SLOTS:
            await schedule_service.create_schedule(
                ScheduleIn(doctor_id=doctor.id, day_of_week=day, start_time=start, end_time=end)
            )
        logger.info(f"Added doctor {first} {last} (ID {doctor.id}) with {len(WEEKLY_SLOTS)} weekly slots")


async def seed_patients(patient_service: PatientService) -> None:
    for user_id, first, last, dob, gender, phone, blood, allergies, insurer, insurance_no in PATIENTS:
        try:
            patient = await patient_service.create_patient(
                PatientIn(
                    user_id=user_id,
                    first_name=first,
                    last_name=last,
                    date_of_birth=dob,
                    gender=gender,
                    phone=phone,
                    blood_group=blood,
                    allergies=allergies,
                    insurance_provider=insurer,
                    insurance_number=insurance_no,
                )
            )
        except DuplicateFieldError as e:
            logger.info(f"Skipping patient {first} {last}: {e.message}")
            continue
        logger.info(f"Added patient {first} {last} (ID {patient.id})")


async def main() -> None:
    logger.info(f"Connecting to database at: {settings.database_url}")
    engine = await get_engine(settings.database_url)
    await create_tables(engine)
    set_global_session_factory(await get_session_factory(engine))

    publisher = create_event_publisher(settings)
    await publisher.start()
    try:
        async with script_db_session() as db:
            await seed_doctors(
                DoctorService(db, publisher, settings.doctor_events_topic),
                ScheduleService(db, publisher, settings.doctor_events_topic),
            )
            await seed_patients(PatientService(db, publisher, settings.patient_events_topic))
    finally:
        await publisher.stop()
        await engine.dispose()
    logger.info("Seeding complete.")


if __name__ == "__main__":
    asyncio.run(main())
