# hms/routes/patients/services.py
import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hms.config.constants import EntityName, EventAction, Gender
from hms.core.events import EventPublisher
from hms.core.exceptions import DuplicateFieldError
from hms.db.crud import patient as crud
from hms.db.crud.common import commit_unique, to_naive_utc, utcnow
from hms.db.models import PatientModel
from hms.schemas.patient import PatientIn, PatientOut, PatientStatistics
from hms.schemas.shared import Page, PageRequest

logger = logging.getLogger(__name__)

ENTITY = "Patient"

# fields a PUT overwrites; id, user_id and created_at are never touched
MUTABLE_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "phone",
    "address",
    "emergency_contact",
    "blood_group",
    "allergies",
    "medical_history",
    "insurance_provider",
    "insurance_number",
)


def _to_out(patient: PatientModel) -> PatientOut:
    return PatientOut.model_validate(patient)


def _to_out_list(patients) -> List[PatientOut]:
    return [_to_out(p) for p in patients]


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


class PatientService:
    """Patient use cases: validation of unique fields, persistence, lifecycle events."""

    def __init__(self, db: AsyncSession, publisher: EventPublisher, topic: str):
        self.db = db
        self.publisher = publisher
        self.topic = topic

    # ------------------------------------------------------------------ writes
    async def create_patient(self, data: PatientIn) -> PatientOut:
        logger.info(f"Creating new patient: {data.first_name} {data.last_name}")

        if await crud.patient_exists_by_user_id(self.db, data.user_id):
            raise DuplicateFieldError(ENTITY, "userId", data.user_id)
        if data.phone is not None and await crud.patient_exists_by_phone(self.db, data.phone):
            raise DuplicateFieldError(ENTITY, "phone", data.phone)
        if data.insurance_number is not None and await crud.patient_exists_by_insurance_number(
            self.db, data.insurance_number
        ):
            raise DuplicateFieldError(ENTITY, "insuranceNumber", data.insurance_number)

        now = utcnow()
        patient = PatientModel(**data.model_dump(), created_at=now, updated_at=now)
        self.db.add(patient)
        await commit_unique(self.db, ENTITY, PatientModel.__tablename__, self._unique_fields(data))

        await self.publisher.publish(self.topic, EntityName.PATIENT, EventAction.CREATED, patient.id)
        logger.info(f"Patient created successfully with ID: {patient.id}")
        return _to_out(patient)

    async def update_patient(self, patient_id: int, data: PatientIn) -> Optional[PatientOut]:
        logger.info(f"Updating patient with ID: {patient_id}")

        patient = await crud.get_patient(self.db, patient_id)
        if patient is None:
            logger.warning(f"Patient with ID {patient_id} not found for update")
            return None

        if (
            data.phone is not None
            and data.phone != patient.phone
            and await crud.patient_exists_by_phone(self.db, data.phone, exclude_id=patient_id)
        ):
            raise DuplicateFieldError(ENTITY, "phone", data.phone)
        if (
            data.insurance_number is not None
            and data.insurance_number != patient.insurance_number
            and await crud.patient_exists_by_insurance_number(
                self.db, data.insurance_number, exclude_id=patient_id
            )
        ):
            raise DuplicateFieldError(ENTITY, "insuranceNumber", data.insurance_number)

        for field in MUTABLE_FIELDS:
            setattr(patient, field, getattr(data, field))
        patient.updated_at = utcnow()

        unique_fields = self._unique_fields(data)
        unique_fields.pop("user_id")
        await commit_unique(self.db, ENTITY, PatientModel.__tablename__, unique_fields)

        await self.publisher.publish(self.topic, EntityName.PATIENT, EventAction.UPDATED, patient.id)
        logger.info(f"Patient updated successfully with ID: {patient.id}")
        return _to_out(patient)

    async def delete_patient(self, patient_id: int) -> bool:
        logger.info(f"Deleting patient with ID: {patient_id}")

        patient = await crud.get_patient(self.db, patient_id)
        if patient is None:
            logger.warning(f"Patient with ID {patient_id} not found for deletion")
            return False

        await self.db.delete(patient)
        await self.db.commit()

        await self.publisher.publish(self.topic, EntityName.PATIENT, EventAction.DELETED, patient_id)
        logger.info(f"Patient deleted successfully with ID: {patient_id}")
        return True

    @staticmethod
    def _unique_fields(data: PatientIn):
        return {
            "user_id": ("userId", data.user_id),
            "phone": ("phone", data.phone),
            "insurance_number": ("insuranceNumber", data.insurance_number),
        }

    # ------------------------------------------------------------------- reads
    async def get_patient(self, patient_id: int) -> Optional[PatientOut]:
        logger.debug(f"Fetching patient by ID: {patient_id}")
        patient = await crud.get_patient(self.db, patient_id)
        return _to_out(patient) if patient else None

    async def get_patient_by_user_id(self, user_id: int) -> Optional[PatientOut]:
        logger.debug(f"Fetching patient by user ID: {user_id}")
        patient = await crud.get_patient_by_user_id(self.db, user_id)
        return _to_out(patient) if patient else None

    async def get_patients(self, page_request: PageRequest) -> Page[PatientOut]:
        logger.debug(f"Fetching all patients with pagination: {page_request}")
        rows, total = await crud.get_patients_page(
            self.db,
            offset=page_request.offset,
            limit=page_request.size,
            sort_by=page_request.sort_by,
            descending=page_request.descending,
        )
        return Page[PatientOut].build(_to_out_list(rows), page_request.page, page_request.size, total)

    async def search_by_name(self, name: str) -> List[PatientOut]:
        return _to_out_list(await crud.search_patients_by_name(self.db, name))

    async def get_patient_by_phone(self, phone: str) -> Optional[PatientOut]:
        logger.debug(f"Fetching patient by phone: {phone}")
        patient = await crud.get_patient_by_phone(self.db, phone)
        return _to_out(patient) if patient else None

    async def get_patients_by_blood_group(self, blood_group: str) -> List[PatientOut]:
        return _to_out_list(await crud.get_patients_by_blood_group(self.db, blood_group))

    async def get_patients_by_gender(self, gender: Gender) -> List[PatientOut]:
        return _to_out_list(await crud.get_patients_by_gender(self.db, gender))

    async def get_patients_by_insurance_provider(self, provider: str) -> List[PatientOut]:
        return _to_out_list(await crud.get_patients_by_insurance_provider(self.db, provider))

    async def get_patient_by_insurance_number(self, insurance_number: str) -> Optional[PatientOut]:
        logger.debug(f"Fetching patient by insurance number: {insurance_number}")
        patient = await crud.get_patient_by_insurance_number(self.db, insurance_number)
        return _to_out(patient) if patient else None

    async def get_patients_by_allergy(self, allergy: str) -> List[PatientOut]:
        return _to_out_list(await crud.get_patients_with_allergy(self.db, allergy))

    async def get_patients_by_medical_history(self, condition: str) -> List[PatientOut]:
        return _to_out_list(await crud.get_patients_with_condition(self.db, condition))

    async def get_patients_by_created_date_range(self, start: datetime, end: datetime) -> List[PatientOut]:
        logger.debug(f"Fetching patients created between {start} and {end}")
        # naive values are taken as UTC
        start, end = to_naive_utc(start), to_naive_utc(end)
        return _to_out_list(await crud.get_patients_created_between(self.db, start, end))

    async def get_patients_by_birth_year(self, year: int) -> List[PatientOut]:
        return _to_out_list(await crud.get_patients_born_in(self.db, year))

    async def get_patients_by_birth_date_range(self, start: date, end: date) -> List[PatientOut]:
        logger.debug(f"Fetching patients born between {start} and {end}")
        return _to_out_list(await crud.get_patients_born_between(self.db, start, end))

    async def get_statistics(self) -> PatientStatistics:
        """Counts over the whole table, computed in memory on every call."""
        logger.debug("Fetching patient statistics")
        patients = await crud.get_all_patients(self.db)

        stats = PatientStatistics(total_patients=len(patients))
        for p in patients:
            if p.gender == Gender.MALE:
                stats.male_patients += 1
            elif p.gender == Gender.FEMALE:
                stats.female_patients += 1
            elif p.gender == Gender.OTHER:
                stats.other_gender_patients += 1
            if _has_text(p.insurance_provider):
                stats.patients_with_insurance += 1
            if _has_text(p.allergies):
                stats.patients_with_allergies += 1
        return stats

    async def exists_by_user_id(self, user_id: int) -> bool:
        return await crud.patient_exists_by_user_id(self.db, user_id)

    async def exists_by_phone(self, phone: str) -> bool:
        return await crud.patient_exists_by_phone(self.db, phone)

    async def exists_by_insurance_number(self, insurance_number: str) -> bool:
        return await crud.patient_exists_by_insurance_number(self.db, insurance_number)
