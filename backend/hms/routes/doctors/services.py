# hms/routes/doctors/services.py
import logging
from collections import Counter
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hms.config.constants import EntityName, EventAction
from hms.core.events import EventPublisher
from hms.core.exceptions import DuplicateFieldError, InvalidRequestError
from hms.db.crud import doctor as crud
from hms.db.crud.common import commit_unique, utcnow
from hms.db.models import DoctorModel
from hms.schemas.doctor import DoctorIn, DoctorOut, DoctorStatistics
from hms.schemas.shared import Page, PageRequest

logger = logging.getLogger(__name__)

ENTITY = "Doctor"

MUTABLE_FIELDS = (
    "first_name",
    "last_name",
    "specialization",
    "department_id",
    "license_number",
    "phone",
    "address",
    "experience_years",
    "consultation_fee",
    "is_available",
)


def _to_out(doctor: DoctorModel) -> DoctorOut:
    return DoctorOut.model_validate(doctor)


def _to_out_list(doctors) -> List[DoctorOut]:
    return [_to_out(d) for d in doctors]


class DoctorService:
    def __init__(self, db: AsyncSession, publisher: EventPublisher, topic: str):
        self.db = db
        self.publisher = publisher
        self.topic = topic

    async def create_doctor(self, data: DoctorIn) -> DoctorOut:
        logger.info(f"Creating new doctor: {data.first_name} {data.last_name} ({data.license_number})")

        if await crud.doctor_exists_by_license_number(self.db, data.license_number):
            raise DuplicateFieldError(ENTITY, "licenseNumber", data.license_number)

        now = utcnow()
        doctor = DoctorModel(**data.model_dump(), created_at=now, updated_at=now)
        self.db.add(doctor)
        await commit_unique(
            self.db, ENTITY, DoctorModel.__tablename__,
            {"license_number": ("licenseNumber", data.license_number)},
        )

        await self.publisher.publish(self.topic, EntityName.DOCTOR, EventAction.CREATED, doctor.id)
        logger.info(f"Doctor created successfully with ID: {doctor.id}")
        return _to_out(doctor)

    async def update_doctor(self, doctor_id: int, data: DoctorIn) -> Optional[DoctorOut]:
        logger.info(f"Updating doctor with ID: {doctor_id}")

        doctor = await crud.get_doctor(self.db, doctor_id)
        if doctor is None:
            logger.warning(f"Doctor with ID {doctor_id} not found for update")
            return None

        if data.license_number != doctor.license_number and await crud.doctor_exists_by_license_number(
            self.db, data.license_number, exclude_id=doctor_id
        ):
            raise DuplicateFieldError(ENTITY, "licenseNumber", data.license_number)

        for field in MUTABLE_FIELDS:
            setattr(doctor, field, getattr(data, field))
        doctor.updated_at = utcnow()
        await commit_unique(
            self.db, ENTITY, DoctorModel.__tablename__,
            {"license_number": ("licenseNumber", data.license_number)},
        )

        await self.publisher.publish(self.topic, EntityName.DOCTOR, EventAction.UPDATED, doctor.id)
        logger.info(f"Doctor updated successfully with ID: {doctor.id}")
        return _to_out(doctor)

    async def set_availability(self, doctor_id: int, available: bool) -> Optional[DoctorOut]:
        doctor = await crud.get_doctor(self.db, doctor_id)
        if doctor is None:
            return None

        doctor.is_available = available
        doctor.updated_at = utcnow()
        await self.db.commit()

        await self.publisher.publish(self.topic, EntityName.DOCTOR, EventAction.UPDATED, doctor.id)
        logger.info(f"Doctor {doctor.id} availability set to {available}")
        return _to_out(doctor)

    async def delete_doctor(self, doctor_id: int) -> bool:
        """Hard delete; the doctor's schedules go with it."""
        logger.info(f"Deleting doctor with ID: {doctor_id}")

        doctor = await crud.get_doctor(self.db, doctor_id)
        if doctor is None:
            logger.warning(f"Doctor with ID {doctor_id} not found for deletion")
            return False

        await self.db.delete(doctor)
        await self.db.commit()

        await self.publisher.publish(self.topic, EntityName.DOCTOR, EventAction.DELETED, doctor_id)
        logger.info(f"Doctor deleted successfully with ID: {doctor_id}")
        return True

    async def get_doctor(self, doctor_id: int) -> Optional[DoctorOut]:
        doctor = await crud.get_doctor(self.db, doctor_id)
        return _to_out(doctor) if doctor else None

    async def get_doctor_by_user_id(self, user_id: int) -> Optional[DoctorOut]:
        doctor = await crud.get_doctor_by_user_id(self.db, user_id)
        return _to_out(doctor) if doctor else None

    async def get_doctor_by_license_number(self, license_number: str) -> Optional[DoctorOut]:
        doctor = await crud.get_doctor_by_license_number(self.db, license_number)
        return _to_out(doctor) if doctor else None

    async def get_doctors(self, page_request: PageRequest) -> Page[DoctorOut]:
        rows, total = await crud.get_doctors_page(
            self.db,
            offset=page_request.offset,
            limit=page_request.size,
            sort_by=page_request.sort_by,
            descending=page_request.descending,
        )
        return Page[DoctorOut].build(_to_out_list(rows), page_request.page, page_request.size, total)

    async def search_by_name(self, name: str) -> List[DoctorOut]:
        return _to_out_list(await crud.search_doctors_by_name(self.db, name))

    async def get_doctors_by_specialization(self, specialization: str) -> List[DoctorOut]:
        return _to_out_list(await crud.get_doctors_by_specialization(self.db, specialization))

    async def get_doctors_by_department(self, department_id: int) -> List[DoctorOut]:
        return _to_out_list(await crud.get_doctors_by_department(self.db, department_id))

    async def get_available_doctors(self) -> List[DoctorOut]:
        return _to_out_list(await crud.get_available_doctors(self.db))

    async def get_doctors_by_experience(self, min_years: int, max_years: int) -> List[DoctorOut]:
        if min_years > max_years:
            raise InvalidRequestError("minYears must not be greater than maxYears")
        return _to_out_list(await crud.get_doctors_by_experience(self.db, min_years, max_years))

    async def get_statistics(self) -> DoctorStatistics:
        doctors = await crud.get_all_doctors(self.db)
        by_specialization = Counter(
            d.specialization for d in doctors if d.specialization and d.specialization.strip()
        )
        return DoctorStatistics(
            total_doctors=len(doctors),
            available_doctors=sum(1 for d in doctors if d.is_available),
            doctors_by_specialization=dict(by_specialization),
        )

    async def exists_by_user_id(self, user_id: int) -> bool:
        return await crud.doctor_exists_by_user_id(self.db, user_id)

    async def exists_by_license_number(self, license_number: str) -> bool:
        return await crud.doctor_exists_by_license_number(self.db, license_number)
