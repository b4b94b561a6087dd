import logging
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import extract, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.config.constants import Gender
from hms.db.crud.common import fetch_page, list_where
from hms.db.models import PatientModel

logger = logging.getLogger(__name__)


async def get_patient(db: AsyncSession, patient_id: int) -> Optional[PatientModel]:
    return await db.get(PatientModel, patient_id)


async def get_patient_by_user_id(db: AsyncSession, user_id: int) -> Optional[PatientModel]:
    result = await db.execute(select(PatientModel).where(PatientModel.user_id == user_id))
    return result.scalar_one_or_none()


async def get_patient_by_phone(db: AsyncSession, phone: str) -> Optional[PatientModel]:
    result = await db.execute(select(PatientModel).where(PatientModel.phone == phone))
    return result.scalar_one_or_none()


async def get_patient_by_insurance_number(db: AsyncSession, insurance_number: str) -> Optional[PatientModel]:
    result = await db.execute(
        select(PatientModel).where(PatientModel.insurance_number == insurance_number)
    )
    return result.scalar_one_or_none()


async def get_patients_page(
    db: AsyncSession,
    offset: int,
    limit: int,
    sort_by: str = "id",
    descending: bool = False,
) -> Tuple[Sequence[PatientModel], int]:
    return await fetch_page(db, PatientModel, offset, limit, sort_by, descending)


async def get_all_patients(db: AsyncSession) -> List[PatientModel]:
    return list(await list_where(db, select(PatientModel)))


async def search_patients_by_name(db: AsyncSession, name: str) -> Sequence[PatientModel]:
    """
    Case-insensitive substring match against first OR last name.

    Args:
        db (AsyncSession): the database session
        name (str): fragment to look for, e.g. "an" matches "Anna" and "Anderson"

    Returns:
        Sequence[PatientModel]: matching patients ordered by id
    """
    logger.debug(f"CRUD: searching patients by name '{name}'")
    pattern = f"%{name.lower()}%"
    query = (
        select(PatientModel)
        .where(
            or_(
                func.lower(PatientModel.first_name).like(pattern),
                func.lower(PatientModel.last_name).like(pattern),
            )
        )
        .order_by(PatientModel.id)
    )
    patients = await list_where(db, query)
    logger.info(f"CRUD: found {len(patients)} patients matching name '{name}'")
    return patients


async def get_patients_by_blood_group(db: AsyncSession, blood_group: str) -> Sequence[PatientModel]:
    query = select(PatientModel).where(PatientModel.blood_group == blood_group).order_by(PatientModel.id)
    return await list_where(db, query)


async def get_patients_by_gender(db: AsyncSession, gender: Gender) -> Sequence[PatientModel]:
    query = select(PatientModel).where(PatientModel.gender == gender).order_by(PatientModel.id)
    return await list_where(db, query)


async def get_patients_by_insurance_provider(db: AsyncSession, provider: str) -> Sequence[PatientModel]:
    query = (
        select(PatientModel)
        .where(PatientModel.insurance_provider == provider)
        .order_by(PatientModel.id)
    )
    return await list_where(db, query)


async def get_patients_with_allergy(db: AsyncSession, allergy: str) -> Sequence[PatientModel]:
    logger.debug(f"CRUD: fetching patients with allergies containing '{allergy}'")
    query = (
        select(PatientModel)
        .where(
            PatientModel.allergies.is_not(None),
            func.lower(PatientModel.allergies).like(f"%{allergy.lower()}%"),
        )
        .order_by(PatientModel.id)
    )
    return await list_where(db, query)


async def get_patients_with_condition(db: AsyncSession, condition: str) -> Sequence[PatientModel]:
    logger.debug(f"CRUD: fetching patients with medical history containing '{condition}'")
    query = (
        select(PatientModel)
        .where(
            PatientModel.medical_history.is_not(None),
            func.lower(PatientModel.medical_history).like(f"%{condition.lower()}%"),
        )
        .order_by(PatientModel.id)
    )
    return await list_where(db, query)


async def get_patients_created_between(
    db: AsyncSession, start: datetime, end: datetime
) -> Sequence[PatientModel]:
    # inclusive on both ends
    query = (
        select(PatientModel)
        .where(PatientModel.created_at >= start, PatientModel.created_at <= end)
        .order_by(PatientModel.id)
    )
    return await list_where(db, query)


async def get_patients_born_in(db: AsyncSession, year: int) -> Sequence[PatientModel]:
    query = (
        select(PatientModel)
        .where(extract("year", PatientModel.date_of_birth) == year)
        .order_by(PatientModel.id)
    )
    return await list_where(db, query)


async def get_patients_born_between(db: AsyncSession, start: date, end: date) -> Sequence[PatientModel]:
    query = (
        select(PatientModel)
        .where(PatientModel.date_of_birth >= start, PatientModel.date_of_birth <= end)
        .order_by(PatientModel.id)
    )
    return await list_where(db, query)


async def patient_exists_by_user_id(db: AsyncSession, user_id: int, exclude_id: Optional[int] = None) -> bool:
    return await _exists(db, PatientModel.user_id == user_id, exclude_id)


async def patient_exists_by_phone(db: AsyncSession, phone: str, exclude_id: Optional[int] = None) -> bool:
    return await _exists(db, PatientModel.phone == phone, exclude_id)


async def patient_exists_by_insurance_number(
    db: AsyncSession, insurance_number: str, exclude_id: Optional[int] = None
) -> bool:
    return await _exists(db, PatientModel.insurance_number == insurance_number, exclude_id)


async def _exists(db: AsyncSession, condition, exclude_id: Optional[int]) -> bool:
    query = select(PatientModel.id).where(condition)
    if exclude_id is not None:
        query = query.where(PatientModel.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None
