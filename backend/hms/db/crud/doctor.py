import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.db.crud.common import fetch_page, list_where
from hms.db.models import DoctorModel

logger = logging.getLogger(__name__)


async def get_doctor(db: AsyncSession, doctor_id: int) -> Optional[DoctorModel]:
    return await db.get(DoctorModel, doctor_id)


async def get_doctor_by_user_id(db: AsyncSession, user_id: int) -> Optional[DoctorModel]:
    """A user account maps to at most one doctor profile; the first by id wins."""
    result = await db.execute(
        select(DoctorModel).where(DoctorModel.user_id == user_id).order_by(DoctorModel.id).limit(1)
    )
    return result.scalar_one_or_none()


async def get_doctor_by_license_number(db: AsyncSession, license_number: str) -> Optional[DoctorModel]:
    result = await db.execute(select(DoctorModel).where(DoctorModel.license_number == license_number))
    return result.scalar_one_or_none()


async def get_doctors_page(
    db: AsyncSession,
    offset: int,
    limit: int,
    sort_by: str = "id",
    descending: bool = False,
) -> Tuple[Sequence[DoctorModel], int]:
    return await fetch_page(db, DoctorModel, offset, limit, sort_by, descending)


async def get_all_doctors(db: AsyncSession) -> List[DoctorModel]:
    return list(await list_where(db, select(DoctorModel)))


async def search_doctors_by_name(db: AsyncSession, name: str) -> Sequence[DoctorModel]:
    """
    Searches doctors by a fragment of their first or last name (case-insensitive).

    Args:
        db: Database session
        name: fragment to look for

    Returns:
        Matching doctors ordered by id
    """
    logger.debug(f"CRUD: searching doctors by name '{name}'")
    pattern = f"%{name.lower()}%"
    query = (
        select(DoctorModel)
        .where(
            or_(
                func.lower(DoctorModel.first_name).like(pattern),
                func.lower(DoctorModel.last_name).like(pattern),
            )
        )
        .order_by(DoctorModel.id)
    )
    doctors = await list_where(db, query)
    logger.info(f"CRUD: found {len(doctors)} doctors matching name '{name}'")
    return doctors


async def get_doctors_by_specialization(db: AsyncSession, specialization: str) -> Sequence[DoctorModel]:
    query = (
        select(DoctorModel)
        .where(func.lower(DoctorModel.specialization).like(f"%{specialization.lower()}%"))
        .order_by(DoctorModel.id)
    )
    return await list_where(db, query)


async def get_doctors_by_department(db: AsyncSession, department_id: int) -> Sequence[DoctorModel]:
    query = select(DoctorModel).where(DoctorModel.department_id == department_id).order_by(DoctorModel.id)
    return await list_where(db, query)


async def get_available_doctors(db: AsyncSession) -> Sequence[DoctorModel]:
    query = select(DoctorModel).where(DoctorModel.is_available.is_(True)).order_by(DoctorModel.id)
    return await list_where(db, query)


async def get_doctors_by_experience(db: AsyncSession, min_years: int, max_years: int) -> Sequence[DoctorModel]:
    query = (
        select(DoctorModel)
        .where(DoctorModel.experience_years >= min_years, DoctorModel.experience_years <= max_years)
        .order_by(DoctorModel.id)
    )
    return await list_where(db, query)


async def doctor_exists_by_user_id(db: AsyncSession, user_id: int) -> bool:
    result = await db.execute(select(DoctorModel.id).where(DoctorModel.user_id == user_id).limit(1))
    return result.scalar_one_or_none() is not None


async def doctor_exists_by_license_number(
    db: AsyncSession, license_number: str, exclude_id: Optional[int] = None
) -> bool:
    query = select(DoctorModel.id).where(DoctorModel.license_number == license_number)
    if exclude_id is not None:
        query = query.where(DoctorModel.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None
