import logging
from typing import Optional, Sequence

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.config.constants import DayOfWeek
from hms.db.crud.common import list_where
from hms.db.models import DoctorScheduleModel

logger = logging.getLogger(__name__)

# the enum is stored as text, so calendar order has to be spelled out
_DAY_ORDER = case(
    {day.value: day.ordinal for day in DayOfWeek},
    value=DoctorScheduleModel.day_of_week,
)


async def get_schedule(db: AsyncSession, schedule_id: int) -> Optional[DoctorScheduleModel]:
    return await db.get(DoctorScheduleModel, schedule_id)


async def get_schedules_for_doctor(
    db: AsyncSession,
    doctor_id: int,
    day_of_week: Optional[DayOfWeek] = None,
    available_only: bool = False,
) -> Sequence[DoctorScheduleModel]:
    """
    Schedules of one doctor in calendar order (Monday first, then start time).

    Args:
        db (AsyncSession): the database session
        doctor_id (int): id of the doctor
        day_of_week (Optional[DayOfWeek]): restrict to one weekday
        available_only (bool): skip slots flagged as unavailable

    Returns:
        Sequence[DoctorScheduleModel]
    """
    logger.debug(
        f"CRUD: fetching schedules for doctor_id={doctor_id}, day={day_of_week}, available_only={available_only}"
    )
    query = select(DoctorScheduleModel).where(DoctorScheduleModel.doctor_id == doctor_id)
    if day_of_week is not None:
        query = query.where(DoctorScheduleModel.day_of_week == day_of_week)
    if available_only:
        query = query.where(DoctorScheduleModel.is_available.is_(True))
    query = query.order_by(_DAY_ORDER, DoctorScheduleModel.start_time, DoctorScheduleModel.id)

    schedules = await list_where(db, query)
    logger.info(f"CRUD: found {len(schedules)} schedules for doctor_id={doctor_id}")
    return schedules
