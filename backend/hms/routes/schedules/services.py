# hms/routes/schedules/services.py
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hms.config.constants import DayOfWeek, EntityName, EventAction
from hms.core.events import EventPublisher
from hms.core.exceptions import EntityNotFoundError
from hms.db.crud import doctor as doctor_crud
from hms.db.crud import schedule as crud
from hms.db.crud.common import utcnow
from hms.db.models import DoctorScheduleModel
from hms.schemas.schedule import ScheduleIn, ScheduleOut

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("doctor_id", "day_of_week", "start_time", "end_time", "is_available")


def _to_out_list(schedules) -> List[ScheduleOut]:
    return [ScheduleOut.model_validate(s) for s in schedules]


class ScheduleService:
    """Weekly availability slots of doctors."""

    def __init__(self, db: AsyncSession, publisher: EventPublisher, topic: str):
        self.db = db
        self.publisher = publisher
        self.topic = topic

    async def _require_doctor(self, doctor_id: int) -> None:
        if await doctor_crud.get_doctor(self.db, doctor_id) is None:
            raise EntityNotFoundError("Doctor", doctor_id)

    async def create_schedule(self, data: ScheduleIn) -> ScheduleOut:
        logger.info(
            f"Creating schedule for doctor {data.doctor_id}: {data.day_of_week.value} "
            f"{data.start_time}-{data.end_time}"
        )
        await self._require_doctor(data.doctor_id)

        now = utcnow()
        schedule = DoctorScheduleModel(**data.model_dump(), created_at=now, updated_at=now)
        self.db.add(schedule)
        await self.db.commit()

        await self.publisher.publish(self.topic, EntityName.DOCTOR_SCHEDULE, EventAction.CREATED, schedule.id)
        logger.info(f"Schedule created successfully with ID: {schedule.id}")
        return ScheduleOut.model_validate(schedule)

    async def update_schedule(self, schedule_id: int, data: ScheduleIn) -> Optional[ScheduleOut]:
        schedule = await crud.get_schedule(self.db, schedule_id)
        if schedule is None:
            logger.warning(f"Schedule with ID {schedule_id} not found for update")
            return None
        if data.doctor_id != schedule.doctor_id:
            await self._require_doctor(data.doctor_id)

        for field in MUTABLE_FIELDS:
            setattr(schedule, field, getattr(data, field))
        schedule.updated_at = utcnow()
        await self.db.commit()

        await self.publisher.publish(self.topic, EntityName.DOCTOR_SCHEDULE, EventAction.UPDATED, schedule.id)
        logger.info(f"Schedule updated successfully with ID: {schedule.id}")
        return ScheduleOut.model_validate(schedule)

    async def delete_schedule(self, schedule_id: int) -> bool:
        schedule = await crud.get_schedule(self.db, schedule_id)
        if schedule is None:
            logger.warning(f"Schedule with ID {schedule_id} not found for deletion")
            return False

        await self.db.delete(schedule)
        await self.db.commit()

        await self.publisher.publish(self.topic, EntityName.DOCTOR_SCHEDULE, EventAction.DELETED, schedule_id)
        logger.info(f"Schedule deleted successfully with ID: {schedule_id}")
        return True

    async def get_schedule(self, schedule_id: int) -> Optional[ScheduleOut]:
        schedule = await crud.get_schedule(self.db, schedule_id)
        return ScheduleOut.model_validate(schedule) if schedule else None

    async def get_doctor_schedules(
        self,
        doctor_id: int,
        day_of_week: Optional[DayOfWeek] = None,
        available_only: bool = False,
    ) -> List[ScheduleOut]:
        return _to_out_list(
            await crud.get_schedules_for_doctor(self.db, doctor_id, day_of_week, available_only)
        )
