from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from hms.config.constants import DayOfWeek
from hms.config.settings import settings
from hms.core.events import EventPublisher
from hms.core.middleware import get_db, get_event_publisher
from hms.routes.schedules.services import ScheduleService
from hms.schemas.schedule import ScheduleIn, ScheduleOut

router = APIRouter(prefix="/api/v1/schedules", tags=["schedules"])


def get_schedule_service(
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> ScheduleService:
    # schedules belong to the doctor aggregate, so they share its topic
    return ScheduleService(db, publisher, settings.doctor_events_topic)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")


@router.post("", response_model=ScheduleOut, status_code=status.HTTP_201_CREATED)
async def create_schedule(payload: ScheduleIn, service: ScheduleService = Depends(get_schedule_service)):
    return await service.create_schedule(payload)


@router.get("/doctor/{doctor_id}", response_model=List[ScheduleOut])
async def get_doctor_schedules(doctor_id: int, service: ScheduleService = Depends(get_schedule_service)):
    return await service.get_doctor_schedules(doctor_id)


@router.get("/doctor/{doctor_id}/day/{day_of_week}", response_model=List[ScheduleOut])
async def get_doctor_schedules_for_day(
    doctor_id: int,
    day_of_week: DayOfWeek,
    service: ScheduleService = Depends(get_schedule_service),
):
    return await service.get_doctor_schedules(doctor_id, day_of_week=day_of_week)


@router.get("/doctor/{doctor_id}/available", response_model=List[ScheduleOut])
async def get_available_doctor_schedules(doctor_id: int, service: ScheduleService = Depends(get_schedule_service)):
    return await service.get_doctor_schedules(doctor_id, available_only=True)


@router.get("/{schedule_id}", response_model=ScheduleOut)
async def get_schedule(schedule_id: int, service: ScheduleService = Depends(get_schedule_service)):
    schedule = await service.get_schedule(schedule_id)
    if schedule is None:
        raise _not_found()
    return schedule


@router.put("/{schedule_id}", response_model=ScheduleOut)
async def update_schedule(
    schedule_id: int,
    payload: ScheduleIn,
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = await service.update_schedule(schedule_id, payload)
    if schedule is None:
        raise _not_found()
    return schedule


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(schedule_id: int, service: ScheduleService = Depends(get_schedule_service)):
    if not await service.delete_schedule(schedule_id):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
