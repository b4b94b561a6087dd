from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from hms.config.settings import settings
from hms.core.events import EventPublisher
from hms.core.middleware import get_db, get_event_publisher
from hms.routes.common import page_request_params
from hms.routes.doctors.services import DoctorService
from hms.schemas.doctor import DoctorIn, DoctorOut, DoctorStatistics
from hms.schemas.shared import Page, PageRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/doctors", tags=["doctors"])


def get_doctor_service(
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> DoctorService:
    return DoctorService(db, publisher, settings.doctor_events_topic)


def _found(doctor) -> DoctorOut:
    if doctor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Doctor not found")
    return doctor


@router.post("", response_model=DoctorOut, status_code=status.HTTP_201_CREATED)
async def create_doctor(payload: DoctorIn, service: DoctorService = Depends(get_doctor_service)):
    return await service.create_doctor(payload)


@router.get("", response_model=Page[DoctorOut])
async def get_all_doctors(
    page_request: PageRequest = Depends(page_request_params),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.get_doctors(page_request)


@router.get("/health", response_class=PlainTextResponse)
async def health():
    return "Doctor Service is running"


@router.get("/statistics", response_model=DoctorStatistics)
async def get_doctor_statistics(service: DoctorService = Depends(get_doctor_service)):
    return await service.get_statistics()


@router.get("/search", response_model=List[DoctorOut])
async def search_doctors_by_name(name: str, service: DoctorService = Depends(get_doctor_service)):
    logger.debug(f"Searching doctors by name: {name}")
    return await service.search_by_name(name)


@router.get("/available", response_model=List[DoctorOut])
async def get_available_doctors(service: DoctorService = Depends(get_doctor_service)):
    return await service.get_available_doctors()


@router.get("/user/{user_id}", response_model=DoctorOut)
async def get_doctor_by_user_id(user_id: int, service: DoctorService = Depends(get_doctor_service)):
    return _found(await service.get_doctor_by_user_id(user_id))


@router.get("/license/{license_number}", response_model=DoctorOut)
async def get_doctor_by_license_number(license_number: str, service: DoctorService = Depends(get_doctor_service)):
    return _found(await service.get_doctor_by_license_number(license_number))


@router.get("/specialization/{specialization}", response_model=List[DoctorOut])
async def get_doctors_by_specialization(specialization: str, service: DoctorService = Depends(get_doctor_service)):
    return await service.get_doctors_by_specialization(specialization)


@router.get("/department/{department_id}", response_model=List[DoctorOut])
async def get_doctors_by_department(department_id: int, service: DoctorService = Depends(get_doctor_service)):
    return await service.get_doctors_by_department(department_id)


@router.get("/experience-range", response_model=List[DoctorOut])
async def get_doctors_by_experience(
    min_years: int = Query(0, alias="minYears", ge=0),
    max_years: int = Query(50, alias="maxYears", le=50),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.get_doctors_by_experience(min_years, max_years)


@router.get("/exists/user/{user_id}", response_model=bool)
async def exists_by_user_id(user_id: int, service: DoctorService = Depends(get_doctor_service)):
    return await service.exists_by_user_id(user_id)


@router.get("/exists/license/{license_number}", response_model=bool)
async def exists_by_license_number(license_number: str, service: DoctorService = Depends(get_doctor_service)):
    return await service.exists_by_license_number(license_number)


@router.get("/{doctor_id}", response_model=DoctorOut)
async def get_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)):
    return _found(await service.get_doctor(doctor_id))


@router.put("/{doctor_id}", response_model=DoctorOut)
async def update_doctor(
    doctor_id: int,
    payload: DoctorIn,
    service: DoctorService = Depends(get_doctor_service),
):
    return _found(await service.update_doctor(doctor_id, payload))


@router.patch("/{doctor_id}/availability", response_model=DoctorOut)
async def set_doctor_availability(
    doctor_id: int,
    available: bool,
    service: DoctorService = Depends(get_doctor_service),
):
    return _found(await service.set_availability(doctor_id, available))


@router.delete("/{doctor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)):
    """Delete a doctor together with its schedules"""
    if not await service.delete_doctor(doctor_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Doctor not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
