from datetime import date, datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from hms.config.constants import Gender
from hms.config.settings import settings
from hms.core.events import EventPublisher
from hms.core.middleware import get_db, get_event_publisher
from hms.routes.common import page_request_params
from hms.routes.patients.services import PatientService
from hms.schemas.patient import PatientIn, PatientOut, PatientStatistics
from hms.schemas.shared import Page, PageRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/patients", tags=["patients"])


def get_patient_service(
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> PatientService:
    return PatientService(db, publisher, settings.patient_events_topic)


def _found(patient, detail: str = "Patient not found") -> PatientOut:
    if patient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return patient


@router.post("", response_model=PatientOut, status_code=status.HTTP_201_CREATED)
async def create_patient(payload: PatientIn, service: PatientService = Depends(get_patient_service)):
    """Create a new patient"""
    return await service.create_patient(payload)


@router.get("", response_model=Page[PatientOut])
async def get_all_patients(
    page_request: PageRequest = Depends(page_request_params),
    service: PatientService = Depends(get_patient_service),
):
    """Get all patients with pagination"""
    return await service.get_patients(page_request)


@router.get("/health", response_class=PlainTextResponse)
async def health():
    return "Patient Service is running"


@router.get("/statistics", response_model=PatientStatistics)
async def get_patient_statistics(service: PatientService = Depends(get_patient_service)):
    return await service.get_statistics()


@router.get("/search", response_model=List[PatientOut])
async def search_patients_by_name(name: str, service: PatientService = Depends(get_patient_service)):
    """Search patients by first or last name"""
    logger.debug(f"Searching patients by name: {name}")
    return await service.search_by_name(name)


@router.get("/user/{user_id}", response_model=PatientOut)
async def get_patient_by_user_id(user_id: int, service: PatientService = Depends(get_patient_service)):
    return _found(await service.get_patient_by_user_id(user_id))


@router.get("/phone/{phone}", response_model=PatientOut)
async def get_patient_by_phone(phone: str, service: PatientService = Depends(get_patient_service)):
    return _found(await service.get_patient_by_phone(phone))


@router.get("/blood-group/{blood_group}", response_model=List[PatientOut])
async def get_patients_by_blood_group(blood_group: str, service: PatientService = Depends(get_patient_service)):
    return await service.get_patients_by_blood_group(blood_group)


@router.get("/gender/{gender}", response_model=List[PatientOut])
async def get_patients_by_gender(gender: Gender, service: PatientService = Depends(get_patient_service)):
    return await service.get_patients_by_gender(gender)


@router.get("/insurance-provider/{provider}", response_model=List[PatientOut])
async def get_patients_by_insurance_provider(provider: str, service: PatientService = Depends(get_patient_service)):
    return await service.get_patients_by_insurance_provider(provider)


@router.get("/insurance-number/{insurance_number}", response_model=PatientOut)
async def get_patient_by_insurance_number(
    insurance_number: str, service: PatientService = Depends(get_patient_service)
):
    return _found(await service.get_patient_by_insurance_number(insurance_number))


@router.get("/allergies", response_model=List[PatientOut])
async def get_patients_by_allergies(allergy: str, service: PatientService = Depends(get_patient_service)):
    """Patients whose allergies contain the given text"""
    return await service.get_patients_by_allergy(allergy)


@router.get("/medical-history", response_model=List[PatientOut])
async def get_patients_by_medical_history(condition: str, service: PatientService = Depends(get_patient_service)):
    """Patients whose medical history contains the given text"""
    return await service.get_patients_by_medical_history(condition)


@router.get("/created-date-range", response_model=List[PatientOut])
async def get_patients_by_created_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    service: PatientService = Depends(get_patient_service),
):
    return await service.get_patients_by_created_date_range(start_date, end_date)


@router.get("/birth-year/{year}", response_model=List[PatientOut])
async def get_patients_by_birth_year(year: int, service: PatientService = Depends(get_patient_service)):
    return await service.get_patients_by_birth_year(year)


@router.get("/birth-date-range", response_model=List[PatientOut])
async def get_patients_by_birth_date_range(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    service: PatientService = Depends(get_patient_service),
):
    return await service.get_patients_by_birth_date_range(start_date, end_date)


@router.get("/exists/user/{user_id}", response_model=bool)
async def exists_by_user_id(user_id: int, service: PatientService = Depends(get_patient_service)):
    return await service.exists_by_user_id(user_id)


@router.get("/exists/phone/{phone}", response_model=bool)
async def exists_by_phone(phone: str, service: PatientService = Depends(get_patient_service)):
    return await service.exists_by_phone(phone)


@router.get("/exists/insurance-number/{insurance_number}", response_model=bool)
async def exists_by_insurance_number(insurance_number: str, service: PatientService = Depends(get_patient_service)):
    return await service.exists_by_insurance_number(insurance_number)


# declared last so the fixed paths above win
@router.get("/{patient_id}", response_model=PatientOut)
async def get_patient(patient_id: int, service: PatientService = Depends(get_patient_service)):
    """Get a specific patient by ID"""
    return _found(await service.get_patient(patient_id))


@router.put("/{patient_id}", response_model=PatientOut)
async def update_patient(
    patient_id: int,
    payload: PatientIn,
    service: PatientService = Depends(get_patient_service),
):
    """Replace every mutable field of an existing patient"""
    return _found(await service.update_patient(patient_id, payload))


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient(patient_id: int, service: PatientService = Depends(get_patient_service)):
    if not await service.delete_patient(patient_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
