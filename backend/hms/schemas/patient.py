# hms/schemas/patient.py
from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import Field

from hms.config.constants import Gender
from hms.schemas.shared import CamelModel, Name, OptionalPhone


class PatientIn(CamelModel):
    """Body of POST / PUT /api/v1/patients. id and timestamps are never read from it."""
    user_id: int
    first_name: Name
    last_name: Name
    date_of_birth: date
    gender: Optional[Gender] = None
    phone: OptionalPhone = None
    address: Optional[str] = None
    emergency_contact: OptionalPhone = None
    blood_group: Optional[Annotated[str, Field(max_length=5)]] = None
    allergies: Optional[str] = None
    medical_history: Optional[str] = None
    insurance_provider: Optional[Annotated[str, Field(max_length=100)]] = None
    insurance_number: Optional[Annotated[str, Field(max_length=50)]] = None


class PatientOut(PatientIn):
    id: int
    created_at: datetime
    updated_at: datetime


class PatientStatistics(CamelModel):
    total_patients: int = 0
    male_patients: int = 0
    female_patients: int = 0
    other_gender_patients: int = 0
    patients_with_insurance: int = 0
    patients_with_allergies: int = 0
