# hms/schemas/doctor.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Dict, Optional

from pydantic import Field, PlainSerializer

from hms.schemas.shared import CamelModel, Name, NonBlankStr, OptionalPhone

# JSON number on the wire, Decimal in Python
Money = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class DoctorIn(CamelModel):
    user_id: int
    first_name: Name
    last_name: Name
    specialization: Optional[Annotated[str, Field(max_length=100)]] = None
    department_id: Optional[int] = None
    license_number: Annotated[NonBlankStr, Field(max_length=50)]
    phone: OptionalPhone = None
    address: Optional[str] = None
    experience_years: Optional[Annotated[int, Field(ge=0, le=50)]] = None
    consultation_fee: Optional[Money] = None
    is_available: bool = True


class DoctorOut(DoctorIn):
    id: int
    created_at: datetime
    updated_at: datetime


class DoctorStatistics(CamelModel):
    total_doctors: int = 0
    available_doctors: int = 0
    doctors_by_specialization: Dict[str, int] = Field(default_factory=dict)
