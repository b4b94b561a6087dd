from enum import Enum

# Optional leading "+", first digit 1-9, at most 15 ASCII digits in total
PHONE_PATTERN = r"^\+?[1-9][0-9]{1,14}$"

PATIENT_SERVICE = "patient-service"
DOCTOR_SERVICE = "doctor-service"


class EntityName(str, Enum):
    PATIENT = "PATIENT"
    DOCTOR = "DOCTOR"
    DOCTOR_SCHEDULE = "DOCTOR_SCHEDULE"


class EventAction(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def ordinal(self) -> int:
        return list(DayOfWeek).index(self)
