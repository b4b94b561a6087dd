from .patient import PatientModel
from .doctor import DoctorModel
from .doctor_schedule import DoctorScheduleModel

__all__ = ["PatientModel", "DoctorModel", "DoctorScheduleModel"]
