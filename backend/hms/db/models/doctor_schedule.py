# hms/db/models/doctor_schedule.py
from sqlalchemy import Column, Integer, Boolean, Time, DateTime, Enum, ForeignKey, true
from sqlalchemy.orm import relationship
from hms.config.constants import DayOfWeek
from hms.db.base import Base

class DoctorScheduleModel(Base):
    __tablename__ = "doctor_schedules"

    id          = Column(Integer, primary_key=True, index=True)
    doctor_id   = Column(Integer,
                         ForeignKey("doctors.id", ondelete="CASCADE"),
                         nullable=False,
                         index=True)
    day_of_week = Column(Enum(DayOfWeek, name="day_of_week", native_enum=False, length=10), nullable=False)
    start_time  = Column(Time, nullable=False)
    end_time    = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True, server_default=true())

    created_at  = Column(DateTime, nullable=False)
    updated_at  = Column(DateTime, nullable=False)

    doctor = relationship("DoctorModel", back_populates="schedules")
