# hms/db/models/doctor.py
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime, true
from sqlalchemy.orm import relationship
from hms.db.base import Base

class DoctorModel(Base):
    __tablename__ = "doctors"

    id         = Column(Integer, primary_key=True, index=True)
    user_id    = Column(Integer, nullable=False, index=True)

    first_name = Column(String(50), nullable=False)
    last_name  = Column(String(50), nullable=False)
    specialization = Column(String(100))
    department_id = Column(Integer, index=True)
    license_number = Column(String(50), nullable=False, unique=True)
    phone      = Column(String(20))
    address    = Column(Text)
    experience_years = Column(Integer)
    consultation_fee = Column(Numeric(10, 2))
    is_available = Column(Boolean, nullable=False, default=True, server_default=true())

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    schedules = relationship(
        "DoctorScheduleModel",
        back_populates="doctor",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<DoctorModel(id={self.id}, license_number={self.license_number})>"
