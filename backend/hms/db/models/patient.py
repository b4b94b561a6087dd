# hms/db/models/patient.py
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum
from hms.config.constants import Gender
from hms.db.base import Base

class PatientModel(Base):
    __tablename__ = "patients"

    id         = Column(Integer, primary_key=True, index=True)
    # account in the external user service
    user_id    = Column(Integer, nullable=False, unique=True)

    first_name = Column(String(50), nullable=False)
    last_name  = Column(String(50), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender     = Column(Enum(Gender, name="gender", native_enum=False, length=10))
    phone      = Column(String(20), unique=True)
    address    = Column(Text)
    emergency_contact = Column(String(20))
    blood_group = Column(String(5))
    allergies  = Column(Text)
    medical_history = Column(Text)
    insurance_provider = Column(String(100))
    insurance_number = Column(String(50), unique=True)

    # naive UTC, assigned by the service layer
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<PatientModel(id={self.id}, user_id={self.user_id}, name={self.first_name} {self.last_name})>"
