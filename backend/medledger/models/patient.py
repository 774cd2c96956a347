from sqlalchemy import Column, String, JSON
from .base import Base, TimestampMixin


class PatientRecord(Base, TimestampMixin):
    __tablename__ = "patients"

    # Keyed by the patient's caller identity; one record per identity
    patient_id = Column(String(128), primary_key=True)
    # PHI fields - never logged
    history = Column(String(256), nullable=False)
    genetic_data = Column(String(256), nullable=False)
    # Ordered lists stored as JSON arrays; always reassigned, never mutated in place
    active_medications = Column(JSON, nullable=False, default=list)  # prescription IDs, capacity 10
    authorized_providers = Column(JSON, nullable=False, default=list)  # provider IDs, capacity 5
