from sqlalchemy import Table, Column, Integer, String, ForeignKey
from clinic_records.database import metadata


patients = Table(
    "patients",
    metadata,
    Column("patient_id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("primary_doctor_id", Integer, ForeignKey("doctors.doctor_id"), index=True),
)
