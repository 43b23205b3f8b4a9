from sqlalchemy import Table, Column, Integer, String, Date, ForeignKey
from clinic_records.database import metadata


medications = Table(
    "medication",
    metadata,
    Column("medication_id", Integer, primary_key=True),
    Column("patient_id", Integer, ForeignKey("patients.patient_id"), nullable=False, index=True),
    Column("medication_name", String(200), nullable=False),
    Column("dosage", String(100), nullable=False),
    Column("frequency", String(100), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date),
)
