from sqlalchemy import Table, Column, Integer, String, ForeignKey
from clinic_records.database import metadata


doctors = Table(
    "doctors",
    metadata,
    Column("doctor_id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
)
