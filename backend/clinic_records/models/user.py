from sqlalchemy import Table, Column, Integer, String, DateTime
from sqlalchemy.sql import func
from clinic_records.database import metadata


users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("email", String(255), unique=True),
    Column("password", String(255), nullable=False),
    # Login name for role accounts; doctors and patients use their email
    Column("username", String(255), unique=True),
    Column("name", String(200)),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)
