"""
Records store: the async data-access facade for users, doctors, patients
and prescriptions.

A ``RecordsStore`` owns one pooled ``AsyncEngine``. Build it explicitly
(``RecordsStore.from_settings()`` or ``RecordsStore(engine)``) and call
``close()`` on shutdown; there is no module-level pool.

Every statement binds its parameters. Doctor and patient creation write a
``users`` row and the linked role row inside a single transaction, so a
failed role insert leaves no orphaned user behind.

Failures are logged and re-raised as ``RecordsStoreError`` subclasses with
the driver exception chained. Missing rows come back as ``None`` or ``[]``.
``check_connectivity`` is the only operation that reports a boolean instead
of raising.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping, Optional, Union
from pydantic import BaseModel, ValidationError
from sqlalchemy import text, bindparam, Date, Integer, String
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError, InterfaceError, DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from clinic_records.accounts import User, Doctor, Patient
from clinic_records.config import Settings
from clinic_records.database import build_engine
from clinic_records.exceptions import (
    RecordsStoreError,
    InvalidRecordError,
    DatabaseUnavailableError,
    IntegrityViolationError,
    QueryError,
    MultipleRecordsFoundError,
)
from clinic_records.schemas.prescription import PrescriptionCreate

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], BaseModel]

PING = text("SELECT 1 FROM doctors LIMIT 1")

INSERT_USER = text("""
    INSERT INTO users (first_name, last_name, email, password)
    VALUES (:first_name, :last_name, :email, :password)
""")

INSERT_ROLE_USER = text("""
    INSERT INTO users (username, password, name)
    VALUES (:username, :password, :name)
""")

INSERT_DOCTOR = text("""
    INSERT INTO doctors (user_id, first_name, last_name, email)
    VALUES (:user_id, :first_name, :last_name, :email)
""")

INSERT_PATIENT = text("""
    INSERT INTO patients (user_id, first_name, last_name, email, primary_doctor_id)
    VALUES (:user_id, :first_name, :last_name, :email, :primary_doctor_id)
""")

SELECT_PATIENTS_BY_DOCTOR = text("SELECT * FROM patients WHERE primary_doctor_id = :doctor_id")
SELECT_DOCTORS = text("SELECT * FROM doctors")
SELECT_PATIENT = text("SELECT * FROM patients WHERE patient_id = :patient_id")
SELECT_PATIENT_BY_EMAIL = text("SELECT * FROM patients WHERE email = :email")
SELECT_DOCTOR = text("SELECT * FROM doctors WHERE doctor_id = :doctor_id")

INSERT_MEDICATION = text("""
    INSERT INTO medication
    (patient_id, medication_name, dosage, frequency, start_date, end_date)
    VALUES (:patient_id, :medication_name, :dosage, :frequency, :start_date, :end_date)
""").bindparams(
    bindparam("start_date", type_=Date),
    bindparam("end_date", type_=Date),
)

SELECT_MEDICATION = text("""
    SELECT medication_id, patient_id, medication_name, dosage, frequency, start_date, end_date
    FROM medication
    WHERE patient_id = :patient_id
    ORDER BY medication_id
""").columns(
    medication_id=Integer,
    patient_id=Integer,
    medication_name=String,
    dosage=String,
    frequency=String,
    start_date=Date,
    end_date=Date,
)


@dataclass(frozen=True)
class InsertResult:
    """Metadata of an insert: generated key, affected rows, linked user id."""
    insert_id: int
    row_count: int
    user_id: Optional[int] = None


def _as_mapping(data: Payload) -> Mapping[str, Any]:
    return data.model_dump() if isinstance(data, BaseModel) else data


def _account_fields(data: Mapping[str, Any]) -> dict:
    return {key: data.get(key) for key in ("first_name", "last_name", "email", "password")}


def _translate(exc: BaseException, operation: str) -> RecordsStoreError:
    """Map a driver/SQLAlchemy failure onto the store's error taxonomy."""
    if isinstance(exc, IntegrityError):
        return IntegrityViolationError(f"{operation}: constraint violated ({exc.orig})", operation=operation)
    if isinstance(exc, (OperationalError, InterfaceError, OSError)):
        return DatabaseUnavailableError(f"{operation}: database unavailable ({exc})", operation=operation)
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return DatabaseUnavailableError(f"{operation}: connection lost ({exc})", operation=operation)
    return QueryError(f"{operation}: query failed ({exc})", operation=operation)


class RecordsStore:
    """Pooled async facade over the users, doctors, patients and medication tables."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: Settings = None) -> "RecordsStore":
        """Build a store whose engine comes from ``settings`` (or the cached defaults)."""
        return cls(build_engine(settings))

    @property
    def engine(self) -> AsyncEngine:
        """The shared connection pool."""
        return self._engine

    async def close(self) -> None:
        """Dispose of the pool and its connections."""
        await self._engine.dispose()

    async def __aenter__(self) -> "RecordsStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncConnection]:
        """BEGIN on entry, COMMIT on clean exit, ROLLBACK if the block raises."""
        async with self._engine.begin() as conn:
            yield conn

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except RecordsStoreError as exc:
            logger.error("%s failed: %s", operation, exc)
            raise
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("%s failed", operation)
            raise _translate(exc, operation) from exc

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def ping(self) -> None:
        """Run a trivial query against ``doctors``; raise if it fails."""
        async with self._guard("ping"):
            async with self._engine.connect() as conn:
                await conn.execute(PING)

    async def check_connectivity(self) -> bool:
        """True if the database answers ``ping``; False otherwise. Never raises."""
        try:
            await self.ping()
        except Exception:
            logger.exception("Database connection failed")
            return False
        logger.info("Database connection successful")
        return True

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def create_user(self, user_data: Payload) -> InsertResult:
        """Hash the password and insert one users row."""
        async with self._guard("create_user"):
            user = await User.create(**_account_fields(_as_mapping(user_data)))
            async with self.transaction() as conn:
                result = await conn.execute(INSERT_USER, {
                    "first_name": user.first_name,
                    "last_name": user.last_name,
                    "email": user.email,
                    "password": user.password,
                })
            return InsertResult(insert_id=result.lastrowid, row_count=result.rowcount)

    async def create_doctor(self, doctor_data: Payload) -> InsertResult:
        """Insert a users login row and the linked doctors row in one transaction."""
        async with self._guard("create_doctor"):
            doctor = await Doctor.create(**_account_fields(_as_mapping(doctor_data)))
            async with self.transaction() as conn:
                user_id = await self._insert_role_user(conn, doctor)
                result = await conn.execute(INSERT_DOCTOR, {
                    "user_id": user_id,
                    "first_name": doctor.first_name,
                    "last_name": doctor.last_name,
                    "email": doctor.email,
                })
            return InsertResult(insert_id=result.lastrowid, row_count=result.rowcount, user_id=user_id)

    async def create_patient(self, patient_data: Payload) -> InsertResult:
        """Insert a users login row and the linked patients row in one transaction."""
        patient_data = _as_mapping(patient_data)
        async with self._guard("create_patient"):
            patient = await Patient.create(**_account_fields(patient_data))
            async with self.transaction() as conn:
                user_id = await self._insert_role_user(conn, patient)
                result = await conn.execute(INSERT_PATIENT, {
                    "user_id": user_id,
                    "first_name": patient.first_name,
                    "last_name": patient.last_name,
                    "email": patient.email,
                    "primary_doctor_id": patient_data.get("primary_doctor_id"),
                })
            return InsertResult(insert_id=result.lastrowid, row_count=result.rowcount, user_id=user_id)

    async def _insert_role_user(self, conn: AsyncConnection, account: User) -> int:
        # Role accounts log in with their email
        result = await conn.execute(INSERT_ROLE_USER, {
            "username": account.email,
            "password": account.password,
            "name": account.display_name,
        })
        return result.lastrowid

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def _fetch_all(self, stmt, params: dict, operation: str) -> list[dict]:
        async with self._guard(operation):
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt, params)
                return [dict(row) for row in result.mappings().all()]

    async def _fetch_one(self, stmt, table: str, key: str, value, operation: str) -> Optional[dict]:
        async with self._guard(operation):
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt, {key: value})
                rows = result.mappings().fetchmany(2)
            if len(rows) > 1:
                raise MultipleRecordsFoundError(table, key, value, operation=operation)
            return dict(rows[0]) if rows else None

    async def get_patient_list(self, doctor_id: int) -> list[dict]:
        """All patients whose primary doctor is ``doctor_id``."""
        return await self._fetch_all(SELECT_PATIENTS_BY_DOCTOR, {"doctor_id": doctor_id}, "get_patient_list")

    async def get_doctor_list(self) -> list[dict]:
        """Every doctors row."""
        return await self._fetch_all(SELECT_DOCTORS, {}, "get_doctor_list")

    async def get_patient(self, patient_id: int) -> Optional[dict]:
        """The patients row with ``patient_id``, or None."""
        return await self._fetch_one(SELECT_PATIENT, "patients", "patient_id", patient_id, "get_patient")

    async def get_patient_by_email(self, email: str) -> Optional[dict]:
        """The patients row whose email matches exactly, or None."""
        return await self._fetch_one(SELECT_PATIENT_BY_EMAIL, "patients", "email", email, "get_patient_by_email")

    async def get_doctor(self, doctor_id: int) -> Optional[dict]:
        """The doctors row with ``doctor_id``, or None."""
        return await self._fetch_one(SELECT_DOCTOR, "doctors", "doctor_id", doctor_id, "get_doctor")

    # ------------------------------------------------------------------
    # Prescriptions
    # ------------------------------------------------------------------

    async def prescribe(self, patient_id: int, prescription_data: Payload) -> InsertResult:
        """Insert one medication row for ``patient_id`` as given."""
        async with self._guard("prescribe"):
            try:
                prescription = PrescriptionCreate.model_validate(_as_mapping(prescription_data))
            except ValidationError as exc:
                raise InvalidRecordError(
                    "Invalid prescription data",
                    errors=exc.errors(include_url=False),
                    operation="prescribe",
                ) from exc

            async with self.transaction() as conn:
                result = await conn.execute(INSERT_MEDICATION, {
                    "patient_id": patient_id,
                    "medication_name": prescription.medication_name,
                    "dosage": prescription.dose,
                    "frequency": prescription.frequency,
                    "start_date": prescription.start_date,
                    "end_date": prescription.end_date,
                })
            return InsertResult(insert_id=result.lastrowid, row_count=result.rowcount)

    async def get_prescriptions(self, patient_id: int) -> list[dict]:
        """The patient's medication rows, oldest first."""
        return await self._fetch_all(SELECT_MEDICATION, {"patient_id": patient_id}, "get_prescriptions")
