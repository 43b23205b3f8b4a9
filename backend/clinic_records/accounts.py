"""
Account factories: validate incoming account fields and hash the password
before anything reaches the database.

The store calls ``await <Role>.create(first_name, last_name, email, password)``
and persists the returned object's attributes verbatim, so ``password`` on a
created account is always the hash, never the submitted secret.
"""

import asyncio
from dataclasses import dataclass
from pydantic import ValidationError
from werkzeug.security import generate_password_hash, check_password_hash
from clinic_records.exceptions import InvalidRecordError
from clinic_records.schemas.account import AccountCreate


@dataclass
class User:
    first_name: str
    last_name: str
    email: str
    password: str                 # password hash
    role: str = "user"

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def verify_password(self, raw_password: str) -> bool:
        return check_password_hash(self.password, raw_password)

    @classmethod
    async def create(cls, first_name: str, last_name: str, email: str, password: str):
        try:
            data = AccountCreate(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password=password,
            )
        except ValidationError as exc:
            raise InvalidRecordError(
                f"Invalid {cls.__name__.lower()} data",
                errors=exc.errors(include_url=False),
                operation=f"{cls.__name__}.create",
            ) from exc

        # Hashing is CPU bound; keep it off the event loop
        hashed = await asyncio.to_thread(generate_password_hash, data.password)
        return cls(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            password=hashed,
        )


@dataclass
class Doctor(User):
    role: str = "doctor"


@dataclass
class Patient(User):
    role: str = "patient"
