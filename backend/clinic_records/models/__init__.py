from clinic_records.models.user import users
from clinic_records.models.doctor import doctors
from clinic_records.models.patient import patients
from clinic_records.models.medication import medications

__all__ = ["users", "doctors", "patients", "medications"]
