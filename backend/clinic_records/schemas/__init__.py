from clinic_records.schemas.account import AccountCreate, PatientCreate
from clinic_records.schemas.prescription import PrescriptionCreate

__all__ = ["AccountCreate", "PatientCreate", "PrescriptionCreate"]
