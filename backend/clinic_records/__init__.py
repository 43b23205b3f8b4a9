from clinic_records.store import RecordsStore, InsertResult
from clinic_records.config import Settings, get_settings

__all__ = ["RecordsStore", "InsertResult", "Settings", "get_settings"]
