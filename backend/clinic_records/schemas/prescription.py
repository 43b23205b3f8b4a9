from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Optional


class PrescriptionCreate(BaseModel):
    """Medication order as sent by the client, camelCase or snake_case."""

    model_config = ConfigDict(populate_by_name=True)

    medication_name: str = Field(alias="medicationName", min_length=1)
    dose: str = Field(min_length=1)
    frequency: str = Field(min_length=1)
    start_date: date = Field(alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
