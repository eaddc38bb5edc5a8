# rxdesk/schemas/misc.py
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

MiscType = Literal["drug", "dose", "frequency", "day", "remarks", "test"]


class MiscIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    type: MiscType


class MiscOut(MiscIn):
    id: int

    model_config = ConfigDict(from_attributes=True)


class MiscBulkIn(BaseModel):
    items: List[MiscIn] = Field(..., min_length=1)


class MiscBulkRowError(BaseModel):
    row: int
    name: str
    reason: str


class MiscBulkOut(BaseModel):
    inserted: int
    skipped: List[MiscBulkRowError] = Field(default_factory=list)
