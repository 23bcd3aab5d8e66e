from typing import Annotated, Optional

from fastapi import Path
from pydantic import BaseModel

# Largest value a signed 64-bit INTEGER column can hold
MAX_RECORD_ID = 2**63 - 1

RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID, description="Record ID (positive 64-bit integer)")]


class MessageEnvelope(BaseModel):
    message: str


class ErrorEnvelope(BaseModel):
    error: str
    fields: Optional[dict[str, str]] = None
