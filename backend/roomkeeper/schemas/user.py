"""User Schemas - Pydantic models documenting the participant removal API.

Invariants:
    - ErrorResponse mirrors RoomkeeperError.to_response() exactly
    - field is "" only for persistence-surfaced failures
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """One (field tag, message) pair."""
    field: str
    message: str


class ErrorBody(BaseModel):
    code: str
    message: str
    category: str
    severity: str
    timestamp: datetime | None = None
    details: list[ErrorDetail] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Envelope returned for every non-2xx response."""
    error: ErrorBody
