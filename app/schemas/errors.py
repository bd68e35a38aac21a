"""Error envelope returned by every failed request."""

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """One field-level problem (validation failures only)."""

    field: str = Field(default="", description="Dotted location of the offending field")
    message: str = Field(..., description="What is wrong with it")


class ErrorResponse(BaseModel):
    """Body for 4xx responses: status, message, when, and optional field details."""

    status_code: int
    message: str
    timestamp: datetime
    errors: list[ErrorDetail] = Field(default_factory=list)
