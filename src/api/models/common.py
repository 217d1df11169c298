"""Shared API model helpers."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProblemDetail(BaseModel):
    """RFC 7807 error body.

    Error-specific extension members (retry_after_seconds, line_id, ...)
    are carried alongside the standard fields.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., description="URN identifying the error type")
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Explanation specific to this occurrence")
    instance: str | None = Field(default=None, description="Request URL")
