"""
Error Response Models

Bodies returned by the global exception handlers. ``error_code`` is one of
``OAUTH_ERROR``, ``VALIDATION_ERROR``, ``INTERNAL_SERVER_ERROR`` or
``HTTP_<status>``.
"""

from datetime import datetime, timezone
from typing import Dict, Optional, Any, List, Sequence, Union

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    status: str = Field(
        default="error",
        description="Always 'error'"
    )
    message: str = Field(
        ...,
        description="Provider reason for OAUTH_ERROR, otherwise a generic message"
    )
    error_code: str = Field(
        ...,
        description="API error category"
    )
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="WeChat error (provider_error) or exception type"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC time the error was rendered"
    )


class ValidationErrorItem(BaseModel):
    """One rejected request field, e.g. a refresh request without refresh_token."""
    loc: List[Union[str, int]] = Field(
        ...,
        description="Path to the field, starting with body, query or path"
    )
    msg: str
    type: str

    @classmethod
    def from_errors(cls, errors: Sequence[Dict[str, Any]]) -> List["ValidationErrorItem"]:
        return [
            cls(loc=list(error["loc"]), msg=error["msg"], type=error["type"])
            for error in errors
        ]


class ValidationErrorResponse(ErrorResponse):
    validation_errors: List[ValidationErrorItem] = Field(
        ...,
        description="Rejected fields"
    )
