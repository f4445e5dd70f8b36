"""Pydantic schemas for the standardized API response envelope.

Success and error payloads are separate models so callers can never read
``data`` off an error or ``error`` off a success; ``success`` is the tag
that tells them apart on the wire.
"""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from portfolio_api.core.errors import ErrorCode

DataT = TypeVar("DataT")


class APIResponse(BaseModel, Generic[DataT]):
    """Successful API response."""

    success: Literal[True] = True
    data: DataT
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp.")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class APIError(BaseModel):
    """Failed API response.

    ``code`` always equals ``error``; both are kept for wire stability.
    ``details`` is omitted from the wire payload when not provided.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: Literal[False] = False
    error: ErrorCode
    message: str
    code: str
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp.")
    status_code: int = Field(..., alias="statusCode")
    details: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True)
        if self.details is None:
            payload.pop("details", None)
        return payload


APIResult = Union[APIResponse[Any], APIError]
