"""Response envelope shared by every endpoint."""

import math
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total_pages: int = Field(..., alias="totalPages", ge=0)

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit))


class Envelope(BaseModel):
    """``{success, data?, message?, pagination?}``."""
    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    pagination: Optional[Pagination] = None

    def to_dict(self) -> dict:
        # Only the envelope keys are optional; payload dicts keep their nulls
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data
        if self.message is not None:
            out["message"] = self.message
        if self.pagination is not None:
            out["pagination"] = self.pagination.model_dump(by_alias=True)
        return out


def ok(data: Any = None, message: Optional[str] = None, pagination: Optional[Pagination] = None) -> dict:
    return Envelope(success=True, data=data, message=message, pagination=pagination).to_dict()


def fail(message: str) -> dict:
    return Envelope(success=False, message=message).to_dict()
