"""ApiResponse envelope shared by every read endpoint.

    {"code": 0, "message": "success", "error_kind": null, "data": {...},
     "timestamp": "...", "request_id": "req_..."}

`code` is 0 on success and the AppError code otherwise; `error_kind` lets
clients branch on the class of failure without knowing every code.
"""

import uuid
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field

from src.rc_common.datetime_utils import utc_now
from src.rc_common.errors import AppError


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    error_kind: str | None = None
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=_new_request_id)

    def for_request(self, request: Request) -> "ApiResponse":
        """Carry the id assigned by the request log middleware, if any."""
        self.request_id = getattr(request.state, "request_id", self.request_id)
        return self


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(data=data)


def error_response(exc: AppError) -> ApiResponse:
    return ApiResponse(code=exc.code, message=exc.message, error_kind=exc.kind.value)
