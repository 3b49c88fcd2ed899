import time
import uuid
from typing import Any

from fastapi import Request

from ..schemas import ApiResponse, ResponseMeta


def request_meta(request: Request) -> ResponseMeta:
    """Request id and elapsed milliseconds, from the values stamped by the timing middleware."""
    started = getattr(request.state, "started_at", None)
    elapsed = int((time.perf_counter() - started) * 1000) if started else 0
    request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
    return ResponseMeta(request_id=request_id, processing_time=elapsed)


def success(request: Request, data: Any) -> ApiResponse:
    return ApiResponse(success=True, data=data, meta=request_meta(request))
