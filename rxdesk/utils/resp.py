# FILE: rxdesk/utils/resp.py
from __future__ import annotations

from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from rxdesk.schemas.common import ApiResponse, ApiError


def err(msg: str, status_code: int = 400) -> JSONResponse:
    payload = ApiResponse(status=False, error=ApiError(msg=msg))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))
