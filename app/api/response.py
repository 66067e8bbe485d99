# FILE: app/api/response.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def err(
    msg: str = "Something went wrong",
    *,
    status_code: int = 400,
    code: Optional[str] = None,
    details: Any = None,
) -> JSONResponse:
    """
    Standard error wrapper:
    {
      "success": false,
      "message": "...",
      "code": "...",
      "details": ... (optional)
    }
    """
    payload: Dict[str, Any] = {
        "success": False,
        "message": msg,
        "code": code,
    }
    if details is not None:
        payload["details"] = details

    # jsonable_encoder converts datetime/date/Decimal/Enum etc. to JSON-safe types
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))
