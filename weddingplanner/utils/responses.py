"""
Response envelopes and HTTP error shortcuts shared by the routers
"""

from typing import Any, Optional
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from weddingplanner.schemas.common import StandardResponse, ErrorResponse

def _envelope(model, status_code: int) -> JSONResponse:
    return JSONResponse(content=jsonable_encoder(model), status_code=status_code)

def success_response(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    """Wrap a payload in the {success, message, data} envelope"""
    return _envelope(StandardResponse(success=True, message=message, data=data), status_code)

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Failure envelope carrying a machine readable error_code and optional per-field details"""
    return _envelope(
        ErrorResponse(message=message, error_code=error_code, details=details),
        status_code
    )

def conflict_response(message: str, error_code: str) -> JSONResponse:
    """409 for a request that clashes with the event's current state"""
    return error_response(message=message, error_code=error_code, status_code=status.HTTP_409_CONFLICT)

def not_found_error(resource: str = "Resource"):
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")

def unauthorized_error(message: str = "Not authenticated"):
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"}
    )

def forbidden_error(message: str = "You do not have access to this event"):
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)

def rate_limit_error():
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many requests, slow down and retry in a minute"
    )
