"""
Common Pydantic schemas
"""

from typing import Any, Literal, Optional
from pydantic import BaseModel

ProvisionMode = Literal["none", "all", "special_deal", "selected"]
GuestSide = Literal["bride", "groom", "mutual"]
RsvpStatus = Literal["pending", "confirmed", "declined"]
ArrangementPreference = Literal["provided", "self_managed", "special_arrangement"]
TravelMode = Literal["air", "train", "bus", "car", "other"]

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None

# Style values are written into a <style> block as-is
CSS_COLOR_PATTERN = r"^(#[0-9A-Fa-f]{3,8}|[A-Za-z]{3,20})$"
CSS_SIZE_PATTERN = r"^\d+(\.\d+)?(px|pt|em|rem|%)$"
CSS_FONT_PATTERN = r"^[A-Za-z0-9 ,'\"-]+$"

def reject_null(value: Any) -> Any:
    """For partial updates: a field may be left out but not set to null"""
    if value is None:
        raise ValueError("may be omitted but cannot be null")
    return value

def check_custom_css(value: Optional[str]) -> Optional[str]:
    if value is not None and "</" in value:
        raise ValueError("Custom CSS cannot contain closing tags")
    return value
