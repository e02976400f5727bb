"""
Email template, style and follow-up schemas
"""

from datetime import date
from typing import Dict, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from .common import (
    CSS_COLOR_PATTERN, CSS_FONT_PATTERN, CSS_SIZE_PATTERN, check_custom_css, reject_null
)

TemplateCategory = Literal[
    "invitation", "rsvp", "reminder", "confirmation", "travel", "accommodation", "other"
]
FollowupType = Literal[
    "attendance_confirmed", "attendance_declined", "attendance_pending", "attendance_maybe"
]

class EmailTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: TemplateCategory
    subject: str = Field(min_length=1, max_length=255)
    body_html: str = Field(min_length=1)
    body_text: Optional[str] = None
    is_default: bool = False

class EmailTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[TemplateCategory] = None
    subject: Optional[str] = Field(None, min_length=1, max_length=255)
    body_html: Optional[str] = Field(None, min_length=1)
    body_text: Optional[str] = None
    is_default: Optional[bool] = None

    @field_validator("name", "category", "subject", "body_html", "is_default", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class EmailStyleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    header_logo: Optional[str] = None
    header_background: str = Field("#FFFFFF", pattern=CSS_COLOR_PATTERN)
    body_background: str = Field("#FFFFFF", pattern=CSS_COLOR_PATTERN)
    text_color: str = Field("#000000", pattern=CSS_COLOR_PATTERN)
    link_color: str = Field("#0000FF", pattern=CSS_COLOR_PATTERN)
    button_color: str = Field("#4CAF50", pattern=CSS_COLOR_PATTERN)
    button_text_color: str = Field("#FFFFFF", pattern=CSS_COLOR_PATTERN)
    font_family: str = Field("Arial, sans-serif", max_length=200, pattern=CSS_FONT_PATTERN)
    font_size: str = Field("16px", pattern=CSS_SIZE_PATTERN)
    border_color: str = Field("#DDDDDD", pattern=CSS_COLOR_PATTERN)
    footer_text: Optional[str] = None
    footer_background: str = Field("#F5F5F5", pattern=CSS_COLOR_PATTERN)
    css: Optional[str] = None
    is_default: bool = False

    @field_validator("css")
    @classmethod
    def check_css(cls, value):
        return check_custom_css(value)

class EmailStyleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    header_logo: Optional[str] = None
    header_background: Optional[str] = Field(None, pattern=CSS_COLOR_PATTERN)
    body_background: Optional[str] = Field(None, pattern=CSS_COLOR_PATTERN)
    text_color: Optional[str] = Field(None, pattern=CSS_COLOR_PATTERN)
    link_color: Optional[str] = Field(None, pattern=CSS_COLOR_PATTERN)
    button_color: Optional[str] = Field(None, pattern=CSS_COLOR_PATTERN)
    button_text_color: Optional[str] = Field(None, pattern=CSS_COLOR_PATTERN)
    font_family: Optional[str] = Field(None, max_length=200, pattern=CSS_FONT_PATTERN)
    font_size: Optional[str] = Field(None, pattern=CSS_SIZE_PATTERN)
    border_color: Optional[str] = Field(None, pattern=CSS_COLOR_PATTERN)
    footer_text: Optional[str] = None
    footer_background: Optional[str] = Field(None, pattern=CSS_COLOR_PATTERN)
    css: Optional[str] = None
    is_default: Optional[bool] = None

    @field_validator("css")
    @classmethod
    def check_css(cls, value):
        return check_custom_css(value)

    @field_validator(
        "name", "header_background", "body_background", "text_color", "link_color",
        "button_color", "button_text_color", "font_family", "font_size", "border_color",
        "footer_background", "is_default",
        mode="before"
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class TemplatePreviewRequest(BaseModel):
    guest_id: Optional[int] = None
    style_id: Optional[int] = None
    custom_variables: Dict[str, str] = {}

class FollowupTemplateCreate(BaseModel):
    type: FollowupType
    email_subject: Optional[str] = None
    email_template: Optional[str] = None
    send_immediately: bool = True
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    enabled: bool = True

class FollowupTemplateUpdate(BaseModel):
    email_subject: Optional[str] = None
    email_template: Optional[str] = None
    send_immediately: Optional[bool] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    enabled: Optional[bool] = None

    @field_validator("send_immediately", "enabled", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)
