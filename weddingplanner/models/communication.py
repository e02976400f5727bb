"""
Email template, style and RSVP follow-up models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from weddingplanner.core.db import Base

class EmailTemplate(Base):
    __tablename__ = "email_templates"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(30), nullable=False)
    subject = Column(String(255), nullable=False)
    body_html = Column(Text, nullable=False)
    body_text = Column(Text)
    is_default = Column(Boolean, default=False)
    is_system = Column(Boolean, default=False)  # system templates can't be deleted
    created_at = Column(DateTime, default=datetime.utcnow)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    event = relationship("WeddingEvent", back_populates="email_templates")


class EmailStyle(Base):
    __tablename__ = "email_template_styles"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    header_logo = Column(String(500))
    header_background = Column(String(50), default="#FFFFFF")
    body_background = Column(String(50), default="#FFFFFF")
    text_color = Column(String(20), default="#000000")
    link_color = Column(String(20), default="#0000FF")
    button_color = Column(String(20), default="#4CAF50")
    button_text_color = Column(String(20), default="#FFFFFF")
    font_family = Column(String(100), default="Arial, sans-serif")
    font_size = Column(String(10), default="16px")
    border_color = Column(String(20), default="#DDDDDD")
    footer_text = Column(Text)
    footer_background = Column(String(50), default="#F5F5F5")
    css = Column(Text)
    is_default = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    event = relationship("WeddingEvent", back_populates="email_styles")


class RsvpFollowupTemplate(Base):
    __tablename__ = "rsvp_followup_templates"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("wedding_events.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    email_subject = Column(String(255))
    email_template = Column(Text)
    send_immediately = Column(Boolean, default=True)
    scheduled_date = Column(Date)
    scheduled_time = Column(String(10))
    enabled = Column(Boolean, default=True)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    event = relationship("WeddingEvent", back_populates="followup_templates")
    logs = relationship("RsvpFollowupLog", back_populates="template", cascade="all, delete-orphan")


class RsvpFollowupLog(Base):
    __tablename__ = "rsvp_followup_logs"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    template_id = Column(Integer, ForeignKey("rsvp_followup_templates.id"), nullable=False)
    channel = Column(String(20), nullable=False, default="email")
    status = Column(String(20), nullable=False)  # sent, failed, skipped, scheduled
    error_message = Column(Text)
    sent_at = Column(DateTime, default=datetime.utcnow)

    guest = relationship("Guest", back_populates="followup_logs")
    template = relationship("RsvpFollowupTemplate", back_populates="logs")
