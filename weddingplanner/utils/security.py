"""
Security utilities and authentication
"""

import time
from collections import defaultdict

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from weddingplanner.core.config import settings
from weddingplanner.core.db import get_db
from weddingplanner.models import User, WeddingEvent
from weddingplanner.services.auth_service import AuthService
from weddingplanner.utils.responses import (
    forbidden_error, not_found_error, rate_limit_error, unauthorized_error
)

# Simple in-memory rate limiter
rate_limiter = defaultdict(list)

security = HTTPBearer(auto_error=False)

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to a user"""
    if credentials is None:
        unauthorized_error("Not authenticated")
    user = AuthService.get_user_for_token(db, credentials.credentials)
    if user is None:
        unauthorized_error("Invalid or expired token")
    return user

def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        forbidden_error("Administrator access required")
    return user

def can_access_event(user: User, event: WeddingEvent) -> bool:
    return user.is_admin or event.created_by == user.id

def get_event_for_user(
    event_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> WeddingEvent:
    """Load an event from the path and check the caller may use it"""
    event = db.query(WeddingEvent).filter(WeddingEvent.id == event_id).first()
    if not event:
        not_found_error("Event")
    if not can_access_event(user, event):
        forbidden_error("You do not have access to this event")
    return event

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Clean old requests
    rate_limiter[client_ip] = [
        req_time for req_time in rate_limiter[client_ip]
        if req_time > minute_ago
    ]

    if len(rate_limiter[client_ip]) >= limit:
        return False

    rate_limiter[client_ip].append(current_time)
    return True

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    # Check for forwarded IP first (for reverse proxy setups)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"

def enforce_rate_limit(request: Request):
    """Dependency for public endpoints"""
    if not rate_limit_check(get_client_ip(request)):
        rate_limit_error()
