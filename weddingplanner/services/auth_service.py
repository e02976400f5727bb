"""
Local accounts and bearer tokens
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from weddingplanner.core.config import settings
from weddingplanner.models import AuthToken, User

logger = logging.getLogger(__name__)

class AuthService:
    """Registration, login and token lookup"""

    @staticmethod
    def register(
        db: Session,
        username: str,
        password: str,
        name: str,
        email: str,
        role: str = "staff"
    ) -> Tuple[Optional[User], Optional[str]]:
        if db.query(User).filter(User.username == username).first():
            return None, "Username already taken"

        user = User(
            username=username,
            password_hash=generate_password_hash(password),
            name=name,
            email=email,
            role=role
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Registered user {username} ({role})")
        return user, None

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> Optional[User]:
        user = db.query(User).filter(User.username == username).first()
        if not user or not check_password_hash(user.password_hash, password):
            logger.warning(f"Failed login for {username}")
            return None
        return user

    @staticmethod
    def issue_token(db: Session, user: User) -> AuthToken:
        token = AuthToken(
            user_id=user.id,
            token=secrets.token_urlsafe(32),
            expires_at=datetime.utcnow() + timedelta(hours=settings.AUTH_TOKEN_TTL_HOURS)
        )
        db.add(token)
        db.commit()
        db.refresh(token)
        return token

    @staticmethod
    def get_user_for_token(db: Session, token: str) -> Optional[User]:
        """Return the token's user, or None when unknown or expired"""
        record = db.query(AuthToken).filter(AuthToken.token == token).first()
        if not record:
            return None
        if record.expires_at < datetime.utcnow():
            db.delete(record)
            db.commit()
            return None
        return record.user

    @staticmethod
    def revoke_token(db: Session, token: str) -> bool:
        record = db.query(AuthToken).filter(AuthToken.token == token).first()
        if not record:
            return False
        db.delete(record)
        db.commit()
        return True

    @staticmethod
    def ensure_admin(db: Session) -> Optional[User]:
        """Create the configured admin account if it does not exist yet"""
        if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
            return None

        user = db.query(User).filter(User.username == settings.ADMIN_USERNAME).first()
        if user:
            return user

        user = User(
            username=settings.ADMIN_USERNAME,
            password_hash=generate_password_hash(settings.ADMIN_PASSWORD),
            name="Administrator",
            email=settings.ADMIN_EMAIL,
            role="admin"
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created admin account {user.username}")
        return user
