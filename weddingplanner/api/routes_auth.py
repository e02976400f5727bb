"""
Account routes - register, login, logout
"""

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from weddingplanner.core.db import get_db
from weddingplanner.models import User
from weddingplanner.schemas.auth import LoginRequest, RegisterRequest, UserResponse
from weddingplanner.services.auth_service import AuthService
from weddingplanner.utils.responses import conflict_response, success_response, unauthorized_error
from weddingplanner.utils.security import get_current_user, security

router = APIRouter()

@router.post("/register")
async def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Create a planner account"""
    user, error = AuthService.register(
        db,
        username=data.username,
        password=data.password,
        name=data.name,
        email=data.email,
        role=data.role
    )
    if error:
        return conflict_response(error, "username_taken")

    return success_response(
        message="Account created successfully",
        data=UserResponse.model_validate(user).model_dump(),
        status_code=201
    )

@router.post("/login")
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = AuthService.authenticate(db, data.username, data.password)
    if not user:
        unauthorized_error("Invalid username or password")

    token = AuthService.issue_token(db, user)
    return success_response(
        message="Logged in",
        data={
            "token": token.token,
            "token_type": "bearer",
            "expires_at": token.expires_at,
            "user": UserResponse.model_validate(user).model_dump()
        }
    )

@router.post("/logout")
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    AuthService.revoke_token(db, credentials.credentials)
    return success_response(message="Logged out")

@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return success_response(
        message="Current user",
        data=UserResponse.model_validate(user).model_dump()
    )
