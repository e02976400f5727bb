"""
Wedding Planner - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from weddingplanner import models  # noqa: F401 - registers tables on Base
from weddingplanner.core.config import settings
from weddingplanner.core.db import engine, Base, SessionLocal
from weddingplanner.api import (
    routes_accommodation, routes_auth, routes_events, routes_guests, routes_public,
    routes_rsvp, routes_templates, routes_transport, ws
)
from weddingplanner.services.auth_service import AuthService
from weddingplanner.utils.responses import error_response

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    429: "rate_limited",
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    db = SessionLocal()
    try:
        AuthService.ensure_admin(db)
    finally:
        db.close()

    yield
    logger.info("Application shutdown")

app = FastAPI(
    title="Wedding Planner",
    description="Backend for guest lists, RSVPs, accommodation, transport and guest email",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Raised HTTP errors use the same envelope as returned ones"""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    response = error_response(
        message=exc.detail if isinstance(exc.detail, str) else "Request failed",
        error_code=HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
        details=None if isinstance(exc.detail, str) else exc.detail,
        status_code=exc.status_code
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response

# Public and guest-facing endpoints
app.include_router(routes_public.router, prefix="/api", tags=["public"])
app.include_router(routes_auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(routes_rsvp.router, prefix="/api/rsvp", tags=["rsvp"])

# Planner endpoints, all scoped to one event
app.include_router(routes_events.router, prefix="/api/events", tags=["events"])
app.include_router(routes_guests.router, prefix="/api/events", tags=["guests"])
app.include_router(routes_rsvp.planner_router, prefix="/api/events", tags=["rsvp"])
app.include_router(routes_accommodation.router, prefix="/api/events", tags=["accommodation"])
app.include_router(routes_transport.router, prefix="/api/events", tags=["transport"])
app.include_router(routes_templates.router, prefix="/api/events", tags=["communication"])

app.include_router(ws.router, prefix="/ws", tags=["websocket"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=settings.LOG_LEVEL == "DEBUG")
