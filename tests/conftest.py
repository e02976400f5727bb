"""
Shared fixtures: in-memory database, API client and sample data
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weddingplanner.core.db import Base, get_db
from weddingplanner.models import Ceremony, Guest, MealOption, User, WeddingEvent
from weddingplanner.services.auth_service import AuthService
from weddingplanner.utils.security import rate_limiter
from main import app

# Test database setup
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def client(db_session, monkeypatch):
    """API client bound to the test database"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    # the socket opens its own short-lived sessions
    monkeypatch.setattr("weddingplanner.api.ws.SessionLocal", TestingSessionLocal)
    rate_limiter.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def planner(db_session):
    user, _ = AuthService.register(
        db_session, username="planner", password="s3cret-pass", name="Pat Planner", email="pat@wedmail.org"
    )
    return user

@pytest.fixture
def auth_headers(db_session, planner):
    token = AuthService.issue_token(db_session, planner)
    return {"Authorization": f"Bearer {token.token}"}

def make_event(db, owner: User, **overrides) -> WeddingEvent:
    fields = dict(
        title="Asha & Rohan",
        couple_names="Asha & Rohan",
        bride_name="Asha",
        groom_name="Rohan",
        start_date=date(2030, 12, 10),
        end_date=date(2030, 12, 12),
        location="Udaipur",
        created_by=owner.id,
    )
    fields.update(overrides)
    event = WeddingEvent(**fields)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event

def make_guest(db, event: WeddingEvent, first_name="Meera", last_name="Iyer", **overrides) -> Guest:
    guest = Guest(event_id=event.id, first_name=first_name, last_name=last_name, **overrides)
    db.add(guest)
    db.commit()
    db.refresh(guest)
    return guest

@pytest.fixture
def sample_event(db_session, planner):
    """Event with one ceremony and two meal options"""
    event = make_event(db_session, planner)
    ceremony = Ceremony(
        event_id=event.id,
        name="Sangeet",
        date=date(2030, 12, 10),
        start_time="19:00",
        end_time="23:00",
        location="Lake Palace"
    )
    db_session.add(ceremony)
    db_session.flush()
    db_session.add_all([
        MealOption(event_id=event.id, ceremony_id=ceremony.id, name="Thali", is_vegetarian=True),
        MealOption(event_id=event.id, ceremony_id=ceremony.id, name="Grill"),
    ])
    db_session.commit()
    db_session.refresh(event)
    return event
