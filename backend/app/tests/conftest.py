"""
Shared fixtures: in-memory SQLite database, an authenticated user and a test client.
"""
import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker
import app.models  # noqa: F401  (registers tables)
from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.trip import Trip
from app.models.user import User

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, username: str) -> int:
    user = User(username=username, email=f"{username}@example.com")
    db.add(user)
    db.commit()
    return user.id


def auth_headers_for(user_id: int) -> dict:
    token = create_access_token(data={"sub": str(user_id), "user_id": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_id(db):
    return make_user(db, "traveler")


@pytest.fixture
def auth_headers(user_id):
    return auth_headers_for(user_id)


@pytest.fixture
def new_user_headers(db):
    """Headers for another freshly created user."""
    def _new_user_headers(username: str) -> dict:
        return auth_headers_for(make_user(db, username))
    return _new_user_headers


@pytest.fixture
def make_trip(db, user_id):
    """Insert a trip directly and return its id."""
    def _make_trip(budget="1000", start_date=date(2025, 3, 1), end_date=date(2025, 3, 10), **fields):
        trip = Trip(
            user_id=fields.pop("owner_id", user_id),
            title=fields.pop("title", "Palawan"),
            destination=fields.pop("destination", "El Nido"),
            start_date=start_date,
            end_date=end_date,
            budget=Decimal(budget),
            companions=fields.pop("companions", 2),
            status=fields.pop("status", "upcoming"),
            **fields
        )
        db.add(trip)
        db.commit()
        return trip.id
    return _make_trip
