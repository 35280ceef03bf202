"""
Test configuration and fixtures for the Ticketing Service.
Uses an in-memory SQLite database shared between test sessions and API requests.
"""

import os

# Configuration must be in place before the application is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("STRIPE_SECRET_KEY", None)
os.environ.pop("STRIPE_WEBHOOK_SECRET", None)
os.environ.pop("ZERO_TOKEN", None)

from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ticketing.api.dependencies import get_booking_service
from ticketing.db.database import get_db
from ticketing.main import app
from ticketing.models import (
    Base, Booking, Event, EventCategory, EventStatus, PaymentStatus, Ticket, User, UserType, utcnow
)
from ticketing.services.booking_service import BookingService
from ticketing.services.jwt_service import JWTService
from ticketing.services.password_manager import PasswordManager
from ticketing.services.payment_gateway import MockPaymentGateway

TEST_PASSWORD = "password123"

# Create test engine
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Create test session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

_password_hash = PasswordManager().hash_password(TEST_PASSWORD)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db_session():
    """Create a database session with fresh tables for each test."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mock_booking_service():
    """Booking service wired to the mock payment gateway."""
    return BookingService(payment_gateway=MockPaymentGateway())


@pytest.fixture
def client(db_session, mock_booking_service):
    """Create test client bound to the test database."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_booking_service] = lambda: mock_booking_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def token_service():
    """JWT service configured like the application under test."""
    service = JWTService()
    service.secret_key = os.environ["JWT_SECRET"]
    service.algorithm = "HS256"
    service.expiry_days = 7
    service._initialized = True
    return service


@pytest.fixture
def user_factory(db_session):
    """Create users with a known password."""
    counter = {"n": 0}

    def _create(user_type=UserType.ATTENDEE, **overrides):
        counter["n"] += 1
        fields = {
            "email": f"user{counter['n']}@example.com",
            "password_hash": _password_hash,
            "user_type": user_type,
            "first_name": "Test",
            "last_name": f"User{counter['n']}",
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        return user

    return _create


@pytest.fixture
def organizer(user_factory):
    return user_factory(UserType.ORGANIZER, first_name="Olivia", last_name="Organizer")


@pytest.fixture
def other_organizer(user_factory):
    return user_factory(UserType.ORGANIZER, first_name="Oscar", last_name="Other")


@pytest.fixture
def attendee(user_factory):
    return user_factory(UserType.ATTENDEE, first_name="Alice", last_name="Attendee")


@pytest.fixture
def second_attendee(user_factory):
    return user_factory(UserType.ATTENDEE, first_name="Bob", last_name="Booker")


@pytest.fixture
def auth_headers(token_service):
    """Build bearer headers for a user."""
    def _headers(user):
        return {"Authorization": f"Bearer {token_service.create_access_token(user)}"}
    return _headers


@pytest.fixture
def event_factory(db_session):
    """Create events, published and 30 days out by default."""
    def _create(organizer, **overrides):
        fields = {
            "organizer_id": organizer.id,
            "event_name": "Summer Music Festival",
            "description": "A full day of live music in the park.",
            "event_date": utcnow() + timedelta(days=30),
            "event_time": "18:00",
            "venue": "Hyde Park",
            "category": EventCategory.MUSIC,
            "capacity": 500,
            "status": EventStatus.PUBLISHED,
        }
        fields.update(overrides)
        created = Event(**fields)
        db_session.add(created)
        db_session.commit()
        return created

    return _create


@pytest.fixture
def ticket_factory(db_session):
    """Create ticket tiers."""
    def _create(event, **overrides):
        fields = {
            "event_id": event.id,
            "ticket_type": "General Admission",
            "price": Decimal("25.00"),
            "quantity_available": 100,
        }
        fields.update(overrides)
        ticket = Ticket(**fields)
        db_session.add(ticket)
        db_session.commit()
        return ticket

    return _create


@pytest.fixture
def booking_factory(db_session):
    """Create bookings directly, completed by default."""
    def _create(attendee, ticket, quantity=1, payment_status=PaymentStatus.COMPLETED, **overrides):
        fields = {
            "attendee_id": attendee.id,
            "event_id": ticket.event_id,
            "ticket_id": ticket.id,
            "quantity": quantity,
            "total_amount": Decimal(str(ticket.price)) * quantity,
            "payment_status": payment_status,
        }
        fields.update(overrides)
        booking = Booking(**fields)
        db_session.add(booking)
        if payment_status == PaymentStatus.COMPLETED:
            ticket.quantity_sold += quantity
        db_session.commit()
        return booking

    return _create


@pytest.fixture
def published_event(event_factory, organizer):
    return event_factory(organizer)


@pytest.fixture
def paid_ticket(ticket_factory, published_event):
    return ticket_factory(published_event, ticket_type="Standard", price=Decimal("25.00"), quantity_available=100)


@pytest.fixture
def free_ticket(ticket_factory, published_event):
    return ticket_factory(published_event, ticket_type="Community", price=Decimal("0.00"), quantity_available=50)
