"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- Test database sessions (in-memory SQLite with SAVEPOINT support)
- Sample data factories for events, staff, categories, speakers
- A FastAPI test client bound to the test session
"""

import os
import pytest
from datetime import datetime
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ['EVENTDASH_DB_URL'] = 'sqlite:///:memory:'
os.environ['EVENTDASH_ENV'] = 'test'
os.environ.setdefault('EVENTDASH_LOG_LEVEL', 'WARNING')

from backend.src.db.database import configure_sqlite_engine
from backend.src.models import Base, BudgetCategory, Event, Speaker, Staff


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    configure_sqlite_engine(engine)

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# Sample Data Factories
# ============================================================================

@pytest.fixture
def sample_event(test_db_session):
    """Factory for creating sample Event models in the database."""
    def _create(
        title='Tech Summit 2026',
        start_date=datetime(2026, 5, 12),
        end_date=datetime(2026, 5, 14),
        location='Milan',
        status='planning',
    ):
        event = Event(
            title=title,
            start_date=start_date,
            end_date=end_date,
            location=location,
            status=status,
        )
        test_db_session.add(event)
        test_db_session.commit()
        test_db_session.refresh(event)
        return event
    return _create


@pytest.fixture
def sample_staff(test_db_session):
    """Factory for creating sample Staff models in the database."""
    def _create(
        first_name='Anna',
        last_name='Rossi',
        email=None,
        role='hostess',
        is_active=True,
    ):
        staff = Staff(
            first_name=first_name,
            last_name=last_name,
            email=email or f'{first_name.lower()}.{last_name.lower()}@example.com',
            role=role,
            is_active=is_active,
        )
        test_db_session.add(staff)
        test_db_session.commit()
        test_db_session.refresh(staff)
        return staff
    return _create


@pytest.fixture
def sample_category(test_db_session):
    """Factory for creating sample BudgetCategory models in the database."""
    def _create(
        event,
        name='Staff',
        allocated_amount=Decimal('5000.00'),
        color='#3B82F6',
    ):
        category = BudgetCategory(
            event_id=event.id,
            name=name,
            color=color,
            allocated_amount=allocated_amount,
            spent_amount=Decimal('0.00'),
        )
        test_db_session.add(category)
        test_db_session.commit()
        test_db_session.refresh(category)
        return category
    return _create


@pytest.fixture
def sample_speaker(test_db_session):
    """Factory for creating sample Speaker models in the database."""
    def _create(event, first_name='Ada', last_name='Lovelace'):
        speaker = Speaker(event_id=event.id, first_name=first_name, last_name=last_name)
        test_db_session.add(speaker)
        test_db_session.commit()
        test_db_session.refresh(speaker)
        return speaker
    return _create


# ============================================================================
# FastAPI Test Client Fixture
# ============================================================================

@pytest.fixture
def test_client(test_db_session):
    """Create a test client for FastAPI application."""
    from fastapi.testclient import TestClient
    from backend.src.db.database import get_db
    from backend.src.main import app

    def get_test_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = get_test_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


# ============================================================================
# API Record Fixtures (created through the endpoints)
# ============================================================================

@pytest.fixture
def api_event(test_client):
    """Create an event via the API and return its JSON."""
    def _create(title="Tech Summit 2026"):
        response = test_client.post("/api/events", json={
            "title": title,
            "start_date": "2026-05-12T00:00:00Z",
            "end_date": "2026-05-14T00:00:00Z",
            "location": "Milan",
        })
        assert response.status_code == 201
        return response.json()
    return _create


@pytest.fixture
def api_staff(test_client):
    """Create a staff member via the API and return its data payload."""
    def _create(first_name="Anna", last_name="Rossi"):
        response = test_client.post("/api/staff", json={
            "first_name": first_name,
            "last_name": last_name,
            "email": f"{first_name.lower()}@example.com",
            "role": "hostess",
        })
        assert response.status_code == 201
        return response.json()["data"]
    return _create


@pytest.fixture
def api_category(test_client):
    """Create a budget category via the API and return its data payload."""
    def _create(event_guid, name="Staff", allocated_amount=5000):
        response = test_client.post(
            f"/api/events/{event_guid}/budget/categories",
            json={"name": name, "allocated_amount": allocated_amount},
        )
        assert response.status_code == 201
        return response.json()["data"]
    return _create
