"""
Shared fixtures for the loyalty history tests.

Every test gets a fresh app backed by an in-memory SQLite database.
"""
import pytest

from loyalty_history import create_app
from loyalty_history.extensions import db
from loyalty_history.services.history_service import HistoryService


@pytest.fixture
def app():
    """Create test application."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def store(app):
    """The app's record store."""
    return app.extensions['record_store']


@pytest.fixture
def service(store):
    """History service bound to the test database."""
    return HistoryService(store)


@pytest.fixture
def sample_history(service):
    """
    Two point events and two transactions for user u1, one event for u2.

    Dates (newest first): t-2 (Jan 20), p-2 (Jan 15), t-1 (Jan 10), p-1 (Jan 5).
    """
    service.add_point_event({'id': 'p-1', 'userId': 'u1', 'points': 10, 'date': '2024-01-05T09:00:00'})
    service.add_point_event({'id': 'p-2', 'userId': 'u1', 'points': 25, 'date': '2024-01-15T18:30:00'})
    service.add_transaction({'userId': 'u1', 'description': 'Coffee', 'points': 5, 'date': '2024-01-10T12:00:00'})
    service.add_transaction({'userId': 'u1', 'description': 'T-shirt', 'points': 20, 'date': '2024-01-20T08:00:00'})
    service.add_point_event({'id': 'p-other', 'userId': 'u2', 'points': 99, 'date': '2024-01-12T10:00:00'})
    return service
