"""
Shared pytest fixtures for FreedomTrack tests.
"""

import pytest
import os
import sys
import json
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from advisor.gateway import AdvisorGateway
from core.ledger import LedgerStore, STORAGE_KEYS
from core.storage import MemoryStorage


class FrozenClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def set(self, year, month, day=15):
        self.now = datetime(year, month, day, 10, 0, tzinfo=timezone.utc)


SCRIPTED_RESPONSES = {
    "Rate this user's financial health": json.dumps(
        {"score": 72, "label": "Stable", "color": "#10b981", "advice": "Keep it up."}),
    "Detect unusual": json.dumps(
        [{"title": "Food spike", "message": "Food is running hot.", "severity": "medium"}]),
    "Project when this user reaches": json.dumps(
        {"summary": "On track.", "milestones": [{"title": "Emergency fund", "eta": "8 months", "confidence": "High"}]}),
    "savings challenge": json.dumps(
        {"title": "No-Spend Weekend", "description": "Skip takeout.", "target_saving": 40,
         "duration_days": 7, "difficulty": "Easy"}),
    "spending personality": json.dumps(
        {"name": "The Planner", "icon": "🧭", "description": "Careful and steady.",
         "strength": "Consistency", "watch_out": "Small treats add up"}),
    "Split the limit": json.dumps(
        {"suggested_limits": [{"category": "Food", "limit": 200}, {"category": "Transport", "limit": 100}],
         "rationale": "Food is your biggest line."}),
}


def make_response(text, candidates=None):
    return SimpleNamespace(text=text, candidates=candidates or [])


def make_genai_client(responses=None, default="You are doing great."):
    """A stand-in google.genai client whose replies depend on the prompt."""
    responses = SCRIPTED_RESPONSES if responses is None else responses

    async def generate_content(model, contents, config=None):
        prompt = contents if isinstance(contents, str) else ''
        for keyword, text in responses.items():
            if keyword in prompt:
                return make_response(text)
        return make_response(default)

    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=generate_content)
    return client


def seed_expense(storage, date, amount, category='Food', description='Item', **extra):
    """Append a raw expense record dated ``date`` (YYYY-MM-DD)."""
    records = storage.get(STORAGE_KEYS['EXPENSES']) or []
    record = {
        'id': f"seed{len(records) + 1}",
        'description': description,
        'amount': amount,
        'category': category,
        'date': f"{date}T09:30:00+00:00",
    }
    record.update(extra)
    records.append(record)
    storage.set(STORAGE_KEYS['EXPENSES'], records)
    return record['id']


class TestConfig:
    """Test configuration that bypasses MySQL and Gemini."""
    SECRET_KEY = 'test-secret-key-for-testing-only'
    TESTING = True
    WTF_CSRF_ENABLED = True
    SERVER_NAME = 'localhost'
    LOG_LEVEL = 'INFO'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    @staticmethod
    def init_db(app):
        """In-memory storage - no real MySQL needed."""
        app.storage = MemoryStorage()

    @staticmethod
    def init_advisor(app):
        app.advisor = AdvisorGateway(client=make_genai_client(), model='test-model')


def _create(csrf):
    from app import create_app
    application = create_app(config_class=TestConfig)
    application.config['WTF_CSRF_ENABLED'] = csrf
    application.clock = FrozenClock(datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc))
    return application


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def ledger(storage, clock):
    return LedgerStore(storage, clock=clock)


@pytest.fixture
def app():
    """Create application for testing."""
    yield _create(csrf=True)


@pytest.fixture
def app_no_csrf():
    """Create application for testing without CSRF protection."""
    yield _create(csrf=False)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def client_no_csrf(app_no_csrf):
    """Create test client without CSRF."""
    return app_no_csrf.test_client()


def app_ledger(app):
    return LedgerStore(app.storage, clock=app.clock)


def login_session(app, user_name='Test User'):
    """Helper to register a display name so protected routes open up."""
    return app_ledger(app).register(user_name)


@pytest.fixture
def logged_in_client(client_no_csrf, app_no_csrf):
    """Client with a registered display name and CSRF disabled."""
    login_session(app_no_csrf)
    return client_no_csrf
