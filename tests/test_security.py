"""
Security test suite for FreedomTrack.
Tests cover CSRF protection, access control and storage failures.
"""

import pytest
import os
import sys
from unittest.mock import MagicMock

import mysql.connector
from flask import session
from flask_wtf.csrf import generate_csrf

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from core.storage import MySQLStorage
from tests.conftest import app_ledger, login_session


# ─────────────────────────────────────────────────────────────
#  1. ACCESS CONTROL TESTS
# ─────────────────────────────────────────────────────────────

class TestAccessControl:
    """Test that protected routes require a display name."""

    PROTECTED_ROUTES = [
        '/',
        '/expenses/',
        '/expenses/subscriptions',
        '/settings/',
        '/history/',
        '/goal/',
        '/advisor/',
        '/advisor/chat',
        '/advisor/market-savings',
    ]

    @pytest.mark.parametrize("url", PROTECTED_ROUTES)
    def test_protected_routes_redirect_to_login(self, client, url):
        response = client.get(url)
        assert response.status_code in (302, 308), f"GET {url} should redirect"
        assert '/auth/login' in response.headers.get('Location', '')

    def test_login_page_accessible(self, client):
        assert client.get('/auth/login').status_code == 200


# ─────────────────────────────────────────────────────────────
#  2. CSRF PROTECTION TESTS
# ─────────────────────────────────────────────────────────────

class TestCSRFProtection:
    """Test that CSRF tokens are required for all POST endpoints."""

    POST_ROUTES = [
        '/auth/register',
        '/expenses/add',
        '/expenses/delete/abc',
        '/settings/budget',
        '/settings/income',
        '/settings/rollover',
        '/settings/category-limits',
        '/settings/fresh-start',
        '/goal/',
        '/advisor/refresh',
        '/advisor/chat',
    ]

    @pytest.mark.parametrize("url", POST_ROUTES)
    def test_post_without_csrf_rejected(self, client, app, url):
        login_session(app)
        response = client.post(url, data={'username': 'x', 'amount': '1'})
        assert response.status_code == 400

    def test_add_expense_with_csrf_token(self, client, app):
        """A request carrying a valid token goes through."""
        login_session(app)
        with app.test_request_context():
            token = generate_csrf()
            raw_token = session['csrf_token']
        with client.session_transaction() as sess:
            sess['csrf_token'] = raw_token

        response = client.post('/expenses/add', data={
            'description': 'Tea', 'amount': '3', 'category': 'Food', 'csrf_token': token})
        assert response.status_code == 302
        assert len(app_ledger(app).list_expenses()) == 1

    def test_rejected_post_changes_nothing(self, client, app):
        login_session(app)
        client.post('/expenses/add', data={'description': 'Tea', 'amount': '3', 'category': 'Food'})
        assert app_ledger(app).list_expenses() == []


# ─────────────────────────────────────────────────────────────
#  3. STORAGE FAILURE TESTS
# ─────────────────────────────────────────────────────────────

class TestStorageFailure:
    """Storage outages are surfaced, never hidden."""

    def test_storage_outage_returns_503(self, client_no_csrf, app_no_csrf):
        pool = MagicMock()
        pool.get_connection.side_effect = mysql.connector.errors.InterfaceError("server gone")
        app_no_csrf.storage = MySQLStorage(pool)

        response = client_no_csrf.get('/')
        assert response.status_code == 503
        assert response.get_json() == {"error": "storage unavailable"}
