"""
Test suite for settings routes.
Tests cover budget, income, rollover, category limits and fresh start.
"""

import pytest
import os
import sys
from decimal import Decimal

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from core.domain import BudgetSettings
from tests.conftest import app_ledger, seed_expense


class TestSettingsAccess:
    """Test settings page access control."""

    def test_settings_requires_name(self, client):
        response = client.get('/settings/')
        assert response.status_code in (302, 308)
        assert '/auth/login' in response.headers.get('Location', '')

    def test_settings_defaults(self, logged_in_client):
        data = logged_in_client.get('/settings/').get_json()
        assert data == {
            'period': '2024-01',
            'amount': 0.0,
            'income': 0.0,
            'rollover_enabled': False,
            'rollover_amount': 0.0,
            'category_limits': {},
            'allocated_total': 0.0,
        }


class TestSettingsUpdate:
    """Test editing the budget settings."""

    def test_update_budget(self, logged_in_client, app_no_csrf):
        response = logged_in_client.post('/settings/budget', data={'amount': '500'})
        assert response.status_code == 302
        assert app_ledger(app_no_csrf).get_settings().amount == Decimal('500.00')

    def test_update_income(self, logged_in_client, app_no_csrf):
        logged_in_client.post('/settings/income', data={'income': '3000'})
        assert app_ledger(app_no_csrf).get_settings().income == Decimal('3000')

    def test_negative_budget_rejected(self, logged_in_client, app_no_csrf):
        response = logged_in_client.post('/settings/budget', data={'amount': '-1'})
        assert response.status_code == 400
        assert app_ledger(app_no_csrf).get_settings().amount == Decimal('0')

    def test_missing_income_rejected(self, logged_in_client):
        response = logged_in_client.post('/settings/income', data={})
        assert response.status_code == 400

    def test_edits_never_move_period(self, logged_in_client, app_no_csrf):
        """Editing income, limit or rollover keeps the active period."""
        logged_in_client.post('/settings/budget', data={'amount': '500'})
        logged_in_client.post('/settings/income', data={'income': '3000'})
        logged_in_client.post('/settings/rollover', data={'enabled': 'y'})
        assert app_ledger(app_no_csrf).get_settings().period == '2024-01'

    def test_toggle_rollover(self, logged_in_client, app_no_csrf):
        """Turning rollover on exposes last month's surplus."""
        logged_in_client.post('/settings/budget', data={'amount': '500'})
        seed_expense(app_no_csrf.storage, '2023-12-12', '420')

        logged_in_client.post('/settings/rollover', data={'enabled': 'y'})
        data = logged_in_client.get('/settings/').get_json()
        assert data['rollover_enabled'] is True
        assert data['rollover_amount'] == 80.0

        logged_in_client.post('/settings/rollover', data={})
        data = logged_in_client.get('/settings/').get_json()
        assert data['rollover_enabled'] is False
        assert data['rollover_amount'] == 0.0


class TestCategoryLimits:
    """Test per-category caps."""

    def test_save_category_limits(self, logged_in_client, app_no_csrf):
        logged_in_client.post('/settings/budget', data={'amount': '500'})
        response = logged_in_client.post('/settings/category-limits', data={
            'food': '200', 'transport': '100', 'health': ''})
        assert response.status_code == 302

        limits = app_ledger(app_no_csrf).get_settings().category_limits
        assert limits == {'Food': Decimal('200'), 'Transport': Decimal('100')}
        assert logged_in_client.get('/settings/').get_json()['allocated_total'] == 300.0

    def test_limits_over_budget_rejected(self, logged_in_client, app_no_csrf):
        """Caps adding up to more than the monthly limit are refused."""
        logged_in_client.post('/settings/budget', data={'amount': '250'})
        response = logged_in_client.post('/settings/category-limits', data={
            'food': '200', 'transport': '100'})
        assert response.status_code == 400
        assert 'limits' in response.get_json()['errors']
        assert app_ledger(app_no_csrf).get_settings().category_limits == {}

    def test_negative_limit_rejected(self, logged_in_client):
        logged_in_client.post('/settings/budget', data={'amount': '250'})
        response = logged_in_client.post('/settings/category-limits', data={'food': '-5'})
        assert response.status_code == 400


class TestFreshStart:
    """Test wiping the ledger."""

    def test_fresh_start_clears_ledger(self, logged_in_client, app_no_csrf):
        ledger = app_ledger(app_no_csrf)
        ledger.save_settings(BudgetSettings(amount=Decimal('500'), income=Decimal('1'), period='2024-01'))
        seed_expense(app_no_csrf.storage, '2024-01-03', '10')

        response = logged_in_client.post('/settings/fresh-start')
        assert response.status_code == 302
        assert ledger.list_expenses() == []
        assert ledger.get_settings().amount == Decimal('0')
        # the display name survives, so the user stays signed in
        assert logged_in_client.get('/settings/').status_code == 200
