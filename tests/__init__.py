"""
FreedomTrack Test Suite

This package contains tests for the budgeting dashboard:

- test_periods.py: YYYY-MM arithmetic and period transitions
- test_rollover.py: Carry-over of unspent budget between months
- test_metrics.py: Derived dashboard figures (totals, trend, recurring cost)
- test_ledger.py: Ledger store over in-memory storage
- test_storage.py: MySQL key-value storage against a mocked connection
- test_advisor.py: Gemini gateway fallbacks, refresh and quest lifecycle
- test_auth.py / test_dashboard.py / test_expenses.py / test_settings.py /
  test_history.py / test_goal.py / test_insights.py: Flask routes
- test_security.py: CSRF, access control and storage failures

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_rollover.py

Run with verbose output:
    pytest tests/ -v
"""
