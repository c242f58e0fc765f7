import hashlib
import json
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from core.domain import BudgetSettings, Expense, SavingsGoal
from core.metrics import Metrics, compute_metrics
from core.rollover import compute_rollover


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the ledger handed to the advisory layer."""
    settings: BudgetSettings
    period_expenses: List[Expense]
    all_expenses: List[Expense]
    rollover: Decimal
    metrics: Metrics
    goal: Optional[SavingsGoal]
    now: datetime

    @property
    def recurring(self) -> List[Expense]:
        return [e for e in self.period_expenses if e.is_recurring]

    def fingerprint(self) -> str:
        payload = {
            'settings': self.settings.to_record(),
            'expenses': [e.to_record() for e in self.period_expenses],
            'rollover': str(self.rollover),
            'goal': self.goal.to_record() if self.goal else None,
        }
        raw = json.dumps(payload, sort_keys=True)
        return hashlib.sha256(raw.encode('utf-8')).hexdigest()


def build_snapshot(ledger) -> Snapshot:
    settings = ledger.get_settings()
    history = ledger.list_expenses()
    period_expenses = [e for e in history if e.period == settings.period]
    rollover = compute_rollover(settings.period, settings, history)
    return Snapshot(
        settings=settings,
        period_expenses=period_expenses,
        all_expenses=history,
        rollover=rollover,
        metrics=compute_metrics(settings, period_expenses, rollover, history=history),
        goal=ledger.get_goal(),
        now=ledger.clock(),
    )
