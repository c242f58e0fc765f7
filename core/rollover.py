from decimal import Decimal
from typing import Iterable

from core.domain import BudgetSettings, Expense
from core.periods import previous_period


def limit_for_period(settings: BudgetSettings, period: str) -> Decimal:
    """Spending limit to apply to ``period``.

    No per-period history of limits is kept, so every period is measured
    against the current limit, including periods that are already closed.
    """
    return settings.amount


def compute_rollover(target_period: str, settings: BudgetSettings, all_expenses: Iterable[Expense]) -> Decimal:
    """Unspent surplus carried into ``target_period`` from the month before it.

    Zero when rollover is disabled; a deficit never carries over as a
    negative amount.
    """
    if not settings.rollover_enabled:
        return Decimal('0')

    previous = previous_period(target_period)
    spent = sum((e.amount for e in all_expenses if e.period == previous), Decimal('0'))
    surplus = limit_for_period(settings, previous) - spent
    return max(surplus, Decimal('0'))
