import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from core.domain import BudgetSettings, Expense, SavingsGoal
from core.periods import recent_periods

FREQUENCY_MULTIPLIERS = {'Weekly': 52, 'Monthly': 12, 'Yearly': 1}

ZERO = Decimal('0')


@dataclass(frozen=True)
class TrendPoint:
    period: str
    spent: Decimal
    budget: Decimal


@dataclass(frozen=True)
class CategoryUsage:
    category: str
    limit: Decimal
    spent: Decimal
    percent: float
    status: str         # ok / warning / over


@dataclass(frozen=True)
class Metrics:
    period: str
    total_spent: Decimal
    total_available: Decimal
    net_surplus: Decimal
    remaining_budget: Decimal
    savings_rate: float
    rollover: Decimal
    category_totals: Dict[str, Decimal]
    annualized_recurring_cost: Decimal
    trend: List[TrendPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'period': self.period,
            'total_spent': float(self.total_spent),
            'total_available': float(self.total_available),
            'net_surplus': float(self.net_surplus),
            'remaining_budget': float(self.remaining_budget),
            'savings_rate': round(self.savings_rate, 1),
            'rollover': float(self.rollover),
            'category_totals': {k: float(v) for k, v in self.category_totals.items()},
            'annualized_recurring_cost': float(self.annualized_recurring_cost),
            'trend': [
                {'period': p.period, 'spent': float(p.spent), 'budget': float(p.budget)}
                for p in self.trend
            ],
        }


def clamp(value, min_val=0, max_val=100):
    try:
        return max(min(float(value), max_val), min_val)
    except (ValueError, TypeError):
        return 0


def total_spent(expenses: Iterable[Expense]) -> Decimal:
    return sum((e.amount for e in expenses), ZERO)


def category_totals(expenses: Iterable[Expense]) -> Dict[str, Decimal]:
    totals = defaultdict(lambda: ZERO)
    for e in expenses:
        totals[e.category] += e.amount
    return dict(totals)


def index_by_period(expenses: Iterable[Expense]) -> Dict[str, List[Expense]]:
    """Group the expense log by YYYY-MM so repeated lookups skip full scans."""
    index = defaultdict(list)
    for e in expenses:
        index[e.period].append(e)
    return dict(index)


def trailing_trend(expenses: Iterable[Expense], anchor: str, n: int = 4,
                   budget: Decimal = ZERO) -> List[TrendPoint]:
    by_period = index_by_period(expenses)
    return [
        TrendPoint(period=p, spent=total_spent(by_period.get(p, [])), budget=budget)
        for p in recent_periods(anchor, n)
    ]


def annualized_recurring_cost(expenses: Iterable[Expense]) -> Decimal:
    total = ZERO
    for e in expenses:
        if not e.is_recurring:
            continue
        total += e.amount * FREQUENCY_MULTIPLIERS.get(e.frequency, 1)
    return total


def allocated_total(limits: Mapping[str, Decimal]) -> Decimal:
    return sum(limits.values(), ZERO)


def category_usage(limits: Mapping[str, Decimal], totals: Mapping[str, Decimal]) -> List[CategoryUsage]:
    usage = []
    for category, limit in limits.items():
        spent = totals.get(category, ZERO)
        percent = float(spent / limit * 100) if limit > 0 else 0.0
        if percent > 90:
            status = 'over'
        elif percent > 60:
            status = 'warning'
        else:
            status = 'ok'
        usage.append(CategoryUsage(category, limit, spent, percent, status))
    return usage


def month_end_projection(spent: Decimal, now: datetime) -> Decimal:
    """Extrapolate month-to-date spending at its current daily velocity."""
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    return (spent / now.day * days_in_month).quantize(Decimal('0.01'))


def goal_progress(goal: Optional[SavingsGoal], net_surplus: Decimal) -> Optional[float]:
    if goal is None or goal.target_amount <= 0:
        return None
    return clamp(net_surplus / goal.target_amount * 100)


def compute_metrics(settings: BudgetSettings, period_expenses: List[Expense], rollover: Decimal,
                    history: Optional[Iterable[Expense]] = None, trend_periods: int = 4) -> Metrics:
    """Derive the figures the dashboard and the advisor consume.

    ``period_expenses`` must already be scoped to ``settings.period``;
    ``history`` (the full log) only feeds the trailing trend and defaults to
    the period expenses themselves.
    """
    spent = total_spent(period_expenses)
    available = settings.amount + (rollover if settings.rollover_enabled else ZERO)
    net = settings.income - spent
    rate = float(net / settings.income * 100) if settings.income > 0 else 0.0

    return Metrics(
        period=settings.period,
        total_spent=spent,
        total_available=available,
        net_surplus=net,
        remaining_budget=available - spent,
        savings_rate=rate,
        rollover=rollover,
        category_totals=category_totals(period_expenses),
        annualized_recurring_cost=annualized_recurring_cost(period_expenses),
        trend=trailing_trend(period_expenses if history is None else history,
                             settings.period, trend_periods, settings.amount),
    )
