from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Dict, Optional

CATEGORIES = ('Food', 'Transport', 'Utilities', 'Shopping', 'Entertainment', 'Health', 'Other')

CATEGORY_COLORS = {
    'Food': '#6366f1',
    'Transport': '#10b981',
    'Utilities': '#f59e0b',
    'Shopping': '#ef4444',
    'Entertainment': '#8b5cf6',
    'Health': '#ec4899',
    'Other': '#64748b',
}

FREQUENCIES = ('Weekly', 'Monthly', 'Yearly')
SENTIMENTS = ('Essential', 'Joyful', 'Neutral', 'Regret')


def to_decimal(value) -> Decimal:
    """Coerce a stored number or string into a Decimal (None reads as zero)."""
    if value is None or value == '':
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def category_color(category: str) -> Optional[str]:
    return CATEGORY_COLORS.get(category)


@dataclass(frozen=True)
class Expense:
    id: str
    description: str
    amount: Decimal
    category: str
    timestamp: str                      # ISO-8601, e.g. "2024-01-05T10:00:00+00:00"
    is_recurring: bool = False
    frequency: Optional[str] = None     # Weekly / Monthly / Yearly
    sentiment: Optional[str] = None
    note: Optional[str] = None

    @property
    def period(self) -> str:
        return self.timestamp[:7]

    def to_record(self) -> dict:
        record = {
            'id': self.id,
            'description': self.description,
            'amount': str(self.amount),
            'category': self.category,
            'date': self.timestamp,
            'isRecurring': self.is_recurring,
        }
        if self.frequency:
            record['frequency'] = self.frequency
        if self.sentiment:
            record['sentiment'] = self.sentiment
        if self.note:
            record['note'] = self.note
        return record

    @classmethod
    def from_record(cls, record: dict) -> 'Expense':
        return cls(
            id=record['id'],
            description=record.get('description', ''),
            amount=to_decimal(record.get('amount')),
            category=record.get('category', 'Other'),
            timestamp=record['date'],
            is_recurring=bool(record.get('isRecurring', False)),
            frequency=record.get('frequency'),
            sentiment=record.get('sentiment'),
            note=record.get('note'),
        )


@dataclass(frozen=True)
class BudgetSettings:
    amount: Decimal
    income: Decimal
    period: str
    rollover_enabled: bool = False
    category_limits: Dict[str, Decimal] = field(default_factory=dict)

    @classmethod
    def default(cls, period: str) -> 'BudgetSettings':
        return cls(amount=Decimal('0'), income=Decimal('0'), period=period)

    def with_changes(self, **changes) -> 'BudgetSettings':
        return replace(self, **changes)

    def to_record(self) -> dict:
        return {
            'amount': str(self.amount),
            'income': str(self.income),
            'period': self.period,
            'rolloverEnabled': self.rollover_enabled,
            'categoryLimits': {k: str(v) for k, v in self.category_limits.items()},
        }

    @classmethod
    def from_record(cls, record: dict) -> 'BudgetSettings':
        # older records stored the period under "month"
        period = record.get('period') or record.get('month')
        limits = record.get('categoryLimits') or {}
        return cls(
            amount=to_decimal(record.get('amount')),
            income=to_decimal(record.get('income')),
            period=period,
            rollover_enabled=bool(record.get('rolloverEnabled', False)),
            category_limits={k: to_decimal(v) for k, v in limits.items()},
        )


@dataclass(frozen=True)
class SavingsGoal:
    title: str
    target_amount: Decimal
    deadline: str

    def to_record(self) -> dict:
        return {'title': self.title, 'targetAmount': str(self.target_amount), 'deadline': self.deadline}

    @classmethod
    def from_record(cls, record: dict) -> 'SavingsGoal':
        return cls(
            title=record.get('title', ''),
            target_amount=to_decimal(record.get('targetAmount')),
            deadline=record.get('deadline', ''),
        )


@dataclass(frozen=True)
class User:
    id: str
    username: str

    def to_record(self) -> dict:
        return {'id': self.id, 'username': self.username}

    @classmethod
    def from_record(cls, record: dict) -> 'User':
        return cls(id=record['id'], username=record['username'])
