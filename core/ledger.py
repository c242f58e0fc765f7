import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from core.domain import BudgetSettings, Expense, SavingsGoal, User
from core.periods import current_period, period_of, resolve_settings, utc_now

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    'USER': 'ft_user',
    'BUDGET': 'ft_budget',
    'EXPENSES': 'ft_expenses',
    'GOAL': 'ft_goal',
    'QUEST': 'ft_quest',
    'PERSONA': 'ft_persona',
    'ADVICE': 'ft_advice',
}


class LedgerStore:
    """Authoritative expense log plus the singleton records around it.

    The expense log only grows, except through ``delete_expense``. Input is
    not validated here: callers must pass a non-empty description, a
    positive amount and a frequency whenever ``is_recurring`` is set.
    Storage failures propagate as ``StorageError``.
    """

    def __init__(self, storage, clock=utc_now):
        self.storage = storage
        self.clock = clock

    # -- expenses ---------------------------------------------------------

    def add_expense(self, description: str, amount: Decimal, category: str,
                    is_recurring: bool = False, frequency: Optional[str] = None,
                    sentiment: Optional[str] = None, note: Optional[str] = None) -> Expense:
        expense = Expense(
            id=uuid.uuid4().hex,
            description=description,
            amount=amount,
            category=category,
            timestamp=self.clock().isoformat(),
            is_recurring=is_recurring,
            frequency=frequency if is_recurring else None,
            sentiment=sentiment,
            note=note,
        )
        records = self.storage.get(STORAGE_KEYS['EXPENSES']) or []
        records.append(expense.to_record())
        self.storage.set(STORAGE_KEYS['EXPENSES'], records)
        return expense

    def delete_expense(self, expense_id: str) -> None:
        records = self.storage.get(STORAGE_KEYS['EXPENSES']) or []
        for i, record in enumerate(records):
            if record.get('id') == expense_id:
                del records[i]
                self.storage.set(STORAGE_KEYS['EXPENSES'], records)
                return

    def list_expenses(self) -> List[Expense]:
        records = self.storage.get(STORAGE_KEYS['EXPENSES']) or []
        return [Expense.from_record(r) for r in records]

    def period_expenses(self, period: str) -> List[Expense]:
        return [e for e in self.list_expenses() if period_of(e.timestamp) == period]

    def periods_with_activity(self) -> List[str]:
        return sorted({e.period for e in self.list_expenses()}, reverse=True)

    # -- settings ---------------------------------------------------------

    def get_settings(self) -> BudgetSettings:
        now_period = current_period(self.clock())
        record = self.storage.get(STORAGE_KEYS['BUDGET'])
        if record is None:
            return BudgetSettings.default(now_period)

        settings, changed = resolve_settings(BudgetSettings.from_record(record), now_period)
        if changed:
            logger.info("Budget period moved to %s", now_period)
            self.save_settings(settings)
        return settings

    def save_settings(self, settings: BudgetSettings) -> None:
        self.storage.set(STORAGE_KEYS['BUDGET'], settings.to_record())

    def update_settings(self, **changes) -> BudgetSettings:
        if 'period' in changes:
            raise TypeError("the budget period is managed by the ledger")
        settings = self.get_settings().with_changes(**changes)
        self.save_settings(settings)
        return settings

    # -- goal -------------------------------------------------------------

    def get_goal(self) -> Optional[SavingsGoal]:
        record = self.storage.get(STORAGE_KEYS['GOAL'])
        return SavingsGoal.from_record(record) if record else None

    def save_goal(self, goal: SavingsGoal) -> None:
        self.storage.set(STORAGE_KEYS['GOAL'], goal.to_record())

    def clear_goal(self) -> None:
        self.storage.delete(STORAGE_KEYS['GOAL'])

    # -- display name -----------------------------------------------------

    def get_user(self) -> Optional[User]:
        record = self.storage.get(STORAGE_KEYS['USER'])
        return User.from_record(record) if record else None

    def register(self, username: str) -> User:
        user = User(id=uuid.uuid4().hex[:9], username=username)
        self.storage.set(STORAGE_KEYS['USER'], user.to_record())
        return user

    def logout(self) -> None:
        self.storage.delete(STORAGE_KEYS['USER'])

    # -- cached advisory records ------------------------------------------

    def get_quest(self) -> Optional[dict]:
        return self.storage.get(STORAGE_KEYS['QUEST'])

    def save_quest(self, quest: dict) -> None:
        self.storage.set(STORAGE_KEYS['QUEST'], quest)

    def get_persona(self) -> Optional[dict]:
        return self.storage.get(STORAGE_KEYS['PERSONA'])

    def save_persona(self, persona: dict) -> None:
        self.storage.set(STORAGE_KEYS['PERSONA'], persona)

    def get_advice(self) -> Optional[dict]:
        return self.storage.get(STORAGE_KEYS['ADVICE'])

    def save_advice(self, advice: dict) -> None:
        self.storage.set(STORAGE_KEYS['ADVICE'], advice)

    def reset(self) -> None:
        """Wipe every record except the display name."""
        for name, key in STORAGE_KEYS.items():
            if name != 'USER':
                self.storage.delete(key)
