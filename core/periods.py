from datetime import datetime, timezone
from typing import List, Tuple

from core.domain import BudgetSettings


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def current_period(now: datetime) -> str:
    return now.strftime("%Y-%m")


def period_of(timestamp: str) -> str:
    return timestamp[:7]


def shift_period(period: str, months: int) -> str:
    """Move a YYYY-MM period by ``months`` calendar months (negative goes back)."""
    year, month = (int(part) for part in period.split('-'))
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def previous_period(period: str) -> str:
    return shift_period(period, -1)


def recent_periods(anchor: str, n: int) -> List[str]:
    """The ``n`` months ending at ``anchor``, oldest first."""
    return [shift_period(anchor, -i) for i in range(n - 1, -1, -1)]


def resolve_settings(settings: BudgetSettings, now_period: str) -> Tuple[BudgetSettings, bool]:
    """Carry settings forward into ``now_period``.

    Returns the (possibly new) settings and whether a transition happened.
    Only the period changes; limit, income, rollover flag and category
    limits are kept as they are.
    """
    if settings.period == now_period:
        return settings, False
    return settings.with_changes(period=now_period), True
