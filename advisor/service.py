import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from advisor.schemas import AdviceBundle
from advisor.snapshot import build_snapshot

logger = logging.getLogger(__name__)


def should_refresh(snapshot) -> bool:
    s = snapshot.settings
    return not (s.income == 0 and s.amount == 0)


def refresh_advice(ledger, gateway) -> Optional[AdviceBundle]:
    """Run a full advisory refresh and persist what it produced.

    The stored quest is only replaced while it is still on offer; an accepted
    quest survives refreshes. A persona is kept until a new one arrives.
    """
    snapshot = build_snapshot(ledger)
    if not should_refresh(snapshot):
        return None

    bundle = asyncio.run(gateway.refresh(snapshot))

    quest = ledger.get_quest()
    if bundle.quest and (quest is None or quest.get('status') == 'Available'):
        ledger.save_quest(bundle.quest.model_dump())
    if bundle.persona:
        ledger.save_persona(bundle.persona.model_dump())
    ledger.save_advice(bundle.model_dump())
    return bundle


def current_advice(ledger, snapshot) -> Optional[AdviceBundle]:
    """The cached advice, unless the ledger has moved on since it was computed."""
    record = ledger.get_advice()
    if not record:
        return None
    try:
        bundle = AdviceBundle.model_validate(record)
    except ValidationError as exc:
        logger.warning("Discarding unreadable cached advice: %s", exc)
        return None
    if bundle.fingerprint != snapshot.fingerprint():
        return None
    return bundle


def accept_quest(ledger) -> Optional[dict]:
    quest = ledger.get_quest()
    if quest is None:
        return None
    quest['status'] = 'Active'
    ledger.save_quest(quest)
    return quest
