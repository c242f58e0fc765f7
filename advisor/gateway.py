"""
Gemini-backed advisory gateway.

Every feature is a coroutine that never raises: network errors, timeouts and
malformed payloads are logged and replaced by a static fallback. Nothing is
retried. Accounting never depends on anything returned from here.
"""

import asyncio
import logging
from typing import List, Optional

from google import genai
from google.genai import types
from pydantic import TypeAdapter

from advisor import prompts
from advisor.schemas import (
    AdviceBundle, CategoryOptimization, ChatMessage, FreedomProjection, SavingsLink,
    SavingsQuest, SavingsTip, SpendingAlert, SpendingPersona, WealthScore,
)
from core.domain import CATEGORIES

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'gemini-3-flash-preview'

FALLBACK_INSIGHT = "Keep tracking to see your progress grow!"
EMPTY_INSIGHT = "You're building a great foundation for your finances!"
FALLBACK_SUBSCRIPTIONS = "No recurring expenses to audit yet."
FALLBACK_FORECAST = "Not enough signal for a forecast yet. Keep logging expenses."
FALLBACK_VALUE_AUDIT = "Add sentiments to unlock."
FALLBACK_GOAL_STRATEGY = "Add a goal to see your daily safe spending strategy."
FALLBACK_CHAT = "Sorry, I can't reach my brain right now. Please try again in a moment."


class AdvisorUnavailable(Exception):
    """No language model client is configured."""


class AdvisorGateway:

    def __init__(self, client=None, model=DEFAULT_MODEL, timeout=30.0):
        self.client = client
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_api_key(cls, api_key, model=DEFAULT_MODEL, timeout=30.0):
        client = genai.Client(api_key=api_key) if api_key else None
        return cls(client=client, model=model, timeout=timeout)

    async def _generate(self, contents, config=None):
        if self.client is None:
            raise AdvisorUnavailable("GEMINI_API_KEY is not set")
        return await asyncio.wait_for(
            self.client.aio.models.generate_content(model=self.model, contents=contents, config=config),
            timeout=self.timeout,
        )

    async def _text(self, feature, contents, fallback, empty=None, config=None) -> str:
        try:
            response = await self._generate(contents, config)
        except Exception as exc:
            logger.warning("Advisor %s failed: %s", feature, exc)
            return fallback
        return response.text or (empty or fallback)

    async def _structured(self, feature, prompt, schema, fallback):
        config = types.GenerateContentConfig(response_mime_type='application/json')
        try:
            response = await self._generate(prompt, config)
            return TypeAdapter(schema).validate_json(response.text or '')
        except Exception as exc:
            logger.warning("Advisor %s failed: %s", feature, exc)
            return fallback

    # -- features ---------------------------------------------------------

    async def insight(self, snapshot) -> str:
        return await self._text('insight', prompts.insight(snapshot), FALLBACK_INSIGHT, empty=EMPTY_INSIGHT)

    async def subscription_audit(self, snapshot) -> str:
        if not snapshot.recurring:
            return FALLBACK_SUBSCRIPTIONS
        return await self._text('subscription_audit', prompts.subscription_audit(snapshot), FALLBACK_SUBSCRIPTIONS)

    async def forecast(self, snapshot) -> str:
        if not snapshot.period_expenses:
            return FALLBACK_FORECAST
        return await self._text('forecast', prompts.forecast(snapshot), FALLBACK_FORECAST)

    async def wealth_score(self, snapshot) -> Optional[WealthScore]:
        return await self._structured('wealth_score', prompts.wealth_score(snapshot), WealthScore, None)

    async def anomalies(self, snapshot) -> List[SpendingAlert]:
        if not snapshot.period_expenses:
            return []
        return await self._structured('anomalies', prompts.anomalies(snapshot), List[SpendingAlert], [])

    async def freedom_horizon(self, snapshot) -> Optional[FreedomProjection]:
        return await self._structured('freedom_horizon', prompts.freedom_horizon(snapshot), FreedomProjection, None)

    async def value_audit(self, snapshot) -> str:
        if not any(e.sentiment for e in snapshot.period_expenses):
            return FALLBACK_VALUE_AUDIT
        return await self._text('value_audit', prompts.value_audit(snapshot), FALLBACK_VALUE_AUDIT)

    async def savings_quest(self, snapshot) -> Optional[SavingsQuest]:
        if not snapshot.period_expenses:
            return None
        quest = await self._structured('savings_quest', prompts.savings_quest(snapshot), SavingsQuest, None)
        # a freshly generated quest is never already accepted
        return quest.model_copy(update={'status': 'Available'}) if quest else None

    async def persona(self, snapshot) -> Optional[SpendingPersona]:
        if not snapshot.period_expenses:
            return None
        return await self._structured('persona', prompts.persona(snapshot), SpendingPersona, None)

    async def goal_strategy(self, snapshot) -> str:
        if snapshot.goal is None:
            return FALLBACK_GOAL_STRATEGY
        return await self._text('goal_strategy', prompts.goal_strategy(snapshot), FALLBACK_GOAL_STRATEGY)

    async def category_optimization(self, snapshot) -> Optional[CategoryOptimization]:
        return await self._structured(
            'category_optimization', prompts.category_optimization(snapshot, CATEGORIES),
            CategoryOptimization, None,
        )

    async def market_savings(self, snapshot) -> Optional[SavingsTip]:
        totals = snapshot.metrics.category_totals
        if not totals:
            return None
        top_category = max(totals.items(), key=lambda item: item[1])[0]
        config = types.GenerateContentConfig(tools=[types.Tool(google_search=types.GoogleSearch())])
        try:
            response = await self._generate(prompts.market_savings(top_category), config)
        except Exception as exc:
            logger.warning("Advisor market_savings failed: %s", exc)
            return None

        links = []
        candidates = response.candidates or []
        metadata = candidates[0].grounding_metadata if candidates else None
        for chunk in (metadata.grounding_chunks or []) if metadata else []:
            if chunk.web:
                links.append(SavingsLink(title=chunk.web.title or chunk.web.uri, uri=chunk.web.uri))
        return SavingsTip(text=response.text or '', links=links)

    async def chat(self, history: List[ChatMessage], snapshot) -> str:
        contents = [types.Content(role=m.role, parts=[types.Part(text=m.text)]) for m in history]
        config = types.GenerateContentConfig(system_instruction=prompts.chat_instruction(snapshot))
        return await self._text('chat', contents, FALLBACK_CHAT, config=config)

    async def refresh(self, snapshot) -> AdviceBundle:
        """Fire every dashboard feature at once and bundle the results."""
        results = await asyncio.gather(
            self.insight(snapshot),
            self.subscription_audit(snapshot),
            self.forecast(snapshot),
            self.wealth_score(snapshot),
            self.anomalies(snapshot),
            self.freedom_horizon(snapshot),
            self.value_audit(snapshot),
            self.savings_quest(snapshot),
            self.persona(snapshot),
        )
        strategy = await self.goal_strategy(snapshot) if snapshot.goal else None

        return AdviceBundle(
            fingerprint=snapshot.fingerprint(),
            insight=results[0],
            subscription_audit=results[1],
            forecast=results[2],
            wealth_score=results[3],
            alerts=results[4],
            freedom_projection=results[5],
            value_audit=results[6],
            quest=results[7],
            persona=results[8],
            goal_strategy=strategy,
        )
