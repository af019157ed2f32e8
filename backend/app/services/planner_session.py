"""Planner session — one traveler's pass through the trip-building wizard."""

import logging
import uuid

from app.config import settings
from app.data.fallback_destinations import fallback_destinations
from app.schemas.accommodation import Accommodation, AccommodationSearchResult
from app.schemas.destination import CanonicalDestination, normalize
from app.schemas.travel import (
    AIResponse,
    SelectedAddOn,
    SelectedFlight,
    TravelContext,
    TravelContextPatch,
)
from app.services.accommodation_service import AccommodationService, accommodation_service
from app.services.aggregation_coordinator import AggregationCoordinator
from app.services.budget_filter import parse_price
from app.services.conversation_router import WELCOME_MESSAGE, ConversationRouter
from app.services.guidance import (
    accommodation_guide,
    advice_for,
    budget_guide,
    destination_guide,
    suggest_next_step,
    trip_totals,
)
from app.services.planning_state_machine import PlanningStateMachine, PlanningStep
from app.services.typed_reveal import TypedRevealEmitter

logger = logging.getLogger(__name__)


class PlannerSession:
    """
    Wires the wizard together: the travel context, the step machine, the
    destination chat and the guidance reveal.

    The context is only changed through ``on_update``; steps only move
    through ``on_complete``; ``on_ai_response`` records the latest advice.
    """

    def __init__(
        self,
        session_id: str | None = None,
        coordinator: AggregationCoordinator | None = None,
        accommodations: AccommodationService | None = None,
        reveal_tick_ms: int | None = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.context = TravelContext()
        self.machine = PlanningStateMachine()
        self.router = ConversationRouter(coordinator)
        self.guide = TypedRevealEmitter(reveal_tick_ms)
        self.accommodation_service = accommodations or accommodation_service
        self.ai_response: AIResponse | None = None
        self.guide_text = ""
        self.accommodations: list[Accommodation] = []

    @property
    def current_step(self) -> PlanningStep:
        return self.machine.current_step

    # Wizard hooks

    def on_update(self, patch: TravelContextPatch | dict) -> TravelContext:
        self.context = self.context.update(patch)
        return self.context

    def on_complete(self) -> bool:
        """Finish the current step. A blocked step leaves everything as it was."""
        step = self.machine.current_step
        advanced = self.machine.complete(step, self.context)
        if advanced:
            self.guide.cancel()
            self.guide_text = ""
            logger.info(f"Session {self.id}: {step.name} -> {self.machine.current_step.name}")
        return advanced

    def on_ai_response(self, response: AIResponse):
        self.ai_response = response

    # Step actions

    async def start(self) -> str:
        return self._present(WELCOME_MESSAGE)

    async def chat(self, message: str) -> str | None:
        return await self.router.handle(message)

    def _candidate_destinations(self) -> list[CanonicalDestination]:
        result = self.router.last_result
        if result and result.destinations:
            return result.destinations
        return fallback_destinations()

    async def select_destination(self, name: str) -> str:
        target = normalize(name)
        for destination in self._candidate_destinations():
            if normalize(destination.name) == target:
                break
        else:
            raise LookupError(f"Destination '{name}' is not among the current results")

        self.on_update({"destination": destination.name})
        self.on_ai_response(advice_for(self.context))
        return self._present(destination_guide(destination))

    async def set_budget(self, raw: str | float) -> str:
        amount = parse_price(raw)
        if amount is None:
            raise ValueError("Budget must be a number")
        self.on_update({"budget": amount})
        return self._present(budget_guide(self.context))

    async def find_accommodations(self) -> AccommodationSearchResult:
        result = await self.accommodation_service.search(self.context)
        self.accommodations = result.accommodations
        return result

    async def select_accommodation(self, accommodation_id: str) -> str:
        for accommodation in self.accommodations:
            if accommodation.id == accommodation_id:
                break
        else:
            raise LookupError(f"Accommodation '{accommodation_id}' is not among the current results")

        self.on_update({
            "preferences": {"accommodation": accommodation.name},
            "selected_accommodation": {
                "id": accommodation.id,
                "name": accommodation.name,
                "price": parse_price(accommodation.price) or 0,
                "nights": self.accommodation_service.nights,
            },
        })
        return self._present(accommodation_guide(self.context, accommodation))

    def select_flight(self, flight: SelectedFlight) -> TravelContext:
        return self.on_update({
            "selected_flight": flight.model_dump(),
            "preferences": {"transportation": flight.airline},
        })

    def select_add_ons(self, add_ons: list[SelectedAddOn]) -> TravelContext:
        return self.on_update({"add_ons": [a.model_dump() for a in add_ons]})

    def _present(self, text: str) -> str:
        self.guide_text = text
        self.guide.play(text)
        return text

    def snapshot(self) -> dict:
        state = self.router.state
        return {
            "id": self.id,
            "current_step": self.current_step.name.lower(),
            "step_number": int(self.current_step),
            "next_step": suggest_next_step(self.context),
            "context": self.context.model_dump(mode="json", by_alias=True),
            "conversation": {
                "turns": [{"speaker": t.speaker.value, "text": t.text} for t in state.turns],
                "last_search_query": state.last_search_query,
                "is_searching": state.is_searching,
            },
            "guide": {
                "text": self.guide_text,
                "displayed": self.guide.displayed,
                "is_typing": self.guide.is_typing,
            },
            "ai_response": self.ai_response.model_dump(by_alias=True) if self.ai_response else None,
            "totals": trip_totals(self.context),
        }

    def close(self):
        self.guide.cancel()


class PlannerSessionStore:
    """In-process registry of live wizard sessions.

    Holds at most ``max_sessions``; creating one more evicts the session
    used least recently. Nothing survives a process restart.
    """

    def __init__(self, max_sessions: int | None = None, **defaults):
        # Constructor arguments applied to every new session (coordinator, services)
        self._defaults = defaults
        self.max_sessions = max_sessions or settings.planner_max_sessions
        self._sessions: dict[str, PlannerSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, **kwargs) -> PlannerSession:
        session = PlannerSession(**{**self._defaults, **kwargs})
        self._sessions[session.id] = session
        while len(self._sessions) > self.max_sessions:
            oldest = next(iter(self._sessions))
            logger.info(f"Evicting idle planner session {oldest}")
            self.discard(oldest)
        return session

    def get(self, session_id: str) -> PlannerSession | None:
        session = self._sessions.pop(session_id, None)
        if session:
            # Re-insert to mark as most recently used
            self._sessions[session_id] = session
        return session

    def discard(self, session_id: str):
        session = self._sessions.pop(session_id, None)
        if session:
            session.close()


planner_sessions = PlannerSessionStore()
