"""Conversation router — decides whether a chat message is a new search or an acknowledgment."""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from app.schemas.destination import CanonicalDestination, SearchResult
from app.services.aggregation_coordinator import AggregationCoordinator, aggregation_coordinator

logger = logging.getLogger(__name__)

ACKNOWLEDGMENT_PHRASES: tuple[str, ...] = (
    "ok", "okay", "yes", "yeah", "sure", "go on", "continue", "tell me more",
    "thanks", "thank you", "cool", "great", "awesome", "nice", "perfect",
)

DESTINATION_CATEGORIES: tuple[str, ...] = (
    "Beach destinations",
    "Mountain getaways",
    "Cultural cities",
    "Urban adventures",
    "Nature retreats",
)

CLARIFYING_PROMPT = (
    "Could you tell me more specifically what kind of destination you're looking for? "
    "For example:\n" + "\n".join(f"• {c}" for c in DESTINATION_CATEGORIES)
)

WELCOME_MESSAGE = (
    "I can help you find the perfect destination based on your preferences. "
    "Just let me know what you're looking for! 🌍"
)

EXCERPT_LENGTH = 160


class Intent(str, Enum):
    ACKNOWLEDGMENT = "acknowledgment"
    SEARCH_QUERY = "search_query"


class Speaker(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatTurn:
    speaker: Speaker
    text: str


@dataclass(frozen=True)
class ConversationState:
    turns: tuple[ChatTurn, ...] = ()
    last_search_query: str | None = None
    is_searching: bool = False
    last_result: SearchResult | None = None


# Conversation events


@dataclass(frozen=True)
class UserSaid:
    text: str


@dataclass(frozen=True)
class AssistantSaid:
    text: str


@dataclass(frozen=True)
class SearchStarted:
    query: str


@dataclass(frozen=True)
class SearchCompleted:
    result: SearchResult


ConversationEvent = UserSaid | AssistantSaid | SearchStarted | SearchCompleted


def reduce_conversation(state: ConversationState, event: ConversationEvent) -> ConversationState:
    """Pure reducer: returns the state after ``event``; the log only grows."""
    if isinstance(event, UserSaid):
        return replace(state, turns=state.turns + (ChatTurn(Speaker.USER, event.text),))
    if isinstance(event, AssistantSaid):
        return replace(state, turns=state.turns + (ChatTurn(Speaker.ASSISTANT, event.text),))
    if isinstance(event, SearchStarted):
        return replace(state, is_searching=True, last_search_query=event.query)
    if isinstance(event, SearchCompleted):
        return replace(state, is_searching=False, last_result=event.result)
    raise TypeError(f"Unknown conversation event: {event!r}")


def classify(utterance: str) -> Intent:
    """Acknowledgment when the message opens with a whitelisted phrase."""
    text = utterance.strip().lower()
    if any(text.startswith(phrase) for phrase in ACKNOWLEDGMENT_PHRASES):
        return Intent.ACKNOWLEDGMENT
    return Intent.SEARCH_QUERY


def _excerpt(text: str, limit: int = EXCERPT_LENGTH) -> str:
    if len(text) <= limit:
        return text
    cut = text[:limit].rsplit(" ", 1)[0].rstrip(",.;:")
    return f"{cut}…"


def elaboration_message(destination: CanonicalDestination) -> str:
    tips = "\n".join(f"• {tip}" for tip in destination.local_tips)
    return (
        f"Here are more details about {destination.name}:\n\n"
        f"🌤️ Climate: {destination.climate}\n"
        f"⏰ Time Zone: {destination.time_zone}\n"
        f"💬 Language: {destination.language}\n"
        f"💰 Currency: {destination.currency}\n\n"
        f"Local Tips:\n{tips}\n\n"
        f"Would you like to know more about any specific aspect of {destination.name}?"
    )


def summary_message(result: SearchResult) -> str:
    if not result.destinations:
        return CLARIFYING_PROMPT

    lines = [
        f'I found {result.total_results} destinations matching your search for "{result.search_query}":\n\n'
    ]
    for dest in result.destinations:
        lines.append(
            f"🌍 {dest.name}, {dest.country}\n"
            f"📝 {_excerpt(dest.description)}\n"
            f"⭐ Highlights: {', '.join(dest.highlights[:3])}\n"
            f"💰 Average cost: {dest.average_cost.accommodation}\n"
            f"🌤️ Best time to visit: {dest.best_time_to_visit}\n\n"
        )
    lines.append("Would you like to know more about any of these destinations?")
    return "".join(lines)


class ConversationRouter:
    """
    Single writer of a ConversationState.

    Each handled message appends the user turn immediately and one assistant
    turn once the reply is ready, so a user turn always precedes its reply.
    """

    def __init__(
        self,
        coordinator: AggregationCoordinator | None = None,
        state: ConversationState | None = None,
    ):
        self.coordinator = coordinator or aggregation_coordinator
        self._state = state or ConversationState()

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def last_result(self) -> SearchResult | None:
        return self._state.last_result

    def _dispatch(self, event: ConversationEvent):
        self._state = reduce_conversation(self._state, event)

    async def handle(self, utterance: str) -> str | None:
        """Route one chat message and return the assistant reply.

        Blank messages are ignored and return None.
        """
        text = utterance.strip()
        if not text:
            return None

        self._dispatch(UserSaid(text))

        if classify(text) is Intent.ACKNOWLEDGMENT:
            reply = self._acknowledge()
        else:
            reply = await self._search(text)

        self._dispatch(AssistantSaid(reply))
        return reply

    async def refresh(self) -> SearchResult | None:
        """Re-run the last search without adding chat turns."""
        query = self._state.last_search_query
        if not query:
            return None
        self._dispatch(SearchStarted(query))
        result = await self.coordinator.aggregate(query)
        self._dispatch(SearchCompleted(result))
        return result

    def _acknowledge(self) -> str:
        result = self._state.last_result
        if result and result.destinations:
            return elaboration_message(result.destinations[0])
        return CLARIFYING_PROMPT

    async def _search(self, query: str) -> str:
        self._dispatch(SearchStarted(query))
        result = await self.coordinator.aggregate(query)
        self._dispatch(SearchCompleted(result))
        logger.info(
            f"Search '{query}' -> {result.total_results} destinations"
            f"{' (fallback)' if result.is_fallback else ''}"
        )
        return summary_message(result)
