"""
Unit tests for the conversation router.

Covers intent classification, the pure state reducer and the
search-versus-elaborate routing of chat messages.
"""

import pytest

from app.schemas.destination import SearchResult
from app.services.aggregation_coordinator import AggregationCoordinator
from app.services.conversation_router import (
    CLARIFYING_PROMPT,
    ConversationRouter,
    ConversationState,
    Intent,
    SearchCompleted,
    SearchStarted,
    Speaker,
    UserSaid,
    classify,
    reduce_conversation,
    summary_message,
)


class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize("text", ["thanks", "Thanks!", "ok", "  Tell me more about it", "cool, nice"])
    def test_acknowledgments(self, text):
        assert classify(text) is Intent.ACKNOWLEDGMENT

    @pytest.mark.parametrize("text", ["beach holidays in Asia", "Paris", "I want mountains"])
    def test_search_queries(self, text):
        assert classify(text) is Intent.SEARCH_QUERY

    def test_prefix_match_quirk(self):
        """Messages that merely start with a phrase are still acknowledgments."""
        assert classify("okinawa beaches") is Intent.ACKNOWLEDGMENT


class TestReducer:
    """Tests for reduce_conversation."""

    def test_turns_are_appended_without_mutation(self):
        state = ConversationState()
        new_state = reduce_conversation(state, UserSaid("hello"))

        assert state.turns == ()
        assert [(t.speaker, t.text) for t in new_state.turns] == [(Speaker.USER, "hello")]

    def test_search_lifecycle(self):
        state = reduce_conversation(ConversationState(), SearchStarted("beaches"))
        assert state.is_searching is True
        assert state.last_search_query == "beaches"

        result = SearchResult(search_query="beaches")
        state = reduce_conversation(state, SearchCompleted(result))
        assert state.is_searching is False
        assert state.last_result is result
        assert state.last_search_query == "beaches"

    def test_unknown_event_rejected(self):
        with pytest.raises(TypeError):
            reduce_conversation(ConversationState(), "not an event")


class TestHandle:
    """Tests for ConversationRouter.handle."""

    async def test_search_query_runs_search(self, fake_coordinator):
        router = ConversationRouter(fake_coordinator)

        reply = await router.handle("beach holidays")

        assert reply.startswith('I found 2 destinations matching your search for "beach holidays"')
        assert "🌍 paris, FRANCE" in reply
        assert reply.endswith("Would you like to know more about any of these destinations?")
        assert router.state.last_search_query == "beach holidays"
        assert router.state.is_searching is False
        assert router.last_result.total_results == 2

    async def test_acknowledgment_after_search_elaborates(self, fake_coordinator):
        router = ConversationRouter(fake_coordinator)
        await router.handle("beach holidays")
        calls = list(fake_coordinator.adapters[0].calls)

        reply = await router.handle("thanks")

        assert reply.startswith("Here are more details about paris:")
        assert "🌤️ Climate: Warm" in reply
        assert fake_coordinator.adapters[0].calls == calls

    async def test_acknowledgment_without_search_asks_to_clarify(self, fake_coordinator):
        router = ConversationRouter(fake_coordinator)

        reply = await router.handle("thanks")

        assert reply == CLARIFYING_PROMPT
        assert fake_coordinator.adapters[0].calls == []

    async def test_fallback_results_are_summarized(self, failing_coordinator):
        router = ConversationRouter(failing_coordinator)

        reply = await router.handle("somewhere warm")

        assert "I found 3 destinations" in reply
        assert router.last_result.is_fallback is True

    async def test_user_turn_precedes_reply(self, fake_coordinator):
        router = ConversationRouter(fake_coordinator)
        await router.handle("beach holidays")
        await router.handle("thanks")

        speakers = [t.speaker for t in router.state.turns]
        assert speakers == [Speaker.USER, Speaker.ASSISTANT, Speaker.USER, Speaker.ASSISTANT]
        assert router.state.turns[2].text == "thanks"

    async def test_blank_message_is_ignored(self, fake_coordinator):
        router = ConversationRouter(fake_coordinator)

        assert await router.handle("   ") is None
        assert router.state.turns == ()

    async def test_refresh_reruns_last_search(self, fake_coordinator):
        router = ConversationRouter(fake_coordinator)
        assert await router.refresh() is None

        await router.handle("beach holidays")
        result = await router.refresh()

        assert result.search_query == "beach holidays"
        assert fake_coordinator.adapters[0].calls == ["beach holidays", "beach holidays"]
        assert len(router.state.turns) == 2


class TestSummaryMessage:
    """Tests for summary_message."""

    def test_empty_result_asks_to_clarify(self):
        assert summary_message(SearchResult(search_query="x")) == CLARIFYING_PROMPT

    async def test_long_descriptions_are_excerpted(self):
        long_text = "word " * 100
        coordinator = AggregationCoordinator(adapters=[], timeout=1.0)
        result = await coordinator.aggregate("x")
        first = result.destinations[0].model_copy(update={"description": long_text})
        message = summary_message(result.model_copy(update={"destinations": [first]}))

        assert long_text not in message
        assert "…" in message
