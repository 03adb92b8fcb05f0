"""
Unit tests for event classification and the two-phase response contract.
"""

import asyncio

import pytest

from conftest import Pushes, make_event
from exceptions import LookupFailure, UnroutableEvent
from models.interaction import EventType
from models.reply import HandlerOutcome, Reply
from services.interaction_router import ANY, InteractionRouter, ResponseChannel


class StaticHandler:
    def __init__(self, immediate=None, deferred=None):
        self.immediate = immediate or Reply()
        self.deferred = deferred
        self.events = []

    async def handle(self, event):
        self.events.append(event)
        return HandlerOutcome(self.immediate, self.deferred)


class TestResolve:
    def test_exact_match_wins_over_wildcard(self):
        router = InteractionRouter()
        exact, wildcard = StaticHandler(), StaticHandler()
        router.register(EventType.ACTION, "accept_tos", exact)
        router.register(EventType.ACTION, ANY, wildcard)

        assert router.resolve(make_event(EventType.ACTION, "accept_tos")) is exact
        assert router.resolve(make_event(EventType.ACTION, "other")) is wildcard

    def test_event_type_is_part_of_key(self):
        router = InteractionRouter()
        router.register(EventType.ACTION, "pick_sf_neighborhood", StaticHandler())

        with pytest.raises(UnroutableEvent):
            router.resolve(make_event(EventType.OPTIONS_REQUEST, "pick_sf_neighborhood"))

    def test_wildcard_only_for_action_and_dialog(self):
        router = InteractionRouter()
        router.register(EventType.DIALOG_SUBMISSION, ANY, StaticHandler())

        with pytest.raises(ValueError):
            router.register(EventType.OPTIONS_REQUEST, ANY, StaticHandler())
        with pytest.raises(ValueError):
            router.register(EventType.SLASH_COMMAND, ANY, StaticHandler())


class TestRoute:
    @pytest.mark.asyncio
    async def test_unroutable_event_raises(self, pushes):
        router = InteractionRouter()

        with pytest.raises(UnroutableEvent):
            await router.route(make_event(EventType.ACTION, "nope"), ResponseChannel(pushes, released=True))
        assert pushes.replies == []

    @pytest.mark.asyncio
    async def test_returns_immediate_and_runs_deferred(self, pushes):
        async def deferred(push):
            await push(Reply(text="later"))

        router = InteractionRouter()
        router.register(EventType.ACTION, "x", StaticHandler(Reply(text="now"), deferred))

        immediate = await router.route(make_event(EventType.ACTION, "x"), ResponseChannel(pushes, released=True))
        assert immediate.text == "now"

        await router.drain()
        assert [r.text for r in pushes.replies] == ["later"]
        assert router.pending == 0

    @pytest.mark.asyncio
    async def test_pushes_wait_for_release(self, pushes):
        async def deferred(push):
            await push(Reply(text="first"))
            await push(Reply(text="second"))

        router = InteractionRouter()
        router.register(EventType.ACTION, "x", StaticHandler(deferred=deferred))
        channel = ResponseChannel(pushes)

        await router.route(make_event(EventType.ACTION, "x"), channel)
        await asyncio.sleep(0.01)
        assert pushes.replies == []

        channel.release()
        await router.drain()
        assert [r.text for r in pushes.replies] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_escaped_error_becomes_error_reply(self, pushes):
        async def deferred(push):
            raise LookupFailure("gone")

        router = InteractionRouter()
        router.register(EventType.ACTION, "x", StaticHandler(deferred=deferred))

        await router.route(make_event(EventType.ACTION, "x"), ResponseChannel(pushes, released=True))
        await router.drain()

        assert len(pushes.replies) == 1
        assert pushes.replies[0].text == "An error occurred while processing your request."

    @pytest.mark.asyncio
    async def test_no_duplicate_reply_after_push(self, pushes):
        async def deferred(push):
            await push(Reply(text="done"))
            raise RuntimeError("late failure")

        router = InteractionRouter()
        router.register(EventType.ACTION, "x", StaticHandler(deferred=deferred))

        await router.route(make_event(EventType.ACTION, "x"), ResponseChannel(pushes, released=True))
        await router.drain()

        assert [r.text for r in pushes.replies] == ["done"]

    @pytest.mark.asyncio
    async def test_handler_without_deferred_schedules_nothing(self):
        pushes = Pushes()
        router = InteractionRouter()
        router.register(EventType.OPTIONS_REQUEST, "menu", StaticHandler(Reply(options=[])))

        immediate = await router.route(
            make_event(EventType.OPTIONS_REQUEST, "menu"), ResponseChannel(pushes, released=True)
        )

        assert immediate.to_dict() == {"options": []}
        assert router.pending == 0
