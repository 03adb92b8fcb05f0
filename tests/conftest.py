"""
Shared fixtures: event builders and fake collaborators.

No Slack, Notion or gateway connection is needed.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from models.interaction import EventType, InteractionEvent, TeamRef, UserRef
from models.records import Neighborhood, User


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_event(
    event_type: EventType = EventType.ACTION,
    callback_id: str = "accept_tos",
    *,
    payload: Optional[Dict[str, Any]] = None,
    original_message: Optional[Dict[str, Any]] = None,
    user_id: str = "U123",
    trigger_id: Optional[str] = "trigger-1",
) -> InteractionEvent:
    return InteractionEvent(
        event_type=event_type,
        callback_id=callback_id,
        user=UserRef(id=user_id, display_name="alice"),
        team=TeamRef(id="T1", domain="acme"),
        payload=payload or {},
        original_message=original_message,
        response_url="https://hooks.slack.com/actions/T1/1/xyz",
        trigger_id=trigger_id,
    )


def light_record(instance_id: int = 65537, name: str = "Desk lamp", **light: Any) -> Dict[str, Any]:
    channel = {"onOff": True, "spectrum": "white", "dimmer": 128, "color": "f1e0b5"}
    channel.update(light)
    return {"type": 2, "instanceId": instance_id, "name": name, "lightList": [channel]}


def attachment_message() -> Dict[str, Any]:
    return {
        "text": "The terms of service",
        "attachments": [
            {
                "text": "Do you accept the terms of service?",
                "callback_id": "accept_tos",
                "actions": [{"name": "accept_tos", "value": "accept", "type": "button"}],
            }
        ],
    }


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeHandle:
    """In-memory gateway handle."""

    def __init__(self, devices: Optional[Dict[int, Dict[str, Any]]] = None):
        self.devices = devices or {}
        self.observe_calls = 0
        self.settle_calls: List[float] = []
        self._observing = False
        self.set_power = AsyncMock()

    def observe_devices(self) -> bool:
        self.observe_calls += 1
        if self._observing:
            return False
        self._observing = True
        return True

    async def wait_settled(self, settle_delay: float) -> None:
        self.settle_calls.append(settle_delay)


class FakeGateway:
    def __init__(self, handle: Optional[FakeHandle] = None, error: Optional[Exception] = None):
        self.handle = handle or FakeHandle()
        self.error = error
        self.settle_delay = 0
        self.connect_calls = 0

    async def connect(self) -> FakeHandle:
        self.connect_calls += 1
        if self.error is not None:
            raise self.error
        return self.handle


class Pushes:
    """Records pushed replies in order."""

    def __init__(self):
        self.replies: List[Any] = []

    async def __call__(self, reply) -> None:
        self.replies.append(reply)


@pytest.fixture
def store():
    store = AsyncMock()
    store.find_user_by_id.return_value = User(page_id="page-1", slack_id="U999", kudos_count=4)
    store.set_policy_agreement.side_effect = lambda user, agreed: User(
        page_id=user.page_id, slack_id=user.slack_id, agreed_to_policy=agreed
    )
    store.increment_kudos.side_effect = lambda user, comment: User(
        page_id=user.page_id, slack_id=user.slack_id, kudos_count=user.kudos_count + 1,
        last_kudos_comment=comment,
    )
    store.find_neighborhood_by_id.return_value = Neighborhood(
        page_id="n-1", name="Mission", link="https://example.com/mission"
    )
    store.fuzzy_find_neighborhoods.return_value = []
    return store


@pytest.fixture
def pushes():
    return Pushes()
