# services/interaction_router.py
# 인바운드 인터랙션 이벤트를 분류하고 핸들러로 전달합니다.

import asyncio
from typing import Dict, Optional, Tuple

from exceptions import UnroutableEvent
from models.interaction import EventType, InteractionEvent
from models.reply import DeferredWork, PushFunc, Reply
from utils.error_handler import ErrorHandler
from utils.logger import LoggerMixin

# callback_id 와일드카드 ("해당 타입의 모든 이벤트")
ANY = "*"


class ResponseChannel:
    """
    후속 응답 전송 채널.

    즉시 응답이 전달되어 release()가 호출되기 전까지 push를 보류하고,
    이후에는 호출 순서대로 하나씩 전송합니다.
    """

    def __init__(self, send: PushFunc, released: bool = False):
        self._send = send
        self._released = asyncio.Event()
        self._lock = asyncio.Lock()
        self.pushed = 0
        if released:
            self._released.set()

    def release(self) -> None:
        """즉시 응답 전달 완료를 알립니다."""
        self._released.set()

    async def push(self, reply: Reply) -> None:
        await self._released.wait()
        async with self._lock:
            await self._send(reply)
            self.pushed += 1


class InteractionRouter(LoggerMixin):
    """(event_type, callback_id) 기준으로 핸들러를 선택하는 라우터"""

    WILDCARD_TYPES = (EventType.ACTION, EventType.DIALOG_SUBMISSION)

    def __init__(self):
        self._handlers: Dict[Tuple[EventType, str], object] = {}
        self._tasks = set()

    def register(self, event_type: EventType, callback_id: str, handler) -> None:
        """
        핸들러를 등록합니다.

        Args:
            event_type: 이벤트 종류
            callback_id: 콜백 ID (ANY 는 action / dialog_submission 에서만 허용)
            handler: handle(event) -> HandlerOutcome 을 구현한 객체
        """
        if callback_id == ANY and event_type not in self.WILDCARD_TYPES:
            raise ValueError(f"{event_type.value} 이벤트에는 와일드카드를 사용할 수 없습니다")
        self._handlers[(event_type, callback_id)] = handler

    def resolve(self, event: InteractionEvent):
        """정확히 일치하는 핸들러를 먼저 찾고, 없으면 와일드카드 핸들러를 찾습니다."""
        handler = self._handlers.get((event.event_type, event.callback_id))
        if handler is None:
            handler = self._handlers.get((event.event_type, ANY))
        if handler is None:
            raise UnroutableEvent(event.event_type.value, event.callback_id)
        return handler

    async def route(self, event: InteractionEvent, channel: ResponseChannel) -> Reply:
        """
        이벤트를 처리하고 즉시 응답을 반환합니다.

        후속 작업이 있으면 백그라운드 태스크로 실행되며 channel 을 통해 결과를 전송합니다.

        Raises:
            UnroutableEvent: 처리할 핸들러가 없는 경우 (기록 후 다시 발생)
        """
        try:
            handler = self.resolve(event)
        except UnroutableEvent as e:
            ErrorHandler.log_error(event.user.id, e, "이벤트 라우팅")
            raise

        self.log_info(
            f"The user {event.user.display_name} in team {event.team.domain} "
            f"sent {event.event_type.value}:{event.callback_id}"
        )

        outcome = await handler.handle(event)
        if outcome.deferred is not None:
            self._schedule(event, outcome.deferred, channel)
        return outcome.immediate

    def _schedule(self, event: InteractionEvent, deferred: DeferredWork, channel: ResponseChannel) -> None:
        task = asyncio.ensure_future(self._run_deferred(event, deferred, channel))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_deferred(self, event: InteractionEvent, deferred: DeferredWork, channel: ResponseChannel) -> None:
        try:
            await deferred(channel.push)
        except Exception as e:
            if channel.pushed:
                # 이미 응답을 보냈으므로 중복 응답 없이 기록만 합니다
                ErrorHandler.log_error(event.user.id, e, "후속 처리")
            else:
                await ErrorHandler.handle_deferred_error(event.user.id, e, channel.push, context="후속 처리")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """진행 중인 후속 작업이 모두 끝날 때까지 기다립니다."""
        while self._tasks:
            await asyncio.wait(list(self._tasks), timeout=timeout)
            if timeout is not None:
                break
