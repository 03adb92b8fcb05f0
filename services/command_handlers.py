# services/command_handlers.py
# 지원하는 명령별 핸들러입니다. 각 핸들러는 즉시 응답과 후속 작업을 반환합니다.

import dataclasses
from typing import Any, Awaitable, Callable, Dict, List, Optional

from exceptions import LookupFailure, TradbotError
from models.interaction import EventType, InteractionEvent
from models.reply import (
    DeferredResult, FieldError, HandlerOutcome, PushFunc, Reply, TextResult,
    ValidationErrorsResult
)
from services.device_reader import normalize, read_snapshots
from services.interaction_router import ANY, InteractionRouter
from utils.constants import (
    CallbackIds, ErrorMessages, SlashKeywords, SuccessMessages, UsageMessages
)
from utils.error_handler import ErrorHandler
from utils.logger import LoggerMixin
from views.message_view import build_kudos_dialog, build_neighborhood_menu, build_terms_message
from views.response_view import (
    render_device_list, render_error, render_neighborhood, render_options,
    render_result, strip_interactive_elements
)
from config import AppConfig

DialogOpener = Callable[[str, Dict[str, Any]], Awaitable[None]]


class CommandHandler(LoggerMixin):
    """명령 핸들러 기본 클래스"""

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        raise NotImplementedError


class PolicyAcceptanceHandler(CommandHandler):
    """이용약관 동의/거부 버튼"""

    def __init__(self, store):
        self.store = store

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        agreed = event.action_value == "accept"

        async def record_agreement(push: PushFunc) -> None:
            try:
                user = await self.store.find_user_by_id(event.user.id)
                user = await self.store.set_policy_agreement(user, agreed)
            except Exception as e:
                await ErrorHandler.handle_deferred_error(
                    event.user.id, e, push, ErrorMessages.AGREEMENT_FAILED, "약관 동의 저장"
                )
                return

            if user.agreed_to_policy:
                confirmation = SuccessMessages.POLICY_ACCEPTED
            else:
                confirmation = SuccessMessages.POLICY_DENIED
            await push(render_result(TextResult(confirmation, replace_original=True)))

        # 작업이 끝나기 전에 버튼을 제거한 원래 메시지로 응답
        return HandlerOutcome(strip_interactive_elements(event.original_message), record_agreement)


class NeighborhoodOptionsHandler(CommandHandler):
    """동네 자동완성 (후속 작업 없음)"""

    def __init__(self, store, limit: int = AppConfig.MAX_NEIGHBORHOOD_OPTIONS):
        self.store = store
        self.limit = limit

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        query = event.payload.get("value", "")
        try:
            neighborhoods = await self.store.fuzzy_find_neighborhoods(query)
        except Exception as e:
            ErrorHandler.log_error(event.user.id, e, "동네 자동완성")
            neighborhoods = []
        return HandlerOutcome(render_options(neighborhoods, self.limit))


class NeighborhoodSelectionHandler(CommandHandler):
    """동네 선택 메뉴"""

    def __init__(self, store):
        self.store = store

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        selected = event.action_value
        original_text = (event.original_message or {}).get("text")

        async def show_neighborhood(push: PushFunc) -> None:
            try:
                if not selected:
                    raise LookupFailure("선택된 동네가 없습니다")
                neighborhood = await self.store.find_neighborhood_by_id(selected)
            except Exception as e:
                await ErrorHandler.handle_deferred_error(
                    event.user.id, e, push, ErrorMessages.NEIGHBORHOOD_FAILED, "동네 조회"
                )
                return
            await push(render_neighborhood(original_text, neighborhood))

        return HandlerOutcome(strip_interactive_elements(event.original_message), show_neighborhood)


def validate_kudos_submission(submission: Dict[str, Any]) -> List[FieldError]:
    """칭찬 다이얼로그 입력값을 검사합니다."""
    errors = []
    comment = submission.get("comment") or ""
    if not comment.strip():
        errors.append(FieldError(name="comment", error=ErrorMessages.EMPTY_COMMENT))
    return errors


class KudosSubmissionHandler(CommandHandler):
    """칭찬 다이얼로그 제출"""

    def __init__(self, store):
        self.store = store

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        submission = event.payload.get("submission") or {}

        errors = validate_kudos_submission(submission)
        if errors:
            self.log_info(f"칭찬 입력값 오류 - 사용자: {event.user.id}")
            return HandlerOutcome(render_result(ValidationErrorsResult(errors)))

        target_id = submission.get("user", "")
        comment = submission["comment"]
        partial_message = f"<@{event.user.id}> just gave kudos to <@{target_id}>."

        async def give_kudos(push: PushFunc) -> None:
            await push(render_result(TextResult(partial_message)))
            try:
                user = await self.store.find_user_by_id(target_id)
                user = await self.store.increment_kudos(user, comment)
            except Exception as e:
                await ErrorHandler.handle_deferred_error(
                    event.user.id, e, push, ErrorMessages.KUDOS_FAILED, "칭찬 저장"
                )
                return
            await push(render_result(TextResult(
                f"{partial_message} That makes a total of {user.kudos_count}! :balloon:",
                replace_original=True
            )))

        return HandlerOutcome(render_result(DeferredResult()), give_kudos)


class DeviceListingHandler(CommandHandler):
    """게이트웨이 기기 목록 (즉시 응답만 있음)"""

    def __init__(self, gateway, settle_delay: Optional[float] = None):
        self.gateway = gateway
        self._settle_delay = settle_delay

    @property
    def settle_delay(self) -> float:
        if self._settle_delay is None:
            return self.gateway.settle_delay
        return self._settle_delay

    async def list_snapshots(self):
        """게이트웨이에 연결하고 정규화된 기기 목록을 반환합니다."""
        handle = await self.gateway.connect()
        handle.observe_devices()
        # 구독 직후라면 초기 기기 상태가 채워질 때까지 대기
        await handle.wait_settled(self.settle_delay)
        return read_snapshots(handle.devices)

    async def render_page(self, page: int, user_id: str = "") -> Reply:
        try:
            snapshots = await self.list_snapshots()
        except TradbotError as e:
            ErrorHandler.log_error(user_id, e, "기기 목록 조회")
            return render_error(f"{ErrorMessages.DEVICES_FAILED}: {e}")
        return render_device_list(snapshots, page)

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        return HandlerOutcome(await self.render_page(0, event.user.id))


class DevicePageHandler(CommandHandler):
    """기기 목록 이전/다음 페이지 버튼"""

    def __init__(self, listing: DeviceListingHandler):
        self.listing = listing

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        try:
            page = int(event.action_value or 0)
        except ValueError:
            page = 0

        async def show_page(push: PushFunc) -> None:
            reply = await self.listing.render_page(page, event.user.id)
            if reply.blocks:
                reply = dataclasses.replace(reply, replace_original=True)
            await push(reply)

        # 새 페이지가 도착하기 전에 버튼을 제거
        return HandlerOutcome(strip_interactive_elements(event.original_message), show_page)


class DeviceToggleHandler(CommandHandler):
    """조명/플러그 전원 버튼"""

    def __init__(self, listing: DeviceListingHandler):
        self.listing = listing

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        instance_part, _, page_part = (event.action_value or "").partition(":")

        async def toggle(push: PushFunc) -> None:
            try:
                instance_id = int(instance_part)
                handle = await self.listing.gateway.connect()
                snapshot = normalize(handle.devices.get(instance_id) or {})
                if snapshot is None or not snapshot.kind.switchable:
                    raise LookupFailure(f"켜고 끌 수 없는 기기입니다: {instance_part}")
                await handle.set_power(instance_id, not snapshot.on_off)
            except (TradbotError, ValueError) as e:
                await ErrorHandler.handle_deferred_error(
                    event.user.id, e, push, ErrorMessages.DEVICE_TOGGLE_FAILED, "기기 전원 변경"
                )
                return

            page = int(page_part) if page_part.isdigit() else 0
            reply = await self.listing.render_page(page, event.user.id)
            if reply.blocks:
                reply = dataclasses.replace(reply, replace_original=True)
            await push(reply)

        # 같은 버튼이 다시 눌려 전원이 되돌아가지 않도록 버튼을 먼저 제거
        return HandlerOutcome(strip_interactive_elements(event.original_message), toggle)


class SlashCommandHandler(CommandHandler):
    """슬래시 커맨드: 첫 단어로 하위 명령을 선택합니다."""

    def __init__(self, listing: DeviceListingHandler, dialog_opener: DialogOpener):
        self.listing = listing
        self.dialog_opener = dialog_opener

    async def handle(self, event: InteractionEvent) -> HandlerOutcome:
        words = (event.payload.get("text") or "").split()
        keyword = words[0].lower() if words else ""

        if keyword == SlashKeywords.BUTTON:
            return HandlerOutcome(build_terms_message())
        if keyword == SlashKeywords.MENU:
            return HandlerOutcome(build_neighborhood_menu())
        if keyword == SlashKeywords.DEVICES:
            return await self.listing.handle(event)
        if keyword == SlashKeywords.DIALOG:
            return HandlerOutcome(Reply(), self._open_dialog(event))

        return HandlerOutcome(Reply(text=UsageMessages.SLASH_USAGE))

    def _open_dialog(self, event: InteractionEvent):
        async def open_dialog(push: PushFunc) -> None:
            try:
                await self.dialog_opener(event.trigger_id, build_kudos_dialog())
            except Exception as e:
                await ErrorHandler.handle_deferred_error(
                    event.user.id, e, push, f"{ErrorMessages.DIALOG_OPEN_FAILED}: {e}", "다이얼로그 열기"
                )
        return open_dialog


def create_router(store, gateway, dialog_opener: DialogOpener, command: str) -> InteractionRouter:
    """
    모든 핸들러를 등록한 라우터를 생성합니다.

    Args:
        store: 사용자/동네 저장소 (NotionService)
        gateway: 게이트웨이 서비스 (GatewayService)
        dialog_opener: trigger_id 와 다이얼로그로 dialog.open 을 호출하는 함수
        command: 슬래시 커맨드 이름
    """
    listing = DeviceListingHandler(gateway)
    router = InteractionRouter()
    router.register(EventType.ACTION, CallbackIds.ACCEPT_TOS, PolicyAcceptanceHandler(store))
    router.register(EventType.OPTIONS_REQUEST, CallbackIds.PICK_NEIGHBORHOOD, NeighborhoodOptionsHandler(store))
    router.register(EventType.ACTION, CallbackIds.PICK_NEIGHBORHOOD, NeighborhoodSelectionHandler(store))
    router.register(EventType.DIALOG_SUBMISSION, ANY, KudosSubmissionHandler(store))
    router.register(EventType.ACTION, CallbackIds.DEVICE_PAGE_PREV, DevicePageHandler(listing))
    router.register(EventType.ACTION, CallbackIds.DEVICE_PAGE_NEXT, DevicePageHandler(listing))
    router.register(EventType.ACTION, CallbackIds.DEVICE_TOGGLE, DeviceToggleHandler(listing))
    router.register(EventType.SLASH_COMMAND, command, SlashCommandHandler(listing, dialog_opener))
    return router
