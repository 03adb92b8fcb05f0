# app.py
# Slack Bolt 비동기 앱을 초기화하고, 모든 인터랙션 요청을 라우터로 전달하는 메인 파일입니다.

import asyncio
import re
from typing import Any, Dict

from aiohttp import web
from slack_bolt.async_app import AsyncApp
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from dotenv import load_dotenv

# .env 파일에서 환경 변수 로드
load_dotenv()

# 설정 및 유틸리티 임포트
from config import get_slack_config
from utils.logger import setup_logging, get_logger
from utils.constants import CallbackIds, SlackPayloadTypes

# 서비스, 모델, 예외 임포트
from models.interaction import InteractionEvent
from models.reply import Reply
from services import get_notion_service, get_gateway_service
from services.command_handlers import create_router
from services.interaction_router import ResponseChannel
from exceptions import UnroutableEvent

# 로깅 설정
setup_logging()
logger = get_logger(__name__)

# Slack 설정 로드
slack_config = get_slack_config()

# Bolt 앱 초기화 (소켓 모드가 아니면 서명 검증에 signing secret 사용)
if slack_config.socket_mode:
    app = AsyncApp(token=slack_config.bot_token)
else:
    app = AsyncApp(token=slack_config.bot_token, signing_secret=slack_config.signing_secret)


async def open_dialog(trigger_id: str, dialog: Dict[str, Any]) -> None:
    """레거시 다이얼로그를 엽니다."""
    await app.client.dialog_open(trigger_id=trigger_id, dialog=dialog)


router = create_router(
    store=get_notion_service(),
    gateway=get_gateway_service(),
    dialog_opener=open_dialog,
    command=slack_config.command
)


def _message_kwargs(reply: Reply) -> Dict[str, Any]:
    """ack / respond 에 넘길 메시지 필드만 추립니다."""
    kwargs = reply.to_dict()
    kwargs.pop("options", None)
    kwargs.pop("errors", None)
    return kwargs


async def _deliver_immediate(body: Dict[str, Any], reply: Reply, ack, respond) -> None:
    """즉시 응답을 페이로드 종류에 맞게 전달합니다."""
    if reply.options is not None:
        await ack(options=reply.options)
    elif reply.errors:
        await ack(dialog_errors=reply.errors)
    elif reply.is_message and body.get("type") == SlackPayloadTypes.BLOCK_ACTIONS:
        # Block Kit 액션은 ack 본문으로 메시지를 바꿀 수 없으므로 response_url 사용
        await ack()
        await respond(**_message_kwargs(reply))
    elif reply.is_empty:
        await ack()
    else:
        await ack(**_message_kwargs(reply))


async def dispatch(body, ack, respond):
    """모든 인터랙션 요청의 공통 진입점"""
    try:
        event = InteractionEvent.from_body(body)
    except UnroutableEvent as e:
        logger.warning(f"알 수 없는 페이로드 무시: {e}")
        await ack()
        return

    async def send(reply: Reply) -> None:
        await respond(**_message_kwargs(reply))

    channel = ResponseChannel(send)
    try:
        try:
            immediate = await router.route(event, channel)
        except UnroutableEvent:
            await ack()
            return
        await _deliver_immediate(body, immediate, ack, respond)
    finally:
        # 즉시 응답 이후에만 후속 응답이 전송됩니다
        channel.release()


# --- Slack Interaction Handlers ---
app.action(CallbackIds.ACCEPT_TOS)(dispatch)
app.action(CallbackIds.PICK_NEIGHBORHOOD)(dispatch)
app.options(CallbackIds.PICK_NEIGHBORHOOD)(dispatch)
app.action(CallbackIds.DEVICE_PAGE_PREV)(dispatch)
app.action(CallbackIds.DEVICE_PAGE_NEXT)(dispatch)
app.action(CallbackIds.DEVICE_TOGGLE)(dispatch)
app.action({"type": SlackPayloadTypes.DIALOG_SUBMISSION, "callback_id": re.compile(".*")})(dispatch)

# --- Slack Command Handler ---
app.command(slack_config.command)(dispatch)


async def shutdown() -> None:
    """진행 중인 후속 작업을 마치고 게이트웨이 연결을 닫습니다."""
    await router.drain(timeout=10)
    await get_gateway_service().shutdown()


async def _cleanup(_web_app: web.Application) -> None:
    await shutdown()


def build_web_app() -> web.Application:
    """HTTP 모드용 aiohttp 앱. 서버가 멈추면 shutdown()이 실행됩니다."""
    web_app = app.web_app(port=slack_config.port)
    web_app.on_cleanup.append(_cleanup)
    return web_app


async def run_socket_mode() -> None:
    handler = AsyncSocketModeHandler(app, slack_config.app_token)
    try:
        await handler.start_async()
    finally:
        await shutdown()


# --- Main Execution ---
if __name__ == "__main__":
    logger.info("🚀 Trådbot 시작")
    logger.info(f"슬래시 커맨드: {slack_config.command}")

    try:
        if slack_config.socket_mode:
            asyncio.run(run_socket_mode())
        else:
            web.run_app(build_web_app(), port=slack_config.port)
    except KeyboardInterrupt:
        logger.info("👋 시스템 종료 요청")
    except Exception as e:
        logger.error(f"❌ 시스템 시작 실패: {e}", exc_info=True)
    finally:
        logger.info("🔚 Trådbot 종료")
