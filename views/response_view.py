# views/response_view.py
# 도메인 결과를 Slack 블록/첨부 페이로드로 변환합니다. I/O 없음.

import copy
import math
from typing import Any, Dict, List, Optional, Sequence

from config import AppConfig
from models.device import DeviceSnapshot
from models.records import Neighborhood
from models.reply import (
    CommandResult, DeferredResult, FieldError, Reply, StructuredResult,
    TextResult, ValidationErrorsResult
)
from utils.constants import (
    ButtonStyles, CallbackIds, SlackBlocks, SlackElements, SuccessMessages
)

DEVICE_LIST_TITLE = "*Welcome to Trådbot*\n*Please choose a device:*"
NO_DEVICES_TEXT = "No devices found on the gateway."


def render_confirmation(text: str) -> Reply:
    """원래 메시지를 대체하는 확인 메시지"""
    return Reply(text=text, replace_original=True)


def render_error(text: str) -> Reply:
    """사용자에게 보여줄 에러 메시지"""
    return Reply(text=text)


def render_validation_errors(errors: Sequence[FieldError]) -> Reply:
    """다이얼로그 필드 오류 응답"""
    return Reply(errors=[{"name": error.name, "error": error.error} for error in errors])


def render_options(neighborhoods: Sequence[Neighborhood], limit: int = AppConfig.MAX_NEIGHBORHOOD_OPTIONS) -> Reply:
    """자동완성 옵션 목록 (결과가 없어도 빈 목록)"""
    return Reply(options=[
        {
            "text": {"type": "plain_text", "text": neighborhood.name},
            "value": neighborhood.page_id
        }
        for neighborhood in list(neighborhoods)[:limit]
    ])


def render_neighborhood(original_text: Optional[str], neighborhood: Neighborhood) -> Reply:
    """선택된 동네 정보로 원래 메시지를 대체합니다."""
    attachment = {
        "title": neighborhood.name,
        "text": SuccessMessages.NEIGHBORHOOD_DESCRIPTION
    }
    if neighborhood.link:
        attachment["title_link"] = neighborhood.link
    return Reply(text=original_text or "", attachments=[attachment], replace_original=True)


def strip_interactive_elements(message: Optional[Dict[str, Any]]) -> Reply:
    """
    원래 메시지에서 인터랙티브 요소를 제거한 복사본을 만듭니다.

    응답이 도착하기 전에 같은 버튼이 다시 눌리는 것을 막기 위해 사용합니다.
    원본 메시지는 수정하지 않습니다.

    Args:
        message: 이벤트에 포함된 원래 메시지

    Returns:
        Reply: 원래 메시지를 대체하는 응답 (메시지가 없으면 빈 ack)
    """
    if not message:
        return Reply()

    message = copy.deepcopy(message)

    attachments = message.get("attachments")
    if attachments:
        for attachment in attachments:
            attachment.pop("actions", None)

    blocks = message.get("blocks")
    if blocks:
        blocks = [block for block in blocks if block.get("type") != SlackBlocks.ACTIONS]
        for block in blocks:
            accessory = block.get("accessory")
            if accessory and accessory.get("type") != "image":
                block.pop("accessory")

    return Reply(
        text=message.get("text", ""),
        blocks=blocks or None,
        attachments=attachments or None,
        replace_original=True
    )


# --- 기기 목록 ---

def _field(title: str, value: Any) -> Dict[str, str]:
    return {"type": "mrkdwn", "text": f"*{title}*\n {value}"}


def _device_fields(snapshot: DeviceSnapshot) -> List[Dict[str, str]]:
    """스냅샷에 값이 있는 항목만 필드로 만듭니다."""
    fields = [_field("Instance ID", snapshot.instance_id)]
    if snapshot.on_off is not None:
        fields.append(_field("On/Off", "On" if snapshot.on_off else "Off"))
    if snapshot.spectrum is not None:
        fields.append(_field("Spectrum", snapshot.spectrum))
    if snapshot.dimmer_level is not None:
        fields.append(_field("Dimmer", snapshot.dimmer_level))
    if snapshot.color_hex:
        fields.append(_field("Color", f"#{snapshot.color_hex.lstrip('#')}"))
    if snapshot.battery_percent is not None:
        fields.append(_field("Battery", f"{snapshot.battery_percent}%"))
    return fields


def _device_blocks(snapshot: DeviceSnapshot, page: int) -> List[Dict[str, Any]]:
    """기기 하나를 섹션 + 메모 입력 + 구분선 블록으로 만듭니다."""
    section = {
        "type": SlackBlocks.SECTION,
        "block_id": f"device_{snapshot.instance_id}",
        "text": {"type": "mrkdwn", "text": f"*{snapshot.name}*"},
        "fields": _device_fields(snapshot)
    }

    if snapshot.kind.switchable:
        section["accessory"] = {
            "type": SlackElements.BUTTON,
            "text": {"type": "plain_text", "text": "Turn off" if snapshot.on_off else "Turn on"},
            "action_id": CallbackIds.DEVICE_TOGGLE,
            "value": f"{snapshot.instance_id}:{page}"
        }
        if not snapshot.on_off:
            section["accessory"]["style"] = ButtonStyles.PRIMARY

    note = {
        "type": SlackBlocks.INPUT,
        "block_id": f"note_{snapshot.instance_id}",
        "element": {
            "type": SlackElements.PLAIN_TEXT_INPUT,
            "action_id": "device_note",
            "multiline": True
        },
        "label": {"type": "plain_text", "text": "Label", "emoji": True},
        "optional": True
    }

    return [section, note, {"type": SlackBlocks.DIVIDER}]


def page_count(total: int, per_page: int = AppConfig.DEVICES_PER_PAGE) -> int:
    """전체 페이지 수 (기기가 없어도 1페이지)"""
    return max(1, math.ceil(total / per_page))


def _pagination_blocks(page: int, pages: int) -> List[Dict[str, Any]]:
    buttons = []
    if page > 0:
        buttons.append({
            "type": SlackElements.BUTTON,
            "text": {"type": "plain_text", "text": "Previous"},
            "action_id": CallbackIds.DEVICE_PAGE_PREV,
            "value": str(page - 1)
        })
    if page < pages - 1:
        buttons.append({
            "type": SlackElements.BUTTON,
            "text": {"type": "plain_text", "text": "Next"},
            "action_id": CallbackIds.DEVICE_PAGE_NEXT,
            "value": str(page + 1)
        })

    blocks = [{
        "type": SlackBlocks.CONTEXT,
        "elements": [{"type": "mrkdwn", "text": f"Page {page + 1} of {pages}"}]
    }]
    if buttons:
        blocks.append({"type": SlackBlocks.ACTIONS, "block_id": "device_pages", "elements": buttons})
    return blocks


def render_device_list(
    snapshots: Sequence[DeviceSnapshot],
    page: int = 0,
    per_page: int = AppConfig.DEVICES_PER_PAGE
) -> Reply:
    """
    기기 스냅샷 목록을 페이지 단위 블록 메시지로 렌더링합니다.

    Args:
        snapshots: 정규화된 기기 목록 (입력 순서대로 표시)
        page: 0부터 시작하는 페이지 번호 (범위를 벗어나면 가장 가까운 페이지)
        per_page: 페이지당 기기 수

    Returns:
        Reply: 블록 메시지
    """
    pages = page_count(len(snapshots), per_page)
    page = min(max(page, 0), pages - 1)

    blocks: List[Dict[str, Any]] = [{
        "type": SlackBlocks.SECTION,
        "text": {"type": "mrkdwn", "text": DEVICE_LIST_TITLE}
    }]

    if not snapshots:
        blocks.append({
            "type": SlackBlocks.CONTEXT,
            "elements": [{"type": "mrkdwn", "text": NO_DEVICES_TEXT}]
        })

    for snapshot in snapshots[page * per_page:(page + 1) * per_page]:
        blocks.extend(_device_blocks(snapshot, page))

    if pages > 1:
        blocks.extend(_pagination_blocks(page, pages))

    return Reply(text=f"Trådbot devices ({len(snapshots)})", blocks=blocks)


# --- CommandResult ---

def _render_text(result: TextResult) -> Reply:
    return Reply(text=result.text, replace_original=result.replace_original)


def _render_structured(result: StructuredResult) -> Reply:
    return Reply(text=result.text, blocks=result.blocks)


def _render_validation(result: ValidationErrorsResult) -> Reply:
    return render_validation_errors(result.errors)


def _render_deferred(result: DeferredResult) -> Reply:
    return Reply()


_RESULT_RENDERERS = {
    TextResult: _render_text,
    StructuredResult: _render_structured,
    ValidationErrorsResult: _render_validation,
    DeferredResult: _render_deferred,
}


def render_result(result: CommandResult) -> Reply:
    """CommandResult를 Slack 응답으로 변환합니다."""
    renderer = _RESULT_RENDERERS.get(type(result))
    if renderer is None:
        raise TypeError(f"렌더링할 수 없는 결과 타입: {type(result).__name__}")
    return renderer(result)
