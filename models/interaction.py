# models/interaction.py
# Slack 인터랙션 이벤트 타입과 데이터 구조를 정의합니다.

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from exceptions import UnroutableEvent
from utils.constants import SlackPayloadTypes


class EventType(Enum):
    """인터랙션 이벤트 종류"""
    ACTION = "action"
    OPTIONS_REQUEST = "options_request"
    DIALOG_SUBMISSION = "dialog_submission"
    SLASH_COMMAND = "slash_command"


@dataclass(frozen=True)
class UserRef:
    """이벤트를 발생시킨 Slack 사용자"""
    id: str
    display_name: str = ""


@dataclass(frozen=True)
class TeamRef:
    """Slack 워크스페이스"""
    id: str
    domain: str = ""


@dataclass(frozen=True)
class InteractionEvent:
    """라우터가 한 번 소비하는 인바운드 인터랙션 이벤트"""
    event_type: EventType
    callback_id: str
    user: UserRef
    team: TeamRef
    payload: Dict[str, Any] = field(default_factory=dict)
    original_message: Optional[Dict[str, Any]] = None
    response_url: Optional[str] = None
    trigger_id: Optional[str] = None

    @property
    def first_action(self) -> Dict[str, Any]:
        """첫 번째 액션 (없으면 빈 딕셔너리)"""
        actions = self.payload.get("actions") or []
        return actions[0] if actions else {}

    @property
    def action_value(self) -> Optional[str]:
        """버튼 값 또는 선택된 옵션 값"""
        action = self.first_action
        if "selected_option" in action and action["selected_option"]:
            return action["selected_option"].get("value")
        if action.get("selected_options"):
            return action["selected_options"][0].get("value")
        return action.get("value")

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "InteractionEvent":
        """
        Slack 요청 바디를 InteractionEvent로 변환합니다.

        Args:
            body: Bolt가 파싱한 요청 바디

        Returns:
            InteractionEvent: 변환된 이벤트

        Raises:
            UnroutableEvent: 알 수 없는 페이로드 타입인 경우
        """
        body_type = body.get("type")

        # 슬래시 커맨드는 type 없이 폼 필드로 전달됩니다
        if body_type is None and "command" in body:
            return cls(
                event_type=EventType.SLASH_COMMAND,
                callback_id=body["command"],
                user=UserRef(id=body.get("user_id", ""), display_name=body.get("user_name", "")),
                team=TeamRef(id=body.get("team_id", ""), domain=body.get("team_domain", "")),
                payload={"text": body.get("text", "")},
                response_url=body.get("response_url"),
                trigger_id=body.get("trigger_id"),
            )

        user = body.get("user") or {}
        team = body.get("team") or {}
        user_ref = UserRef(id=user.get("id", ""), display_name=user.get("name") or user.get("username", ""))
        team_ref = TeamRef(id=team.get("id", ""), domain=team.get("domain", ""))

        if body_type == SlackPayloadTypes.INTERACTIVE_MESSAGE:
            # 레거시 첨부 메시지 버튼
            return cls(
                event_type=EventType.ACTION,
                callback_id=body.get("callback_id", ""),
                user=user_ref,
                team=team_ref,
                payload={"actions": body.get("actions", [])},
                original_message=body.get("original_message"),
                response_url=body.get("response_url"),
                trigger_id=body.get("trigger_id"),
            )

        if body_type == SlackPayloadTypes.BLOCK_ACTIONS:
            actions = body.get("actions", [])
            return cls(
                event_type=EventType.ACTION,
                callback_id=actions[0]["action_id"] if actions else "",
                user=user_ref,
                team=team_ref,
                payload={"actions": actions},
                original_message=body.get("message"),
                response_url=body.get("response_url"),
                trigger_id=body.get("trigger_id"),
            )

        if body_type == SlackPayloadTypes.BLOCK_SUGGESTION:
            return cls(
                event_type=EventType.OPTIONS_REQUEST,
                callback_id=body.get("action_id", ""),
                user=user_ref,
                team=team_ref,
                payload={"value": body.get("value", "")},
            )

        if body_type == SlackPayloadTypes.DIALOG_SUBMISSION:
            return cls(
                event_type=EventType.DIALOG_SUBMISSION,
                callback_id=body.get("callback_id", ""),
                user=user_ref,
                team=team_ref,
                payload={"submission": body.get("submission") or {}, "state": body.get("state", "")},
                response_url=body.get("response_url"),
            )

        raise UnroutableEvent(str(body_type), body.get("callback_id", ""))
