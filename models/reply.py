# models/reply.py
# 핸들러 결과와 Slack 응답 페이로드 타입을 정의합니다.

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

SlackBlocks = List[Dict[str, Any]]


@dataclass(frozen=True)
class Reply:
    """렌더링된 Slack 응답 페이로드 (즉시 응답과 후속 전송 모두에 사용)"""
    text: Optional[str] = None
    blocks: Optional[SlackBlocks] = None
    attachments: Optional[List[Dict[str, Any]]] = None
    response_type: Optional[str] = None
    replace_original: Optional[bool] = None
    options: Optional[List[Dict[str, Any]]] = None
    errors: Optional[List[Dict[str, str]]] = None

    @property
    def is_empty(self) -> bool:
        """빈 ack 응답인지 확인"""
        return not self.to_dict()

    @property
    def is_message(self) -> bool:
        """메시지 본문을 담고 있는지 확인"""
        return any(value is not None for value in (self.text, self.blocks, self.attachments))

    def to_dict(self) -> Dict[str, Any]:
        """설정된 필드만 딕셔너리로 변환"""
        return {
            key: value
            for key, value in (
                ("text", self.text),
                ("blocks", self.blocks),
                ("attachments", self.attachments),
                ("response_type", self.response_type),
                ("replace_original", self.replace_original),
                ("options", self.options),
                ("errors", self.errors),
            )
            if value is not None
        }


PushFunc = Callable[[Reply], Awaitable[None]]
DeferredWork = Callable[[PushFunc], Awaitable[None]]


@dataclass(frozen=True)
class HandlerOutcome:
    """핸들러 결과: 즉시 응답과 선택적인 후속 작업"""
    immediate: Reply
    deferred: Optional[DeferredWork] = None


@dataclass(frozen=True)
class FieldError:
    """필드 단위 유효성 검사 오류"""
    name: str
    error: str


# --- CommandResult ---

class CommandResult:
    """핸들러가 만들어내는 도메인 결과의 기본 클래스"""


@dataclass(frozen=True)
class TextResult(CommandResult):
    text: str
    replace_original: Optional[bool] = None


@dataclass(frozen=True)
class StructuredResult(CommandResult):
    blocks: SlackBlocks
    text: Optional[str] = None


@dataclass(frozen=True)
class ValidationErrorsResult(CommandResult):
    errors: List[FieldError] = field(default_factory=list)


@dataclass(frozen=True)
class DeferredResult(CommandResult):
    """결과가 나중에 별도 전송으로 전달됨"""
