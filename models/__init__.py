# models/__init__.py
# 데이터 모델과 타입 정의를 담당하는 패키지입니다.

from .interaction import EventType, InteractionEvent, TeamRef, UserRef
from .device import DeviceKind, DeviceSnapshot
from .records import Neighborhood, User
from .reply import (
    CommandResult, DeferredResult, FieldError, HandlerOutcome, Reply,
    StructuredResult, TextResult, ValidationErrorsResult
)

__all__ = [
    "EventType",
    "InteractionEvent",
    "TeamRef",
    "UserRef",
    "DeviceKind",
    "DeviceSnapshot",
    "Neighborhood",
    "User",
    "CommandResult",
    "DeferredResult",
    "FieldError",
    "HandlerOutcome",
    "Reply",
    "StructuredResult",
    "TextResult",
    "ValidationErrorsResult",
]
