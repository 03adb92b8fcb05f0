# exceptions.py
# 프로젝트에서 사용할 사용자 정의 예외를 정의합니다.

from typing import Dict, List, Optional


class TradbotError(Exception):
    """모든 Trådbot 예외의 기본 클래스"""
    pass


class ValidationError(TradbotError):
    """입력값 유효성 검사 실패 시 발생하는 예외"""

    def __init__(self, message: str, field_errors: Optional[List[Dict[str, str]]] = None):
        """
        Args:
            message: 기본 에러 메시지
            field_errors: 필드별 에러 목록 ({"name": ..., "error": ...})
        """
        super().__init__(message)
        self.field_errors = field_errors or []


class LookupFailure(TradbotError):
    """레코드를 찾을 수 없거나 조회가 실패했을 때 발생하는 예외"""
    pass


class NotionError(LookupFailure):
    """Notion API 관련 작업 실패 시 발생하는 예외"""
    pass


class GatewayUnavailable(TradbotError):
    """게이트웨이 연결 또는 명령 전송 실패 시 발생하는 예외"""
    pass


class UnroutableEvent(TradbotError):
    """처리할 핸들러가 없는 인터랙션 이벤트"""

    def __init__(self, event_type: str, callback_id: str):
        super().__init__(f"처리할 핸들러가 없습니다: ({event_type}, {callback_id})")
        self.event_type = event_type
        self.callback_id = callback_id
