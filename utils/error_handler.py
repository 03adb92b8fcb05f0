# utils/error_handler.py
# 표준화된 에러 처리 시스템을 제공합니다.

from typing import Callable, Any, Awaitable
from functools import wraps
from .logger import get_logger
from .constants import ErrorMessages
from exceptions import (
    TradbotError, ValidationError, LookupFailure, GatewayUnavailable, UnroutableEvent
)

logger = get_logger(__name__)


class ErrorHandler:
    """표준화된 에러 처리를 제공하는 클래스"""

    @staticmethod
    def log_error(user_id: str, error: Exception, context: str = "명령 처리") -> None:
        """
        예외 분류에 맞는 레벨로 에러를 기록합니다.

        Args:
            user_id: 사용자 ID
            error: 발생한 에러
            context: 에러 발생 컨텍스트
        """
        if isinstance(error, ValidationError):
            logger.info(f"사용자 입력 오류 - 사용자: {user_id}, 컨텍스트: {context}: {error}")
        elif isinstance(error, UnroutableEvent):
            logger.warning(f"처리할 수 없는 이벤트 - 사용자: {user_id}, 컨텍스트: {context}: {error}")
        elif isinstance(error, (LookupFailure, GatewayUnavailable)):
            logger.error(f"{context} 실패 - 사용자: {user_id}: {error}", exc_info=error)
        else:
            logger.error(f"{context} 중 예상치 못한 오류 - 사용자: {user_id}", exc_info=error)

    @staticmethod
    async def handle_deferred_error(
        user_id: str,
        error: Exception,
        push_func: Callable[[Any], Awaitable[None]],
        message: str = ErrorMessages.GENERIC,
        context: str = "후속 처리"
    ) -> None:
        """
        비동기 후속 처리 중 발생한 에러를 기록하고 에러 응답을 전송합니다.

        Args:
            user_id: 사용자 ID
            error: 발생한 에러
            push_func: 렌더링된 응답을 전송하는 함수
            message: 사용자에게 보여줄 에러 메시지
            context: 에러 발생 컨텍스트
        """
        # 순환 임포트 방지
        from views.response_view import render_error

        ErrorHandler.log_error(user_id, error, context)
        try:
            await push_func(render_error(message))
        except Exception as push_error:
            logger.error(f"에러 응답 전송 실패 - 사용자: {user_id}: {push_error}", exc_info=True)


def handle_exceptions(
    default_message: str = "처리 중 오류가 발생했습니다",
    wrap_as: type = LookupFailure
):
    """
    비동기 함수 데코레이터: 예외를 자동으로 로깅하고 예외 분류로 변환합니다.

    Args:
        default_message: 기본 에러 메시지
        wrap_as: 분류되지 않은 예외를 감쌀 예외 타입
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            func_logger = get_logger(func.__module__)
            try:
                return await func(*args, **kwargs)
            except ValidationError as e:
                func_logger.info(f"{func.__name__} 에서 입력값 오류: {e}")
                raise
            except TradbotError as e:
                func_logger.error(f"{func.__name__} 에서 오류: {e}")
                raise
            except Exception as e:
                func_logger.error(f"{func.__name__} 에서 예상치 못한 에러", exc_info=True)
                raise wrap_as(f"{default_message}: {e}") from e
        return wrapper
    return decorator
