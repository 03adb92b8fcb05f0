# utils/logger.py
# 통합 로깅 시스템을 제공합니다.

import logging
import os
import sys
from typing import Optional


def setup_logging(level: Optional[str] = None, format_string: Optional[str] = None,
                  log_file: Optional[str] = "app.log") -> None:
    """
    프로젝트 전체의 로깅을 설정합니다.

    Args:
        level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL) - 없으면 LOG_LEVEL 환경변수, 기본값 WARNING
        format_string: 로그 포맷 문자열
        log_file: 로그 파일 경로 (None이면 파일 로깅 안 함)
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "WARNING")

    if format_string is None:
        format_string = (
            "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
        )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
        handlers=handlers
    )


def get_logger(name: str) -> logging.Logger:
    """
    모듈별 로거를 반환합니다.

    Args:
        name: 로거 이름 (보통 __name__)

    Returns:
        logging.Logger: 설정된 로거 인스턴스
    """
    return logging.getLogger(name)


class LoggerMixin:
    """로깅 기능을 제공하는 믹스인 클래스"""

    @property
    def logger(self) -> logging.Logger:
        """클래스별 로거 반환"""
        return get_logger(self.__class__.__module__ + "." + self.__class__.__name__)

    def log_info(self, message: str, **kwargs) -> None:
        """정보 로그"""
        self.logger.info(message, extra=kwargs)

    def log_error(self, message: str, exc_info: bool = True, **kwargs) -> None:
        """에러 로그"""
        self.logger.error(message, exc_info=exc_info, extra=kwargs)

    def log_warning(self, message: str, **kwargs) -> None:
        """경고 로그"""
        self.logger.warning(message, extra=kwargs)
