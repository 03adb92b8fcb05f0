# config.py
# 프로젝트의 모든 설정 정보를 중앙에서 관리합니다.

import os
from typing import Dict, Optional
from dataclasses import dataclass


@dataclass
class NotionConfig:
    """Notion 관련 설정"""
    api_key: str
    users_database_id: str
    neighborhoods_database_id: str

    @classmethod
    def from_env(cls) -> "NotionConfig":
        """환경변수에서 설정을 로드합니다."""
        return cls(
            api_key=os.environ["NOTION_API_KEY"],
            users_database_id=os.environ["NOTION_USERS_DATABASE_ID"],
            neighborhoods_database_id=os.environ["NOTION_NEIGHBORHOODS_DATABASE_ID"]
        )


@dataclass
class SlackConfig:
    """Slack 관련 설정"""
    bot_token: str
    app_token: Optional[str] = None
    signing_secret: Optional[str] = None
    command: str = "/tradbot"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "SlackConfig":
        """환경변수에서 설정을 로드합니다."""
        return cls(
            bot_token=os.environ["SLACK_BOT_TOKEN"],
            app_token=os.environ.get("SLACK_APP_TOKEN"),
            signing_secret=os.environ.get("SLACK_SIGNING_SECRET"),
            command=os.environ.get("TRADBOT_COMMAND", "/tradbot"),
            port=int(os.environ.get("PORT", "3000"))
        )

    @property
    def socket_mode(self) -> bool:
        """앱 토큰이 있으면 소켓 모드로 실행합니다."""
        return bool(self.app_token)


@dataclass
class GatewayConfig:
    """TRÅDFRI 게이트웨이 관련 설정"""
    host: str
    identity: str
    psk: Optional[str] = None
    security_code: Optional[str] = None
    settle_delay: float = 1.0

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """환경변수에서 설정을 로드합니다."""
        return cls(
            host=os.environ["TRADFRI_GATEWAY_HOST"],
            identity=os.environ["TRADFRI_IDENTITY"],
            psk=os.environ.get("TRADFRI_PSK"),
            security_code=os.environ.get("TRADFRI_SECURITY_CODE"),
            settle_delay=float(os.environ.get("TRADFRI_SETTLE_DELAY", "1.0"))
        )


class AppConfig:
    """애플리케이션 전체 설정"""

    # 자동완성 결과 최대 개수 (Slack 제한은 100개)
    MAX_NEIGHBORHOOD_OPTIONS: int = 20

    # 한 페이지에 표시할 기기 수 (기기당 3블록, 메시지당 최대 50블록)
    DEVICES_PER_PAGE: int = 15

    # Notion 사용자 데이터베이스 속성 매핑
    USER_PROPS: Dict[str, str] = {
        "name": "Name",                     # 제목 속성
        "slack_id": "Slack ID",             # Text 타입
        "agreed_to_policy": "Agreed to Policy",  # Checkbox 타입
        "kudos_count": "Kudos",             # Number 타입
        "last_kudos_comment": "Last Kudos",  # Text 타입
    }

    # Notion 동네 데이터베이스 속성 매핑
    NEIGHBORHOOD_PROPS: Dict[str, str] = {
        "name": "Name",    # 제목 속성
        "link": "Link",    # URL 타입
    }


# 전역 설정 인스턴스들
def get_notion_config() -> NotionConfig:
    """Notion 설정을 반환합니다."""
    return NotionConfig.from_env()


def get_slack_config() -> SlackConfig:
    """Slack 설정을 반환합니다."""
    return SlackConfig.from_env()


def get_gateway_config() -> GatewayConfig:
    """게이트웨이 설정을 반환합니다."""
    return GatewayConfig.from_env()
