# services/notion_service.py
# Notion API와 통신하는 모든 로직을 담당합니다. (사용자/동네 레코드 저장소)

import difflib
from typing import Any, Dict, List, Optional

from notion_client import AsyncClient
from notion_client.helpers import async_collect_paginated_api

from config import get_notion_config, AppConfig, NotionConfig
from models.records import Neighborhood, User
from utils.logger import LoggerMixin, get_logger
from utils.error_handler import handle_exceptions
from exceptions import NotionError

logger = get_logger(__name__)

# 동네 이름 유사도 최소값
FUZZY_CUTOFF = 0.5


def _plain_text(prop: Optional[Dict[str, Any]], kind: str) -> Optional[str]:
    """title / rich_text 속성에서 문자열을 꺼냅니다."""
    if not prop or not prop.get(kind):
        return None
    return "".join(part.get("plain_text") or part.get("text", {}).get("content", "") for part in prop[kind])


class NotionService(LoggerMixin):
    """Notion API 서비스 클래스"""

    def __init__(self, config: Optional[NotionConfig] = None, client: Optional[AsyncClient] = None):
        """Notion 서비스 초기화"""
        self.config = config or get_notion_config()
        self.client = client or AsyncClient(auth=self.config.api_key)
        self.user_props = AppConfig.USER_PROPS
        self.neighborhood_props = AppConfig.NEIGHBORHOOD_PROPS

    # --- 사용자 ---

    @handle_exceptions(default_message="사용자 조회에 실패했습니다", wrap_as=NotionError)
    async def find_user_by_id(self, slack_id: str) -> User:
        """
        Slack ID로 사용자 레코드를 조회합니다.

        Raises:
            NotionError: 사용자가 없거나 조회에 실패한 경우
        """
        response = await self.client.databases.query(
            database_id=self.config.users_database_id,
            filter={
                "property": self.user_props["slack_id"],
                "rich_text": {"equals": slack_id}
            }
        )
        results = response.get("results", [])
        if not results:
            raise NotionError(f"사용자를 찾을 수 없습니다: {slack_id}")

        self.log_info(f"사용자 조회 완료: {slack_id}")
        return self._parse_user(results[0])

    @handle_exceptions(default_message="약관 동의 저장에 실패했습니다", wrap_as=NotionError)
    async def set_policy_agreement(self, user: User, agreed: bool) -> User:
        """사용자의 약관 동의 여부를 저장합니다."""
        page = await self.client.pages.update(
            page_id=user.page_id,
            properties={self.user_props["agreed_to_policy"]: {"checkbox": agreed}}
        )
        self.log_info(f"약관 동의 저장: {user.slack_id} -> {agreed}")
        return self._parse_user(page)

    @handle_exceptions(default_message="칭찬 횟수 저장에 실패했습니다", wrap_as=NotionError)
    async def increment_kudos(self, user: User, comment: str) -> User:
        """사용자의 칭찬 횟수를 1 늘리고 마지막 칭찬 내용을 저장합니다."""
        page = await self.client.pages.update(
            page_id=user.page_id,
            properties={
                self.user_props["kudos_count"]: {"number": user.kudos_count + 1},
                self.user_props["last_kudos_comment"]: {
                    "rich_text": [{"type": "text", "text": {"content": comment}}]
                }
            }
        )
        self.log_info(f"칭찬 횟수 증가: {user.slack_id} -> {user.kudos_count + 1}")
        return self._parse_user(page)

    def _parse_user(self, page: Dict[str, Any]) -> User:
        props = page.get("properties", {})
        kudos = props.get(self.user_props["kudos_count"], {}).get("number")
        return User(
            page_id=page["id"],
            slack_id=_plain_text(props.get(self.user_props["slack_id"]), "rich_text") or "",
            agreed_to_policy=bool(props.get(self.user_props["agreed_to_policy"], {}).get("checkbox")),
            kudos_count=int(kudos or 0),
            last_kudos_comment=_plain_text(props.get(self.user_props["last_kudos_comment"]), "rich_text")
        )

    # --- 동네 ---

    @handle_exceptions(default_message="동네 조회에 실패했습니다", wrap_as=NotionError)
    async def find_neighborhood_by_id(self, page_id: str) -> Neighborhood:
        """페이지 ID로 동네 레코드를 조회합니다."""
        page = await self.client.pages.retrieve(page_id=page_id)
        if page.get("archived"):
            raise NotionError(f"삭제된 동네입니다: {page_id}")
        return self._parse_neighborhood(page)

    @handle_exceptions(default_message="동네 검색에 실패했습니다", wrap_as=NotionError)
    async def fuzzy_find_neighborhoods(self, text: str) -> List[Neighborhood]:
        """
        입력 문자열과 비슷한 이름의 동네를 유사도 순으로 반환합니다.

        Args:
            text: 사용자가 입력한 문자열 (비어 있으면 전체를 이름순으로)

        Returns:
            List[Neighborhood]: 일치하는 동네 목록 (없으면 빈 목록)
        """
        pages = await async_collect_paginated_api(
            self.client.databases.query,
            database_id=self.config.neighborhoods_database_id
        )
        neighborhoods = [self._parse_neighborhood(page) for page in pages]

        query = (text or "").strip().lower()
        if not query:
            return sorted(neighborhoods, key=lambda n: n.name.lower())

        scored = []
        for neighborhood in neighborhoods:
            name = neighborhood.name.lower()
            if query in name:
                score = 1.0 + len(query) / max(len(name), 1)
            else:
                score = difflib.SequenceMatcher(None, query, name).ratio()
            if score >= FUZZY_CUTOFF:
                scored.append((score, neighborhood))

        scored.sort(key=lambda item: (-item[0], item[1].name.lower()))
        self.log_info(f"동네 검색 완료: '{text}' -> {len(scored)}개")
        return [neighborhood for _, neighborhood in scored]

    def _parse_neighborhood(self, page: Dict[str, Any]) -> Neighborhood:
        props = page.get("properties", {})
        return Neighborhood(
            page_id=page["id"],
            name=_plain_text(props.get(self.neighborhood_props["name"]), "title") or "",
            link=props.get(self.neighborhood_props["link"], {}).get("url")
        )


_notion_service: Optional[NotionService] = None


def get_notion_service() -> NotionService:
    """공유 NotionService 인스턴스를 반환합니다."""
    global _notion_service
    if _notion_service is None:
        _notion_service = NotionService()
    return _notion_service
