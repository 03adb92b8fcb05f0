"""
Unit tests for the Notion-backed user and neighborhood store.

The notion_client AsyncClient is replaced with AsyncMock endpoints.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from config import NotionConfig
from exceptions import NotionError
from models.records import User
from services.notion_service import NotionService


def _user_page(page_id="page-1", slack_id="U999", agreed=False, kudos=4):
    return {
        "id": page_id,
        "properties": {
            "Name": {"title": [{"plain_text": "Bob"}]},
            "Slack ID": {"rich_text": [{"plain_text": slack_id}]},
            "Agreed to Policy": {"checkbox": agreed},
            "Kudos": {"number": kudos},
            "Last Kudos": {"rich_text": []},
        },
    }


def _hood_page(page_id, name, link=None):
    return {
        "id": page_id,
        "properties": {
            "Name": {"title": [{"plain_text": name}]},
            "Link": {"url": link},
        },
    }


def _query_response(pages):
    return {"results": pages, "has_more": False, "next_cursor": None}


@pytest.fixture
def client():
    client = MagicMock()
    client.databases.query = AsyncMock(return_value=_query_response([]))
    client.pages.update = AsyncMock()
    client.pages.retrieve = AsyncMock()
    return client


@pytest.fixture
def service(client):
    config = NotionConfig(api_key="secret", users_database_id="users-db", neighborhoods_database_id="hoods-db")
    return NotionService(config=config, client=client)


class TestUsers:
    @pytest.mark.asyncio
    async def test_find_user_by_slack_id(self, service, client):
        client.databases.query.return_value = _query_response([_user_page()])

        user = await service.find_user_by_id("U999")

        assert user == User(page_id="page-1", slack_id="U999", agreed_to_policy=False, kudos_count=4,
                            last_kudos_comment=None)
        kwargs = client.databases.query.await_args.kwargs
        assert kwargs["database_id"] == "users-db"
        assert kwargs["filter"] == {"property": "Slack ID", "rich_text": {"equals": "U999"}}

    @pytest.mark.asyncio
    async def test_missing_user(self, service):
        with pytest.raises(NotionError):
            await service.find_user_by_id("U000")

    @pytest.mark.asyncio
    async def test_api_failure_is_wrapped(self, service, client):
        client.databases.query.side_effect = RuntimeError("rate limited")

        with pytest.raises(NotionError) as excinfo:
            await service.find_user_by_id("U999")
        assert "rate limited" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_set_policy_agreement(self, service, client):
        client.pages.update.return_value = _user_page(agreed=True)

        user = await service.set_policy_agreement(User(page_id="page-1", slack_id="U999"), True)

        assert user.agreed_to_policy is True
        client.pages.update.assert_awaited_once_with(
            page_id="page-1", properties={"Agreed to Policy": {"checkbox": True}}
        )

    @pytest.mark.asyncio
    async def test_increment_kudos(self, service, client):
        client.pages.update.return_value = _user_page(kudos=5)

        user = await service.increment_kudos(User(page_id="page-1", slack_id="U999", kudos_count=4), "great work")

        assert user.kudos_count == 5
        properties = client.pages.update.await_args.kwargs["properties"]
        assert properties["Kudos"] == {"number": 5}
        assert properties["Last Kudos"]["rich_text"][0]["text"]["content"] == "great work"


class TestNeighborhoods:
    @pytest.mark.asyncio
    async def test_find_by_id(self, service, client):
        client.pages.retrieve.return_value = _hood_page("n-1", "Mission", "https://example.com/mission")

        neighborhood = await service.find_neighborhood_by_id("n-1")

        assert neighborhood.name == "Mission"
        assert neighborhood.link == "https://example.com/mission"

    @pytest.mark.asyncio
    async def test_archived_neighborhood(self, service, client):
        page = _hood_page("n-1", "Mission")
        page["archived"] = True
        client.pages.retrieve.return_value = page

        with pytest.raises(NotionError):
            await service.find_neighborhood_by_id("n-1")

    @pytest.mark.asyncio
    async def test_fuzzy_find_ranks_substring_first(self, service, client):
        client.databases.query.return_value = _query_response([
            _hood_page("n-1", "Mission"),
            _hood_page("n-2", "Mission Bay"),
            _hood_page("n-3", "Marina"),
            _hood_page("n-4", "Sunset"),
        ])

        results = await service.fuzzy_find_neighborhoods("mission")

        assert [n.name for n in results] == ["Mission", "Mission Bay"]

    @pytest.mark.asyncio
    async def test_fuzzy_find_tolerates_typos(self, service, client):
        client.databases.query.return_value = _query_response([
            _hood_page("n-1", "Mission"),
            _hood_page("n-4", "Sunset"),
        ])

        results = await service.fuzzy_find_neighborhoods("misison")

        assert [n.name for n in results] == ["Mission"]

    @pytest.mark.asyncio
    async def test_fuzzy_find_no_match(self, service, client):
        client.databases.query.return_value = _query_response([_hood_page("n-4", "Sunset")])

        assert await service.fuzzy_find_neighborhoods("xyzzy") == []

    @pytest.mark.asyncio
    async def test_empty_query_lists_all_sorted(self, service, client):
        client.databases.query.return_value = _query_response([
            _hood_page("n-4", "Sunset"),
            _hood_page("n-1", "Mission"),
        ])

        results = await service.fuzzy_find_neighborhoods("")

        assert [n.name for n in results] == ["Mission", "Sunset"]
