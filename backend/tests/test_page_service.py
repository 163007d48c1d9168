"""
Keep API — Page Service Unit Tests
====================================

What:  PageService with a mocked session: append-on-create, allow-listed
       PATCH, homepage lookup and the all-or-nothing reorder.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import OperationalError

from keep_api.exceptions import DatabaseError, NotFoundError, ValidationError
from keep_api.models.page import Page
from keep_api.services.page_service import PageService


def _page(**overrides):
    data = dict(id=1, title="Home", content="Hello", slug="home", homepage=False, position=0)
    data.update(overrides)
    return Page(**data)


class TestPageServiceCreate:
    @pytest.mark.asyncio
    async def test_create_page_appends_at_end(self, mock_db_session):
        mock_db_session.scalar.return_value = 3

        page = await PageService().create_page(
            mock_db_session, title="About", content="...", slug="about"
        )

        assert page.position == 3
        assert page.homepage is False
        mock_db_session.add.assert_called_once_with(page)

    @pytest.mark.asyncio
    async def test_create_first_page_gets_position_zero(self, mock_db_session):
        mock_db_session.scalar.return_value = None

        page = await PageService().create_page(
            mock_db_session, title="Home", content="", slug="", homepage=True
        )

        assert page.position == 0
        assert page.homepage is True


class TestPageServiceUpdate:
    def setup_method(self):
        self.service = PageService()

    @pytest.mark.asyncio
    async def test_patch_title_leaves_other_columns(self, mock_db_session):
        page = _page(id=2, position=4)
        mock_db_session.get.return_value = page

        result = await self.service.update_page(mock_db_session, 2, {"title": "X"})

        assert result.title == "X"
        assert result.content == "Hello"
        assert result.slug == "home"
        assert result.position == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize("column", ["position", "id", "title; DROP TABLE pages"])
    async def test_patch_rejects_columns_outside_allow_list(self, mock_db_session, column):
        with pytest.raises(ValidationError):
            await self.service.update_page(mock_db_session, 2, {column: 1})
        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_patch_rejects_null_homepage(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.update_page(mock_db_session, 2, {"homepage": None})

    @pytest.mark.asyncio
    async def test_replace_keeps_position(self, mock_db_session):
        page = _page(id=2, position=1)
        mock_db_session.get.return_value = page

        result = await self.service.replace_page(
            mock_db_session, 2, title="T", content="C", slug="s", homepage=True
        )

        assert (result.title, result.content, result.slug, result.homepage) == ("T", "C", "s", True)
        assert result.position == 1

    @pytest.mark.asyncio
    async def test_delete_missing_page(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.delete_page(mock_db_session, 9)


class TestHomepage:
    @pytest.mark.asyncio
    async def test_homepage_found(self, mock_db_session):
        page = _page(homepage=True)
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = page
        mock_db_session.execute.return_value = mock_result

        assert await PageService().get_homepage(mock_db_session) is page

    @pytest.mark.asyncio
    async def test_no_homepage_is_not_found(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError):
            await PageService().get_homepage(mock_db_session)


class TestReorder:
    def setup_method(self):
        self.service = PageService()

    @pytest.mark.asyncio
    async def test_one_update_per_entry(self, mock_db_session):
        result = await self.service.reorder(mock_db_session, [3, 1, 2])

        assert result == [3, 1, 2]
        assert mock_db_session.execute.await_count == 3
        statements = [call.args[0] for call in mock_db_session.execute.await_args_list]
        params = [stmt.compile().params for stmt in statements]
        assert [(p["position"], p["id_1"]) for p in params] == [(0, 3), (1, 1), (2, 2)]

    @pytest.mark.asyncio
    async def test_ids_outside_integer_range_are_skipped(self, mock_db_session):
        result = await self.service.reorder(mock_db_session, [3, 2**31, 1])

        assert result == [3, 2**31, 1]
        statements = [call.args[0] for call in mock_db_session.execute.await_args_list]
        params = [stmt.compile().params for stmt in statements]
        assert [(p["position"], p["id_1"]) for p in params] == [(0, 3), (2, 1)]

    @pytest.mark.asyncio
    async def test_empty_order_is_a_no_op(self, mock_db_session):
        assert await self.service.reorder(mock_db_session, []) == []
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, "3,1,2", {"3": 0}, 5])
    async def test_non_list_is_rejected(self, mock_db_session, payload):
        with pytest.raises(ValidationError, match="Invalid order data"):
            await self.service.reorder(mock_db_session, payload)

    @pytest.mark.asyncio
    async def test_failure_midway_rolls_back(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=[None, OperationalError("UPDATE", {}, Exception("locked"))]
        )

        with pytest.raises(DatabaseError, match="Error updating page order"):
            await self.service.reorder(mock_db_session, [3, 1, 2])

        mock_db_session.rollback.assert_awaited_once()
