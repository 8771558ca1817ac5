"""
Postboard Backend: Post Service Unit Tests
============================================

What:  Tests for PostService outcomes (list, get, create, update, delete).
How:   Mock AsyncSession; no database.

What we test:
    ✅ Successful operations return Result.ok with PostResponse data
    ✅ Missing rows produce NOT_FOUND "Post not found"
    ✅ Update with nothing to apply is rejected before storage is touched
    ✅ Storage faults are rolled back and reported with a fixed message
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql.functions import FunctionElement

from postboard.errors import ErrorKind
from postboard.schemas.post import PostCreate, PostUpdate
from postboard.services.post_service import PostService


def storage_failure() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("database is locked"))


class TestPostServiceList:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_list_posts_returns_rows(self, mock_db_session, sample_post):
        newer = SimpleNamespace(**{**vars(sample_post), "id": 2, "title": "Second"})
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = [newer, sample_post]
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_posts(mock_db_session)

        assert result.success is True
        assert [post.id for post in result.data] == [2, 1]
        assert result.data[0].title == "Second"

    @pytest.mark.asyncio
    async def test_list_posts_empty(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_posts(mock_db_session)

        assert result.success is True
        assert result.data == []
        assert result.to_envelope() == {"success": True, "data": []}

    @pytest.mark.asyncio
    async def test_list_posts_storage_fault(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=storage_failure())

        result = await self.service.list_posts(mock_db_session)

        assert result.success is False
        assert result.kind is ErrorKind.STORAGE
        assert result.error == "Failed to fetch posts"
        mock_db_session.rollback.assert_awaited_once()


class TestPostServiceGet:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_get_post_found(self, mock_db_session, sample_post):
        mock_db_session.get.return_value = sample_post

        result = await self.service.get_post(mock_db_session, 1)

        assert result.success is True
        assert result.data.id == 1
        assert result.data.content == sample_post.content

    @pytest.mark.asyncio
    async def test_get_post_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        result = await self.service.get_post(mock_db_session, 999999)

        assert result.success is False
        assert result.kind is ErrorKind.NOT_FOUND
        assert result.error == "Post not found"

    @pytest.mark.asyncio
    async def test_get_post_storage_fault_hides_detail(self, mock_db_session):
        mock_db_session.get = AsyncMock(side_effect=storage_failure())

        result = await self.service.get_post(mock_db_session, 1)

        assert result.error == "Failed to fetch post"
        assert "locked" not in str(result.to_envelope())


class TestPostServiceCreate:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_create_post_returns_stored_row(self, mock_db_session):
        stamp = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

        async def fake_refresh(post):
            # What the database assigns on INSERT
            post.id = 7
            post.created_at = stamp
            post.updated_at = stamp

        mock_db_session.refresh = AsyncMock(side_effect=fake_refresh)

        result = await self.service.create_post(
            mock_db_session, PostCreate(title="A", content="B")
        )

        assert result.success is True
        assert result.data.id == 7
        assert result.data.title == "A"
        assert result.data.content == "B"
        assert result.data.created_at == result.data.updated_at
        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_post_storage_fault(self, mock_db_session):
        mock_db_session.flush = AsyncMock(side_effect=storage_failure())

        result = await self.service.create_post(
            mock_db_session, PostCreate(title="A", content="B")
        )

        assert result.kind is ErrorKind.STORAGE
        assert result.error == "Failed to create post"
        mock_db_session.rollback.assert_awaited_once()


class TestPostServiceUpdate:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_update_title_only_keeps_content(self, mock_db_session, sample_post):
        later = sample_post.updated_at + timedelta(minutes=5)
        seen = {}

        async def fake_refresh(post):
            seen["updated_at"] = post.updated_at
            post.updated_at = later

        mock_db_session.get.return_value = sample_post
        mock_db_session.refresh = AsyncMock(side_effect=fake_refresh)

        result = await self.service.update_post(
            mock_db_session, 1, PostUpdate(title="Renamed")
        )

        assert result.success is True
        assert result.data.title == "Renamed"
        assert result.data.content == "Hello from the first post."
        assert result.data.updated_at == later
        # updated_at is assigned by the database, not the application clock
        assert isinstance(seen["updated_at"], FunctionElement)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_ignores_empty_fields(self, mock_db_session, sample_post):
        mock_db_session.get.return_value = sample_post

        async def fake_refresh(post):
            post.updated_at = sample_post.created_at

        mock_db_session.refresh = AsyncMock(side_effect=fake_refresh)

        result = await self.service.update_post(
            mock_db_session, 1, PostUpdate(title="", content="New body")
        )

        assert result.data.title == "First post"
        assert result.data.content == "New body"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [PostUpdate(), PostUpdate(title=""), PostUpdate(title=None, content="")],
    )
    async def test_update_without_fields_is_rejected(self, mock_db_session, payload):
        result = await self.service.update_post(mock_db_session, 1, payload)

        assert result.success is False
        assert result.kind is ErrorKind.VALIDATION
        assert result.error == "No fields to update"
        mock_db_session.get.assert_not_awaited()
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_unknown_post(self, mock_db_session):
        mock_db_session.get.return_value = None

        result = await self.service.update_post(
            mock_db_session, 42, PostUpdate(content="x")
        )

        assert result.kind is ErrorKind.NOT_FOUND
        assert result.error == "Post not found"
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_storage_fault(self, mock_db_session, sample_post):
        mock_db_session.get.return_value = sample_post
        mock_db_session.flush = AsyncMock(side_effect=storage_failure())

        result = await self.service.update_post(
            mock_db_session, 1, PostUpdate(title="x")
        )

        assert result.error == "Failed to update post"
        mock_db_session.rollback.assert_awaited_once()


class TestPostServiceDelete:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_delete_post(self, mock_db_session, sample_post):
        mock_db_session.get.return_value = sample_post

        result = await self.service.delete_post(mock_db_session, 1)

        assert result.to_envelope() == {"success": True, "data": {"id": 1}}
        mock_db_session.delete.assert_awaited_once_with(sample_post)

    @pytest.mark.asyncio
    async def test_delete_unknown_post(self, mock_db_session):
        mock_db_session.get.return_value = None

        result = await self.service.delete_post(mock_db_session, 1)

        assert result.to_envelope() == {"success": False, "error": "Post not found"}
        mock_db_session.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_storage_fault(self, mock_db_session, sample_post):
        mock_db_session.get.return_value = sample_post
        mock_db_session.delete = AsyncMock(side_effect=storage_failure())

        result = await self.service.delete_post(mock_db_session, 1)

        assert result.error == "Failed to delete post"
