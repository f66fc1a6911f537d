"""Unit tests for MediaRecordDAO.

Tests verify:
- DAO methods return Pydantic models, not SQLAlchemy objects
- Secondary fields stay unset until a thumbnail is attached
- Like toggling keeps the denormalized counter in step
"""

import uuid

import pytest

from app.dao.media_dao import MediaRecordDAO
from app.database import Database
from app.enums import ContentType
from app.models.domain import LikeState, MediaRecord


@pytest.fixture
def media_dao(test_db: Database) -> MediaRecordDAO:
    return MediaRecordDAO(test_db)


async def _create(dao: MediaRecordDAO, content_type=ContentType.VIDEOS, owner_id="sailor-1"):
    return await dao.create(
        str(uuid.uuid4()),
        content_type,
        public_id="boats/harbour",
        url="https://res.cloudinary.com/demo/video/upload/harbour.mp4",
        resource_type="video",
        title="Harbour",
        owner_id=owner_id,
        tags=["harbour", "dawn"],
        format="mp4",
        duration=12.5,
    )


class TestCreateAndGet:
    async def test_create_returns_pydantic(self, media_dao):
        record = await _create(media_dao)

        assert isinstance(record, MediaRecord)
        assert record.content_type == ContentType.VIDEOS
        assert record.tags == ["harbour", "dawn"]
        assert record.duration == 12.5
        assert record.views == 0
        assert record.likes_count == 0
        assert record.thumbnail_url is None
        assert record.thumbnail_public_id is None

    async def test_get_by_id_round_trip(self, media_dao):
        created = await _create(media_dao)

        fetched = await media_dao.get_by_id(created.id)

        assert isinstance(fetched, MediaRecord)
        assert fetched.id == created.id
        assert fetched.public_id == "boats/harbour"

    async def test_get_missing_returns_none(self, media_dao):
        assert await media_dao.get_by_id("nope") is None


class TestList:
    async def test_filters_by_collection_and_orders_newest_first(self, media_dao):
        first = await _create(media_dao)
        second = await _create(media_dao)
        await _create(media_dao, content_type=ContentType.PHOTOS)

        records = await media_dao.list_by_content_type(ContentType.VIDEOS)

        assert [r.id for r in records] == [second.id, first.id]

    async def test_filters_by_owner(self, media_dao):
        mine = await _create(media_dao, owner_id="sailor-1")
        await _create(media_dao, owner_id="sailor-2")

        records = await media_dao.list_by_content_type(
            ContentType.VIDEOS, owner_id="sailor-1"
        )

        assert [r.id for r in records] == [mine.id]


class TestSecondaryAsset:
    async def test_sets_only_secondary_fields(self, media_dao):
        created = await _create(media_dao)

        updated = await media_dao.set_secondary_asset(
            created.id, "https://res.cloudinary.com/demo/image/upload/t.jpg", "thumbs/t"
        )

        assert updated.thumbnail_url == "https://res.cloudinary.com/demo/image/upload/t.jpg"
        assert updated.thumbnail_public_id == "thumbs/t"
        assert updated.public_id == created.public_id
        assert updated.url == created.url
        assert updated.title == created.title
        assert updated.updated_at >= created.updated_at

    async def test_missing_record_returns_none(self, media_dao):
        assert await media_dao.set_secondary_asset("nope", "https://x/t.jpg") is None


class TestDeleteAndViews:
    async def test_delete_removes_record_and_likes(self, media_dao):
        created = await _create(media_dao)
        await media_dao.toggle_like(created.id, "sailor-2")

        assert await media_dao.delete(created.id) is True
        assert await media_dao.get_by_id(created.id) is None
        assert await media_dao.delete(created.id) is False

    async def test_increment_views(self, media_dao):
        created = await _create(media_dao)

        assert await media_dao.increment_views(created.id) is True
        assert await media_dao.increment_views(created.id) is True

        fetched = await media_dao.get_by_id(created.id)
        assert fetched.views == 2

    async def test_increment_views_missing(self, media_dao):
        assert await media_dao.increment_views("nope") is False


class TestToggleLike:
    async def test_like_then_unlike(self, media_dao):
        created = await _create(media_dao)

        liked = await media_dao.toggle_like(created.id, "sailor-2")
        assert liked == LikeState(liked=True, likes_count=1)

        other = await media_dao.toggle_like(created.id, "sailor-3")
        assert other == LikeState(liked=True, likes_count=2)

        unliked = await media_dao.toggle_like(created.id, "sailor-2")
        assert unliked == LikeState(liked=False, likes_count=1)

        fetched = await media_dao.get_by_id(created.id)
        assert fetched.likes_count == 1

    async def test_missing_record_returns_none(self, media_dao):
        assert await media_dao.toggle_like("nope", "sailor-2") is None
