"""Media record data access operations."""

from datetime import datetime

from sqlalchemy import delete, select, update

from app.dao.base import BaseDAO
from app.enums import ContentType
from app.models.domain import LikeState, MediaRecord
from app.models.orm import MediaCommentModel, MediaLikeModel, MediaRecordModel


def _to_domain(model: MediaRecordModel) -> MediaRecord:
    return MediaRecord(
        id=model.id,
        content_type=ContentType(model.content_type),
        owner_id=model.owner_id,
        title=model.title,
        description=model.description or "",
        tags=list(model.tags or []),
        public_id=model.public_id,
        url=model.url,
        resource_type=model.resource_type,
        format=model.format,
        duration=model.duration,
        thumbnail_url=model.thumbnail_url,
        thumbnail_public_id=model.thumbnail_public_id,
        views=model.views or 0,
        likes_count=model.likes_count or 0,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class MediaRecordDAO(BaseDAO[MediaRecord]):
    """Data access object for media records and their likes.

    All methods return Pydantic models, never SQLAlchemy objects.
    """

    async def create(
        self,
        record_id: str,
        content_type: ContentType,
        *,
        public_id: str,
        url: str,
        resource_type: str,
        title: str,
        owner_id: str | None = None,
        description: str = "",
        tags: list[str] | None = None,
        format: str | None = None,
        duration: float | None = None,
    ) -> MediaRecord:
        """Create a media record for a freshly uploaded primary asset.

        Args:
            record_id: Unique record identifier.
            content_type: Collection the record belongs to.
            public_id: Storage id assigned by the cloud host.
            url: Delivery URL of the primary asset.
            resource_type: Host resource type of the primary asset.
            title: Display title.
            owner_id: Uploading user, if known.
            description: Optional description.
            tags: Optional tags.
            format: File format reported by the host.
            duration: Duration in seconds for audio/video.

        Returns:
            Created MediaRecord domain model.
        """
        now = datetime.utcnow()
        async with self._db.session() as session:
            model = MediaRecordModel(
                id=record_id,
                content_type=content_type.value,
                owner_id=owner_id,
                title=title,
                description=description,
                tags=list(tags or []),
                public_id=public_id,
                url=url,
                resource_type=resource_type,
                format=format,
                duration=duration,
                views=0,
                likes_count=0,
                created_at=now,
                updated_at=now,
            )
            session.add(model)
            await session.flush()
            return _to_domain(model)

    async def get_by_id(self, record_id: str) -> MediaRecord | None:
        """Get a record by ID.

        Returns:
            MediaRecord if found, None otherwise.
        """
        async with self._db.session() as session:
            result = await session.execute(
                select(MediaRecordModel).where(MediaRecordModel.id == record_id)
            )
            model = result.scalar_one_or_none()
            return _to_domain(model) if model is not None else None

    async def list_by_content_type(
        self, content_type: ContentType, *, owner_id: str | None = None
    ) -> list[MediaRecord]:
        """List records of one collection, newest first.

        Args:
            content_type: Collection to list.
            owner_id: Restrict to one owner when given.
        """
        query = select(MediaRecordModel).where(
            MediaRecordModel.content_type == content_type.value
        )
        if owner_id is not None:
            query = query.where(MediaRecordModel.owner_id == owner_id)
        query = query.order_by(MediaRecordModel.created_at.desc())

        async with self._db.session() as session:
            result = await session.execute(query)
            return [_to_domain(m) for m in result.scalars().all()]

    async def set_secondary_asset(
        self,
        record_id: str,
        thumbnail_url: str,
        thumbnail_public_id: str | None = None,
    ) -> MediaRecord | None:
        """Attach a thumbnail to an existing record.

        Only the secondary fields are written; primary fields are untouched.

        Returns:
            Updated MediaRecord, or None if the record does not exist.
        """
        async with self._db.session() as session:
            result = await session.execute(
                select(MediaRecordModel).where(MediaRecordModel.id == record_id)
            )
            model = result.scalar_one_or_none()
            if model is None:
                return None

            model.thumbnail_url = thumbnail_url
            model.thumbnail_public_id = thumbnail_public_id
            model.updated_at = datetime.utcnow()
            await session.flush()
            return _to_domain(model)

    async def delete(self, record_id: str) -> bool:
        """Delete a record with its likes and comments.

        Returns:
            True if a record was deleted.
        """
        async with self._db.session() as session:
            await session.execute(
                delete(MediaLikeModel).where(MediaLikeModel.record_id == record_id)
            )
            await session.execute(
                delete(MediaCommentModel).where(MediaCommentModel.record_id == record_id)
            )
            result = await session.execute(
                delete(MediaRecordModel).where(MediaRecordModel.id == record_id)
            )
            return result.rowcount > 0

    async def increment_views(self, record_id: str) -> bool:
        """Add one view.

        Returns:
            True if the record exists.
        """
        async with self._db.session() as session:
            result = await session.execute(
                update(MediaRecordModel)
                .where(MediaRecordModel.id == record_id)
                .values(views=MediaRecordModel.views + 1)
            )
            return result.rowcount > 0

    async def toggle_like(self, record_id: str, user_id: str) -> LikeState | None:
        """Like the record, or remove the like if the user already liked it.

        Returns:
            New like state, or None if the record does not exist.
        """
        async with self._db.session() as session:
            result = await session.execute(
                select(MediaRecordModel).where(MediaRecordModel.id == record_id)
            )
            record = result.scalar_one_or_none()
            if record is None:
                return None

            existing = await session.execute(
                select(MediaLikeModel)
                .where(MediaLikeModel.record_id == record_id)
                .where(MediaLikeModel.user_id == user_id)
            )
            like = existing.scalar_one_or_none()

            if like is None:
                session.add(
                    MediaLikeModel(
                        record_id=record_id,
                        user_id=user_id,
                        created_at=datetime.utcnow(),
                    )
                )
                record.likes_count = (record.likes_count or 0) + 1
                liked = True
            else:
                await session.delete(like)
                record.likes_count = max((record.likes_count or 0) - 1, 0)
                liked = False

            await session.flush()
            return LikeState(liked=liked, likes_count=record.likes_count)
