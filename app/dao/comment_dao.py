"""Media comment data access operations."""

from datetime import datetime

from sqlalchemy import select

from app.dao.base import BaseDAO
from app.models.domain import MediaComment
from app.models.orm import MediaCommentModel


def _to_domain(model: MediaCommentModel) -> MediaComment:
    return MediaComment(
        id=model.id,
        record_id=model.record_id,
        user_id=model.user_id,
        user_name=model.user_name,
        user_image=model.user_image,
        content=model.content,
        timestamp=model.created_at,
        likes=model.likes or 0,
    )


class MediaCommentDAO(BaseDAO[MediaComment]):
    """Data access object for comments on media records."""

    async def add(
        self,
        comment_id: str,
        record_id: str,
        *,
        user_id: str,
        user_name: str,
        content: str,
        user_image: str | None = None,
    ) -> MediaComment:
        """Append a comment to a record.

        The caller checks that the record exists.
        """
        async with self._db.session() as session:
            model = MediaCommentModel(
                id=comment_id,
                record_id=record_id,
                user_id=user_id,
                user_name=user_name,
                user_image=user_image,
                content=content,
                likes=0,
                created_at=datetime.utcnow(),
            )
            session.add(model)
            await session.flush()
            return _to_domain(model)

    async def list_for_record(self, record_id: str) -> list[MediaComment]:
        """Comments on one record, oldest first."""
        async with self._db.session() as session:
            result = await session.execute(
                select(MediaCommentModel)
                .where(MediaCommentModel.record_id == record_id)
                .order_by(MediaCommentModel.created_at.asc())
            )
            return [_to_domain(m) for m in result.scalars().all()]
