"""Media record business logic service.

This service owns the server half of the two-phase attach: creating a record
for an uploaded primary asset and later linking a secondary (thumbnail)
asset to it. It also handles deletion, view counting, likes and comments.
Data access is delegated to MediaRecordDAO and MediaCommentDAO.
"""

import logging
import uuid

from app.dao.comment_dao import MediaCommentDAO
from app.dao.media_dao import MediaRecordDAO
from app.enums import ContentType
from app.models.domain import AuthContext, LikeState, MediaComment, MediaRecord

logger = logging.getLogger(__name__)

ANONYMOUS_NAME = "Anonymous User"


class MediaRecordNotFoundError(Exception):
    """Raised when a media record does not exist."""

    pass


def default_title(public_id: str) -> str:
    """Title for records created without one: last segment of the public id."""
    return public_id.rsplit("/", 1)[-1]


class MediaService:
    """Media record business logic - validation and authorization."""

    def __init__(
        self, media_dao: MediaRecordDAO, comment_dao: MediaCommentDAO
    ) -> None:
        """Initialize MediaService.

        Args:
            media_dao: Data access object for media records.
            comment_dao: Data access object for comments.
        """
        self.media_dao = media_dao
        self.comment_dao = comment_dao

    async def create_record(
        self,
        content_type: ContentType,
        auth: AuthContext,
        *,
        public_id: str,
        url: str,
        resource_type: str | None = None,
        format: str | None = None,
        duration: float | None = None,
        title: str | None = None,
        description: str = "",
        tags: list[str] | None = None,
    ) -> MediaRecord:
        """Persist a record for an uploaded primary asset.

        Raises:
            ValueError: If the public id or URL is missing.
        """
        if not public_id or not public_id.strip() or not url or not url.strip():
            raise ValueError("Missing required fields")

        record = await self.media_dao.create(
            str(uuid.uuid4()),
            content_type,
            public_id=public_id.strip(),
            url=url.strip(),
            resource_type=resource_type or _default_resource_type(content_type),
            title=(title or "").strip() or default_title(public_id.strip()),
            owner_id=auth.user_id,
            description=description or "",
            tags=tags,
            format=format,
            duration=duration,
        )
        logger.info(
            "Created %s record %s for user %s", content_type, record.id, auth.user_id
        )
        return record

    async def get_record(self, content_type: ContentType, record_id: str) -> MediaRecord:
        """Get one record of a collection.

        Raises:
            MediaRecordNotFoundError: If absent or in another collection.
        """
        record = await self.media_dao.get_by_id(record_id)
        if record is None or record.content_type != content_type:
            raise MediaRecordNotFoundError(f"Record {record_id} not found")
        return record

    async def list_records(
        self, content_type: ContentType, owner_id: str | None = None
    ) -> list[MediaRecord]:
        """List a collection, newest first."""
        return await self.media_dao.list_by_content_type(content_type, owner_id=owner_id)

    async def attach_thumbnail(
        self,
        content_type: ContentType,
        record_id: str,
        auth: AuthContext,
        *,
        thumbnail_url: str,
        thumbnail_public_id: str | None = None,
    ) -> MediaRecord:
        """Link an uploaded secondary asset to an existing record.

        Raises:
            ValueError: If the thumbnail URL is missing.
            MediaRecordNotFoundError: If the record does not exist.
            PermissionError: If the caller is neither owner nor admin.
        """
        if not thumbnail_url or not thumbnail_url.strip():
            raise ValueError("Missing thumbnail URL")

        record = await self.get_record(content_type, record_id)
        if not auth.can_modify(record.owner_id):
            raise PermissionError("You don't have permission to modify this record")

        updated = await self.media_dao.set_secondary_asset(
            record_id, thumbnail_url.strip(), thumbnail_public_id
        )
        if updated is None:
            raise MediaRecordNotFoundError(f"Record {record_id} not found")
        return updated

    async def delete_record(
        self, content_type: ContentType, record_id: str, auth: AuthContext
    ) -> None:
        """Delete a record. Owners and admins only.

        The remote assets stay on the cloud host.

        Raises:
            MediaRecordNotFoundError: If the record does not exist.
            PermissionError: If the caller is neither owner nor admin.
        """
        record = await self.get_record(content_type, record_id)
        if not auth.can_modify(record.owner_id):
            raise PermissionError("You don't have permission to delete this record")

        if not await self.media_dao.delete(record_id):
            raise MediaRecordNotFoundError(f"Record {record_id} not found")
        logger.info("Deleted %s record %s (by %s)", content_type, record_id, auth.user_id)

    async def record_view(self, content_type: ContentType, record_id: str) -> None:
        """Count one view.

        Raises:
            MediaRecordNotFoundError: If the record does not exist.
        """
        await self.get_record(content_type, record_id)
        if not await self.media_dao.increment_views(record_id):
            raise MediaRecordNotFoundError(f"Record {record_id} not found")

    async def toggle_like(
        self, content_type: ContentType, record_id: str, auth: AuthContext
    ) -> LikeState:
        """Like or unlike a record for the calling user.

        Raises:
            MediaRecordNotFoundError: If the record does not exist.
        """
        await self.get_record(content_type, record_id)
        state = await self.media_dao.toggle_like(record_id, auth.user_id)
        if state is None:
            raise MediaRecordNotFoundError(f"Record {record_id} not found")
        return state

    async def add_comment(
        self,
        content_type: ContentType,
        record_id: str,
        auth: AuthContext,
        *,
        content: str,
        user_name: str | None = None,
        user_image: str | None = None,
    ) -> MediaComment:
        """Append a comment from the calling user.

        Raises:
            ValueError: If the content is blank.
            MediaRecordNotFoundError: If the record does not exist.
        """
        if not content or not content.strip():
            raise ValueError("Comment content is required")

        await self.get_record(content_type, record_id)
        comment = await self.comment_dao.add(
            str(uuid.uuid4()),
            record_id,
            user_id=auth.user_id,
            user_name=(user_name or "").strip() or ANONYMOUS_NAME,
            content=content.strip(),
            user_image=user_image,
        )
        logger.info("User %s commented on %s record %s", auth.user_id, content_type, record_id)
        return comment

    async def list_comments(
        self, content_type: ContentType, record_id: str
    ) -> list[MediaComment]:
        """Comments on a record, oldest first.

        Raises:
            MediaRecordNotFoundError: If the record does not exist.
        """
        await self.get_record(content_type, record_id)
        return await self.comment_dao.list_for_record(record_id)


def _default_resource_type(content_type: ContentType) -> str:
    match content_type:
        case ContentType.PHOTOS:
            return "image"
        case ContentType.AUDIO:
            return "audio"
        case _:
            return "video"
