"""Media record API endpoints.

Routers handle HTTP concerns only - no business logic.
All business logic is delegated to MediaService.
"""

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Query

from app.enums import ContentType
from app.models.base import JsonModel
from app.models.domain import AuthContext, LikeState, MediaComment, MediaRecord
from app.security.auth_context import require_auth_context
from app.services.media_service import MediaRecordNotFoundError

if TYPE_CHECKING:
    from app.services.media_service import MediaService


class CreateMediaRequest(JsonModel):
    """Request model for record creation after a primary upload."""

    public_id: str = ""
    url: str = ""
    resource_type: str | None = None
    format: str | None = None
    duration: float | None = None
    title: str | None = None
    description: str = ""
    tags: list[str] = []


class AttachSecondaryRequest(JsonModel):
    """Request model for linking a thumbnail to a record.

    `id` is only read on the collection-level PUT; the item-level PUT takes
    the id from the path.
    """

    id: str | None = None
    thumbnail_url: str = ""
    thumbnail_public_id: str | None = None


class AddCommentRequest(JsonModel):
    """Request model for a new comment. The author comes from the auth headers."""

    content: str = ""
    user_name: str | None = None
    user_image: str | None = None


class StatusResponse(JsonModel):
    """Response model for operations without a body."""

    success: bool = True


class CommentCreatedResponse(JsonModel):
    success: bool = True
    comment: MediaComment


def create_media_router(media_service: "MediaService") -> APIRouter:
    """Create media router with injected service.

    Args:
        media_service: MediaService instance for business logic

    Returns:
        APIRouter with media record endpoints configured
    """
    router = APIRouter(prefix="/api", tags=["media"])

    async def _attach(
        content_type: ContentType,
        record_id: str | None,
        request: AttachSecondaryRequest,
        auth: AuthContext,
    ) -> MediaRecord:
        if not record_id:
            raise HTTPException(status_code=400, detail="Missing record ID")
        try:
            return await media_service.attach_thumbnail(
                content_type,
                record_id,
                auth,
                thumbnail_url=request.thumbnail_url,
                thumbnail_public_id=request.thumbnail_public_id,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except MediaRecordNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except PermissionError as e:
            raise HTTPException(status_code=403, detail=str(e))

    @router.post("/{content_type}", response_model=MediaRecord)
    async def create_record(
        content_type: ContentType,
        request: CreateMediaRequest,
        auth: AuthContext = Depends(require_auth_context),
    ) -> MediaRecord:
        """Persist metadata for an uploaded primary asset.

        Raises:
            HTTPException: 400 if the public id or URL is missing
        """
        try:
            return await media_service.create_record(
                content_type,
                auth,
                public_id=request.public_id,
                url=request.url,
                resource_type=request.resource_type,
                format=request.format,
                duration=request.duration,
                title=request.title,
                description=request.description,
                tags=request.tags,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @router.get("/{content_type}", response_model=list[MediaRecord])
    async def list_records(
        content_type: ContentType,
        owner_id: str | None = Query(default=None, alias="ownerId"),
    ) -> list[MediaRecord]:
        """List a collection, newest first."""
        return await media_service.list_records(content_type, owner_id=owner_id)

    @router.put("/{content_type}", response_model=MediaRecord)
    async def attach_secondary_by_body(
        content_type: ContentType,
        request: AttachSecondaryRequest,
        auth: AuthContext = Depends(require_auth_context),
    ) -> MediaRecord:
        """Attach a thumbnail; the record id travels in the body."""
        return await _attach(content_type, request.id, request, auth)

    @router.get("/{content_type}/{record_id}", response_model=MediaRecord)
    async def get_record(content_type: ContentType, record_id: str) -> MediaRecord:
        """Get one record."""
        try:
            return await media_service.get_record(content_type, record_id)
        except MediaRecordNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @router.put("/{content_type}/{record_id}", response_model=MediaRecord)
    async def attach_secondary(
        content_type: ContentType,
        record_id: str,
        request: AttachSecondaryRequest,
        auth: AuthContext = Depends(require_auth_context),
    ) -> MediaRecord:
        """Attach a thumbnail to the record in the path."""
        return await _attach(content_type, record_id, request, auth)

    @router.delete("/{content_type}/{record_id}", response_model=StatusResponse)
    async def delete_record(
        content_type: ContentType,
        record_id: str,
        auth: AuthContext = Depends(require_auth_context),
    ) -> StatusResponse:
        """Delete a record (owner or admin).

        Raises:
            HTTPException: 404 if not found, 403 if not owner or admin
        """
        try:
            await media_service.delete_record(content_type, record_id, auth)
            return StatusResponse()
        except MediaRecordNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except PermissionError as e:
            raise HTTPException(status_code=403, detail=str(e))

    @router.post("/{content_type}/{record_id}/view", response_model=StatusResponse)
    async def record_view(content_type: ContentType, record_id: str) -> StatusResponse:
        """Count one view."""
        try:
            await media_service.record_view(content_type, record_id)
            return StatusResponse()
        except MediaRecordNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @router.post("/{content_type}/{record_id}/like", response_model=LikeState)
    async def toggle_like(
        content_type: ContentType,
        record_id: str,
        auth: AuthContext = Depends(require_auth_context),
    ) -> LikeState:
        """Like or unlike a record."""
        try:
            return await media_service.toggle_like(content_type, record_id, auth)
        except MediaRecordNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @router.post(
        "/{content_type}/{record_id}/comments", response_model=CommentCreatedResponse
    )
    async def add_comment(
        content_type: ContentType,
        record_id: str,
        request: AddCommentRequest,
        auth: AuthContext = Depends(require_auth_context),
    ) -> CommentCreatedResponse:
        """Comment on a record.

        Raises:
            HTTPException: 400 if the content is blank, 404 if not found
        """
        try:
            comment = await media_service.add_comment(
                content_type,
                record_id,
                auth,
                content=request.content,
                user_name=request.user_name,
                user_image=request.user_image,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except MediaRecordNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return CommentCreatedResponse(comment=comment)

    @router.get(
        "/{content_type}/{record_id}/comments", response_model=list[MediaComment]
    )
    async def list_comments(content_type: ContentType, record_id: str) -> list[MediaComment]:
        """Comments on a record, oldest first."""
        try:
            return await media_service.list_comments(content_type, record_id)
        except MediaRecordNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    return router
