"""Two-phase metadata attachment.

The primary asset is uploaded first and its record created; a secondary
asset (thumbnail) can then be uploaded and linked to that record. The two
phases report errors on separate channels, and a failed secondary never
touches the primary record.
"""

import logging

from app.client.api_client import MediaApiClient
from app.client.errors import MediaApiError, UploadError
from app.client.executor import UploadExecutor, UploadSource
from app.client.progress import ProgressListener, UploadTracker
from app.enums import ContentType, ErrorKind, ResourceKind
from app.models.base import JsonModel
from app.models.domain import MediaRecord, UploadedAsset

logger = logging.getLogger(__name__)

SECONDARY_ACCEPT = "image/*"


class MediaFields(JsonModel):
    """Domain fields supplied by the user alongside an upload."""

    title: str | None = None
    description: str = ""
    tags: list[str] = []


def primary_payload(asset: UploadedAsset, fields: MediaFields) -> dict:
    """Record creation body: domain fields plus the primary asset fields."""
    payload = fields.to_payload()
    payload.update(
        {
            "publicId": asset.storage_id,
            "url": asset.remote_url,
            "resourceType": asset.resource_kind.value,
            "format": asset.format,
        }
    )
    if asset.duration is not None:
        payload["duration"] = asset.duration
    return payload


class MetadataAttacher:
    """Persists uploaded assets as media records."""

    def __init__(self, api: MediaApiClient, executor: UploadExecutor) -> None:
        self._api = api
        self._executor = executor

    @property
    def api(self) -> MediaApiClient:
        return self._api

    async def attach_primary(
        self,
        asset: UploadedAsset,
        content_type: ContentType,
        fields: MediaFields | None = None,
    ) -> MediaRecord:
        """Create the record for an uploaded primary asset.

        Raises:
            UploadError: METADATA_PERSIST_FAILED if the record could not be
                saved. The asset is already on the host at that point.
        """
        payload = primary_payload(asset, fields or MediaFields())
        try:
            record = await self._api.create_record(content_type, payload)
        except MediaApiError as e:
            logger.error(
                "Metadata save failed for uploaded asset %s: %s", asset.storage_id, e.message
            )
            raise UploadError(
                ErrorKind.METADATA_PERSIST_FAILED,
                f"File uploaded but metadata could not be saved: {e.message}",
                status_code=e.status_code,
            ) from e
        logger.info("Created %s record %s for %s", content_type, record.id, asset.storage_id)
        return record

    async def attach_secondary(
        self,
        content_type: ContentType,
        record_id: str,
        asset: UploadedAsset,
    ) -> MediaRecord:
        """Link an uploaded thumbnail to an existing record.

        Raises:
            UploadError: INVALID_INPUT without a record id,
                METADATA_PERSIST_FAILED if the update was not saved.
        """
        if not record_id:
            raise UploadError(ErrorKind.INVALID_INPUT, "No record to attach the thumbnail to")
        try:
            record = await self._api.update_secondary(
                content_type, record_id, asset.remote_url, asset.storage_id
            )
        except MediaApiError as e:
            logger.error("Failed to attach thumbnail to %s: %s", record_id, e.message)
            raise UploadError(
                ErrorKind.METADATA_PERSIST_FAILED,
                f"Thumbnail uploaded but could not be saved: {e.message}",
                status_code=e.status_code,
            ) from e
        logger.info("Attached thumbnail %s to %s", asset.storage_id, record_id)
        return record

    async def upload_secondary(
        self,
        content_type: ContentType,
        record_id: str,
        source: UploadSource,
        *,
        folder: str | None = None,
        listener: ProgressListener | None = None,
    ) -> MediaRecord:
        """Upload a thumbnail image and attach it to `record_id`.

        Runs its own upload cycle with its own progress stream. The record
        id is checked before anything is sent.
        """
        tracker = UploadTracker(listener)
        try:
            if not record_id:
                raise UploadError(
                    ErrorKind.INVALID_INPUT, "No record to attach the thumbnail to"
                )
            asset = await self._executor.transfer(
                source,
                ResourceKind.IMAGE,
                folder,
                accept=SECONDARY_ACCEPT,
                tracker=tracker,
            )
            tracker.persisting()
            record = await self.attach_secondary(content_type, record_id, asset)
        except UploadError as e:
            tracker.fail(e)
            raise
        tracker.complete(record)
        return record
