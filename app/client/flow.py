"""Composed upload: primary asset, record, then an optional thumbnail."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from app.client.api_client import MediaApiClient
from app.client.attacher import MediaFields, MetadataAttacher
from app.client.errors import UploadError
from app.client.executor import UploadExecutor, UploadSource
from app.client.progress import ProgressListener, UploadTracker
from app.client.signer_client import SignerClient
from app.config import MediaConfig
from app.enums import ContentType, ResourceKind, UploadOutcome
from app.models.domain import AuthContext, MediaRecord, UploadedAsset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadSucceeded:
    record: MediaRecord
    outcome: UploadOutcome = UploadOutcome.SUCCESS


@dataclass(frozen=True)
class UploadPartiallyFailed:
    """The record exists, but the thumbnail did not make it."""

    record: MediaRecord
    secondary_error: UploadError
    outcome: UploadOutcome = UploadOutcome.PARTIAL_FAILURE


@dataclass(frozen=True)
class UploadFailed:
    """No record was created.

    `asset` is set when the file reached the host but its metadata could not
    be saved.
    """

    error: UploadError
    asset: UploadedAsset | None = None
    outcome: UploadOutcome = UploadOutcome.FAILURE


UploadResult = UploadSucceeded | UploadPartiallyFailed | UploadFailed


class MediaUploadFlow:
    """Runs the primary upload, record creation and thumbnail in order."""

    def __init__(self, executor: UploadExecutor, attacher: MetadataAttacher) -> None:
        self._executor = executor
        self._attacher = attacher

    @classmethod
    def from_config(
        cls,
        config: MediaConfig,
        http: httpx.AsyncClient,
        auth: AuthContext | None = None,
    ) -> "MediaUploadFlow":
        """Wire the signer, executor and API client from settings.

        Args:
            config: Service settings; the upload_* and request_timeout_seconds
                values shape the clients.
            http: Shared async HTTP client.
            auth: Identity sent with record requests.
        """
        signer = SignerClient(
            http, config.signature_url, timeout=config.request_timeout_seconds
        )
        executor = UploadExecutor(
            http,
            signer,
            upload_base_url=config.cloudinary_upload_base_url,
            chunk_size=config.upload_chunk_size,
            timeout=config.upload_timeout_seconds,
        )
        api = MediaApiClient(
            http, config.api_base_url, auth, timeout=config.request_timeout_seconds
        )
        return cls(executor, MetadataAttacher(api, executor))

    @property
    def executor(self) -> UploadExecutor:
        return self._executor

    @property
    def attacher(self) -> MetadataAttacher:
        return self._attacher

    async def upload_media(
        self,
        content_type: ContentType,
        source: UploadSource | None,
        resource_kind: ResourceKind,
        fields: MediaFields | None = None,
        *,
        secondary: UploadSource | None = None,
        folder: str | None = None,
        accept: str | None = None,
        primary_listener: ProgressListener | None = None,
        secondary_listener: ProgressListener | None = None,
    ) -> UploadResult:
        """Upload `source`, save its record, then attach `secondary` if given.

        The thumbnail is only attempted once the primary record has an id.
        Errors are returned in the result, not raised.
        """
        tracker = UploadTracker(primary_listener)
        asset: UploadedAsset | None = None
        try:
            asset = await self._executor.transfer(
                source, resource_kind, folder, accept=accept, tracker=tracker
            )
            tracker.persisting()
            record = await self._attacher.attach_primary(asset, content_type, fields)
        except UploadError as e:
            tracker.fail(e)
            filename = source.filename if source is not None else None
            logger.warning("Upload of %s failed (%s): %s", filename, e.kind, e.message)
            return UploadFailed(error=e, asset=asset)
        tracker.complete(record)

        if secondary is None:
            return UploadSucceeded(record=record)

        try:
            record = await self._attacher.upload_secondary(
                content_type,
                record.id,
                secondary,
                folder=folder,
                listener=secondary_listener,
            )
        except UploadError as e:
            logger.warning(
                "Thumbnail for %s failed (%s): %s", record.id, e.kind, e.message
            )
            return UploadPartiallyFailed(record=record, secondary_error=e)
        return UploadSucceeded(record=record)
