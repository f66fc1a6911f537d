"""Signed direct upload of one file to the cloud asset host.

One call walks: validate -> request signature -> stream the multipart body
to the host while reporting progress -> parse the host response. There is a
single transfer attempt and no retry; the caller re-runs the whole call to
try again. If the host accepted the bytes but the response cannot be
trusted, the remote asset may be orphaned; nothing here cleans it up.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from collections.abc import AsyncIterable, AsyncIterator
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, ContextManager

import httpx

from app.client.errors import UploadError
from app.client.progress import ProgressListener, UploadTracker
from app.client.signer_client import SignerClient
from app.enums import ErrorKind, ResourceKind
from app.models.domain import UploadedAsset, UploadSignature

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
GENERIC_REJECTION = "Upload failed"


@dataclass(frozen=True)
class UploadSource:
    """A file to upload, either in memory or on disk.

    Sources built with `from_path` are read in chunks while the request is
    sent, so the file is never held in memory as a whole.
    """

    filename: str
    data: bytes | None = None
    content_type: str | None = None
    path: Path | None = None

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "UploadSource":
        p = Path(path)
        return cls(filename=p.name, content_type=content_type, path=p)

    @property
    def size(self) -> int:
        if self.data is not None:
            return len(self.data)
        if self.path is not None and self.path.is_file():
            return self.path.stat().st_size
        return 0

    @property
    def mime_type(self) -> str:
        if self.content_type:
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.filename)
        return guessed or "application/octet-stream"

    def open(self) -> ContextManager[bytes | BinaryIO]:
        """Context manager yielding the raw bytes or an open binary file."""
        if self.data is not None:
            return nullcontext(self.data)
        return open(self.path, "rb")


def matches_accept(source: UploadSource, accept: str | None) -> bool:
    """Check a file against an HTML-style accept list.

    Supports `*/*`, `type/*`, exact MIME types and `.ext` entries, comma
    separated. An empty accept list accepts everything.
    """
    if not accept or not accept.strip():
        return True

    mime = source.mime_type.lower()
    suffix = Path(source.filename).suffix.lower()
    for raw in accept.split(","):
        pattern = raw.strip().lower()
        if not pattern:
            continue
        if pattern == "*/*" or pattern == "*":
            return True
        if pattern.startswith("."):
            if suffix == pattern:
                return True
        elif pattern.endswith("/*"):
            if mime.startswith(pattern[:-1]):
                return True
        elif mime == pattern:
            return True
    return False


def validate_source(source: UploadSource | None, accept: str | None = None) -> None:
    """Client-side checks, run before any network call.

    Raises:
        UploadError: INVALID_INPUT for a missing, empty or unaccepted file.
    """
    if source is None:
        raise UploadError(ErrorKind.INVALID_INPUT, "Please select a file to upload")
    if source.data is None and (source.path is None or not source.path.is_file()):
        raise UploadError(ErrorKind.INVALID_INPUT, f"File {source.filename!r} not found")
    if source.size == 0:
        raise UploadError(ErrorKind.INVALID_INPUT, f"File {source.filename!r} is empty")
    if not matches_accept(source, accept):
        raise UploadError(
            ErrorKind.INVALID_INPUT,
            f"File type {source.mime_type} is not accepted (expected {accept})",
        )


def parse_host_response(payload: Any) -> UploadedAsset:
    """Build an UploadedAsset from the host's success body.

    Raises:
        UploadError: INVALID_HOST_RESPONSE if a required field is missing.
    """
    if not isinstance(payload, dict):
        raise UploadError(ErrorKind.INVALID_HOST_RESPONSE, "Invalid response from Cloudinary")

    remote_url = payload.get("secure_url")
    storage_id = payload.get("public_id")
    if not isinstance(remote_url, str) or not remote_url:
        raise UploadError(
            ErrorKind.INVALID_HOST_RESPONSE, "Cloudinary response is missing secure_url"
        )
    if not isinstance(storage_id, str) or not storage_id:
        raise UploadError(
            ErrorKind.INVALID_HOST_RESPONSE, "Cloudinary response is missing public_id"
        )

    try:
        kind = ResourceKind(payload.get("resource_type"))
    except ValueError:
        kind = None
    if kind is None or kind == ResourceKind.AUTO:
        raise UploadError(
            ErrorKind.INVALID_HOST_RESPONSE,
            f"Unknown resource type in Cloudinary response: {payload.get('resource_type')!r}",
        )

    fmt = payload.get("format")
    duration = payload.get("duration")
    size = payload.get("bytes")
    return UploadedAsset(
        remote_url=remote_url,
        storage_id=storage_id,
        resource_kind=kind,
        format=fmt if isinstance(fmt, str) else "",
        duration=float(duration) if isinstance(duration, (int, float)) else None,
        size_bytes=size if isinstance(size, int) else None,
    )


def rejection_message(response: httpx.Response) -> str:
    """The host's `error.message`, or a generic message."""
    try:
        body = response.json()
    except ValueError:
        logger.debug("Unparseable Cloudinary error body: %r", response.text[:200])
        return GENERIC_REJECTION
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"] or GENERIC_REJECTION
    return GENERIC_REJECTION


class UploadExecutor:
    """Runs signed direct uploads against the cloud host."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        signer: SignerClient,
        *,
        upload_base_url: str = "https://api.cloudinary.com",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: float | None = 300.0,
    ) -> None:
        """Initialize the executor.

        Args:
            http: Shared async HTTP client.
            signer: Client for the signature endpoint.
            upload_base_url: Scheme and host of the upload API.
            chunk_size: Bytes per progress tick.
            timeout: Overall transfer limit in seconds; None for no limit.
        """
        self._http = http
        self._signer = signer
        self._upload_base_url = upload_base_url.rstrip("/")
        self._chunk_size = chunk_size
        self._timeout = timeout

    @property
    def timeout(self) -> float | None:
        return self._timeout

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def upload_url(self, cloud_name: str, resource_kind: ResourceKind) -> str:
        return f"{self._upload_base_url}/v1_1/{cloud_name}/{resource_kind.endpoint}/upload"

    async def execute_upload(
        self,
        source: UploadSource,
        resource_kind: ResourceKind,
        folder: str | None = None,
        *,
        accept: str | None = None,
        listener: ProgressListener | None = None,
    ) -> UploadedAsset:
        """Upload one file and return its asset descriptor.

        Args:
            source: The file.
            resource_kind: Host resource kind; selects the upload endpoint.
            folder: Target folder on the host.
            accept: Optional accept list, checked before any request.
            listener: Receives progress, then success or error.

        Returns:
            UploadedAsset with non-empty remote_url and storage_id.

        Raises:
            UploadError: With the kind of the step that failed.
        """
        tracker = UploadTracker(listener)
        try:
            asset = await self.transfer(
                source, resource_kind, folder, accept=accept, tracker=tracker
            )
        except UploadError as e:
            tracker.fail(e)
            raise
        tracker.complete(asset)
        return asset

    async def transfer(
        self,
        source: UploadSource,
        resource_kind: ResourceKind,
        folder: str | None,
        *,
        accept: str | None,
        tracker: UploadTracker,
    ) -> UploadedAsset:
        """Drive `tracker` from idle to parsing and return the asset.

        The tracker is left in `parsing` so the caller can go on to persist
        before completing it. On error the tracker is not failed here.
        """
        validate_source(source, accept)

        tracker.signing()
        signature = await self._signer.request_signature(resource_kind, folder)

        tracker.transferring()
        response = await self._send(source, resource_kind, signature, folder, tracker)

        if not response.is_success:
            message = rejection_message(response)
            logger.warning(
                "Cloudinary rejected %s (HTTP %s): %s",
                source.filename,
                response.status_code,
                message,
            )
            raise UploadError(
                ErrorKind.UPLOAD_REJECTED, message, status_code=response.status_code
            )

        tracker.parsing()
        try:
            payload = response.json()
        except ValueError as e:
            logger.error(
                "Invalid response from Cloudinary for %s: %r",
                source.filename,
                response.text[:200],
            )
            raise UploadError(
                ErrorKind.INVALID_HOST_RESPONSE, "Invalid response from Cloudinary"
            ) from e

        asset = parse_host_response(payload)
        logger.info(
            "Uploaded %s (%d bytes) as %s", source.filename, source.size, asset.storage_id
        )
        return asset

    def _build_request(
        self,
        source_file: bytes | BinaryIO,
        source: UploadSource,
        resource_kind: ResourceKind,
        signature: UploadSignature,
        folder: str | None,
        tracker: UploadTracker,
    ) -> httpx.Request:
        fields = {
            "api_key": signature.api_key,
            "timestamp": str(signature.timestamp),
            "signature": signature.signature,
            "resource_type": resource_kind.endpoint,
        }
        # The host checks the folder against the signed one.
        signed_folder = signature.folder or folder
        if signed_folder:
            fields["folder"] = signed_folder

        url = self.upload_url(signature.cloud_name, resource_kind)
        # Only used for its boundary, length and lazy multipart stream.
        encoded = httpx.Request(
            "POST",
            url,
            data=fields,
            files={"file": (source.filename, source_file, source.mime_type)},
        )
        total = int(encoded.headers["Content-Length"])
        return self._http.build_request(
            "POST",
            url,
            content=self._stream(encoded.stream, total, tracker),
            headers={
                "Content-Type": encoded.headers["Content-Type"],
                "Content-Length": str(total),
            },
        )

    async def _stream(
        self, parts: AsyncIterable[bytes], total: int, tracker: UploadTracker
    ) -> AsyncIterator[bytes]:
        sent = 0
        tracker.report(0, total)
        async for part in parts:
            for start in range(0, len(part), self._chunk_size):
                chunk = part[start : start + self._chunk_size]
                yield chunk
                sent += len(chunk)
                tracker.report(sent, total)

    async def _send(
        self,
        source: UploadSource,
        resource_kind: ResourceKind,
        signature: UploadSignature,
        folder: str | None,
        tracker: UploadTracker,
    ) -> httpx.Response:
        with source.open() as source_file:
            request = self._build_request(
                source_file, source, resource_kind, signature, folder, tracker
            )
            logger.info("Uploading %s to %s", source.filename, request.url)
            try:
                return await asyncio.wait_for(self._http.send(request), timeout=self._timeout)
            except (asyncio.TimeoutError, httpx.TimeoutException) as e:
                logger.warning("Upload of %s timed out", source.filename)
                raise UploadError(ErrorKind.TIMEOUT, "Upload timed out") from e
            except httpx.HTTPError as e:
                logger.warning("Network error during upload of %s: %s", source.filename, e)
                raise UploadError(ErrorKind.NETWORK_ERROR, "Network error during upload") from e
