"""StrEnum definitions for type-safe constants."""

from enum import StrEnum


class ResourceKind(StrEnum):
    """Cloud host resource kinds.

    AUTO lets the host detect the kind; it is never reported back on an
    uploaded asset.
    """

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    RAW = "raw"
    AUTO = "auto"

    @property
    def endpoint(self) -> str:
        """Path segment of the host upload endpoint for this kind."""
        # The host files audio under its video pipeline.
        if self is ResourceKind.AUDIO:
            return ResourceKind.VIDEO.value
        return self.value


class ContentType(StrEnum):
    """Application content collections backed by uploaded media."""

    VIDEOS = "videos"
    PHOTOS = "photos"
    AUDIO = "audio"
    PODCASTS = "podcasts"


class UploadPhase(StrEnum):
    """Phases of a single file transfer."""

    IDLE = "idle"
    SIGNING = "signing"
    TRANSFERRING = "transferring"
    PARSING = "parsing"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class ErrorKind(StrEnum):
    """Failure categories surfaced to upload callers."""

    INVALID_INPUT = "invalid_input"
    SIGNATURE_UNAVAILABLE = "signature_unavailable"
    NETWORK_ERROR = "network_error"
    UPLOAD_REJECTED = "upload_rejected"
    INVALID_HOST_RESPONSE = "invalid_host_response"
    METADATA_PERSIST_FAILED = "metadata_persist_failed"
    TIMEOUT = "timeout"


class UploadOutcome(StrEnum):
    """Tag of a composed upload result."""

    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FAILURE = "failure"


class UserRole(StrEnum):
    """Roles asserted by the identity provider."""

    USER = "user"
    ADMIN = "admin"
