"""Upload client package."""

from .api_client import MediaApiClient
from .attacher import MediaFields, MetadataAttacher
from .errors import MediaApiError, UploadError
from .executor import UploadExecutor, UploadSource
from .flow import (
    MediaUploadFlow,
    UploadFailed,
    UploadPartiallyFailed,
    UploadResult,
    UploadSucceeded,
)
from .optimistic import LikeToggle, OptimisticValue
from .progress import ProgressListener, UploadTracker
from .signer_client import SignerClient

__all__ = [
    "LikeToggle",
    "MediaApiClient",
    "MediaApiError",
    "MediaFields",
    "MediaUploadFlow",
    "MetadataAttacher",
    "OptimisticValue",
    "ProgressListener",
    "SignerClient",
    "UploadError",
    "UploadExecutor",
    "UploadFailed",
    "UploadPartiallyFailed",
    "UploadResult",
    "UploadSource",
    "UploadSucceeded",
    "UploadTracker",
]
