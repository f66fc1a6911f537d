"""Business logic services package."""

from .media_service import MediaRecordNotFoundError, MediaService
from .signing_service import SignerConfigurationError, SigningService, sign_params

__all__ = [
    "MediaRecordNotFoundError",
    "MediaService",
    "SignerConfigurationError",
    "SigningService",
    "sign_params",
]
