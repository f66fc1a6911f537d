"""HTTP routers package."""

from .media_router import (
    AttachSecondaryRequest,
    CreateMediaRequest,
    StatusResponse,
    create_media_router,
)
from .signature_router import (
    EnvCheckResponse,
    SignatureRequest,
    create_signature_router,
)

__all__ = [
    "create_media_router",
    "create_signature_router",
    "AttachSecondaryRequest",
    "CreateMediaRequest",
    "EnvCheckResponse",
    "SignatureRequest",
    "StatusResponse",
]
