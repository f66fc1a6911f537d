"""Upload signature API endpoints.

Routers handle HTTP concerns only - no business logic.
Signing is delegated to SigningService.
"""

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.config import MediaConfig
from app.enums import ResourceKind
from app.models.base import JsonModel
from app.models.domain import UploadSignature
from app.services.signing_service import SignerConfigurationError

if TYPE_CHECKING:
    from app.services.signing_service import SigningService


class SignatureRequest(JsonModel):
    """Request model for a signature."""

    resource_type: ResourceKind | None = None
    folder: str | None = None


class EnvCheckResponse(JsonModel):
    """Which Cloudinary settings are present. Values are never returned."""

    cloud_name: bool
    api_key: bool
    api_secret: bool


def create_signature_router(
    signing_service: "SigningService",
    config: MediaConfig,
) -> APIRouter:
    """Create signature router with injected service.

    Args:
        signing_service: SigningService instance issuing signatures.
        config: Configuration, for the environment check endpoint.

    Returns:
        APIRouter with signature endpoints configured
    """
    router = APIRouter(prefix="/api", tags=["uploads"])

    def _issue(resource_type: ResourceKind | None, folder: str | None):
        try:
            return signing_service.issue(resource_type=resource_type, folder=folder)
        except SignerConfigurationError as e:
            # Clients read the reason from "error".
            return JSONResponse(status_code=500, content={"error": str(e)})

    @router.post("/cloudinary/signature", response_model=UploadSignature)
    async def create_signature(request: SignatureRequest):
        """Issue a signature for one direct upload."""
        return _issue(request.resource_type, request.folder)

    @router.get("/cloudinary/signature", response_model=UploadSignature)
    async def get_signature(
        folder: str | None = Query(default=None),
        resource_type: ResourceKind | None = Query(default=None, alias="resourceType"),
    ):
        """Query-string variant of the signature endpoint."""
        return _issue(resource_type, folder)

    @router.get("/check-env", response_model=EnvCheckResponse)
    async def check_env() -> EnvCheckResponse:
        """Report which Cloudinary settings are configured."""
        missing = set(config.missing_cloudinary_settings())
        return EnvCheckResponse(
            cloud_name="cloud_name" not in missing,
            api_key="api_key" not in missing,
            api_secret="api_secret" not in missing,
        )

    return router
