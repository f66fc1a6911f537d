"""Upload signature issuing service.

Signs direct-upload parameters with the Cloudinary API secret so browsers and
other clients can upload straight to the host without ever holding the
secret. The signature covers `timestamp` and, when given, `folder`; the host
rejects uploads whose signed parameters differ from the ones sent.
"""

import hashlib
import logging
import time
from collections.abc import Callable
from typing import Any

from app.config import MediaConfig
from app.enums import ResourceKind
from app.models.domain import UploadSignature
from app.observability.redaction import sanitize

logger = logging.getLogger(__name__)


class SignerConfigurationError(Exception):
    """Raised when Cloudinary credentials are not configured."""

    pass


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature.

    Sorted `key=value` pairs joined with `&`, the secret appended, then
    SHA-1 hex digest. Empty values are left out, as the host does.
    """
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if params[key] is not None and params[key] != ""
    )
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


class SigningService:
    """Issues one-shot upload signatures."""

    def __init__(
        self,
        config: MediaConfig,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the signing service.

        Args:
            config: Application configuration holding the credentials.
            clock: Source of the current unix time.
        """
        self.config = config
        self._clock = clock

    def issue(
        self,
        resource_type: ResourceKind | str | None = None,
        folder: str | None = None,
    ) -> UploadSignature:
        """Issue a signature for one upload.

        Args:
            resource_type: Kind the caller intends to upload. Echoed back;
                the host does not include it in the signature.
            folder: Target folder. Falls back to the configured default.

        Returns:
            UploadSignature for exactly these parameters.

        Raises:
            SignerConfigurationError: If any credential is missing.
        """
        missing = self.config.missing_cloudinary_settings()
        if missing:
            logger.error("Cannot sign upload, missing Cloudinary settings: %s", missing)
            raise SignerConfigurationError(f"Missing {missing[0].replace('_', ' ')} configuration")

        folder = folder or self.config.default_upload_folder or None
        timestamp = int(round(self._clock()))
        params: dict[str, Any] = {"timestamp": timestamp}
        if folder:
            params["folder"] = folder

        signature = sign_params(params, self.config.cloudinary_api_secret)
        issued = UploadSignature(
            signature=signature,
            timestamp=timestamp,
            cloud_name=self.config.cloudinary_cloud_name,
            api_key=self.config.cloudinary_api_key,
            folder=folder,
            resource_type=str(resource_type) if resource_type else None,
        )
        logger.info("Issued upload signature: %s", sanitize(issued.model_dump()))
        return issued
