"""Client for the upload signature endpoint."""

import json
import logging

import httpx
from pydantic import ValidationError

from app.client.errors import UploadError
from app.enums import ErrorKind, ResourceKind
from app.models.domain import UploadSignature
from app.observability.redaction import sanitize

logger = logging.getLogger(__name__)


def response_error_reason(response: httpx.Response) -> str:
    """Reason from a JSON (`error` / `detail`) or plain-text error body."""
    text = response.text
    try:
        data = json.loads(text)
    except ValueError:
        data = None

    if isinstance(data, dict):
        reason = data.get("error") or data.get("detail")
        if isinstance(reason, str) and reason:
            return reason
    if text and text.strip() and data is None:
        return text.strip()[:200]
    return response.reason_phrase or f"HTTP {response.status_code}"


class SignerClient:
    """Requests one fresh UploadSignature per upload attempt.

    Signatures are never cached: each call is a new round trip.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        signature_url: str,
        *,
        timeout: float | None = 30.0,
    ) -> None:
        """Initialize the signer client.

        Args:
            http: Shared async HTTP client.
            signature_url: Absolute URL of the signature endpoint.
            timeout: Per-request timeout in seconds.
        """
        self._http = http
        self._url = signature_url
        self._timeout = timeout

    async def request_signature(
        self,
        resource_kind: ResourceKind,
        folder: str | None = None,
    ) -> UploadSignature:
        """Request a signature for one upload.

        Raises:
            UploadError: SIGNATURE_UNAVAILABLE on any failure.
        """
        body: dict[str, str] = {"resourceType": resource_kind.value}
        if folder:
            body["folder"] = folder

        try:
            response = await self._http.post(self._url, json=body, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.warning("Signature request failed: %s", e)
            raise UploadError(
                ErrorKind.SIGNATURE_UNAVAILABLE,
                "Failed to get upload signature: signer unreachable",
            ) from e

        if not response.is_success:
            reason = response_error_reason(response)
            logger.warning(
                "Signature endpoint returned %s: %s", response.status_code, reason
            )
            raise UploadError(
                ErrorKind.SIGNATURE_UNAVAILABLE,
                f"Failed to get upload signature: {reason}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Invalid response from signature endpoint")
            raise UploadError(
                ErrorKind.SIGNATURE_UNAVAILABLE,
                "Invalid response from signature endpoint",
            ) from e

        try:
            signature = UploadSignature.model_validate(data)
        except ValidationError as e:
            logger.error("Incomplete signature data received: %s", sanitize(data))
            raise UploadError(
                ErrorKind.SIGNATURE_UNAVAILABLE,
                "Incomplete signature data received",
            ) from e

        if not (signature.signature and signature.cloud_name and signature.api_key):
            logger.error("Incomplete signature data received: %s", sanitize(data))
            raise UploadError(
                ErrorKind.SIGNATURE_UNAVAILABLE,
                "Incomplete signature data received",
            )
        return signature
