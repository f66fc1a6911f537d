"""Client for the application's media record API."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.client.errors import MediaApiError
from app.client.signer_client import response_error_reason
from app.enums import ContentType
from app.models.domain import AuthContext, LikeState, MediaComment, MediaRecord
from app.security.auth_context import auth_headers

logger = logging.getLogger(__name__)


class MediaApiClient:
    """Thin async wrapper over `/api/<content_type>` endpoints.

    The identity travels in headers set from the AuthContext passed at
    construction.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        auth: AuthContext | None = None,
        *,
        timeout: float | None = 30.0,
    ) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = timeout

    def _url(self, content_type: ContentType, *parts: str) -> str:
        return "/".join([f"{self._base_url}/api/{content_type.value}", *parts])

    def _headers(self) -> dict[str, str]:
        return auth_headers(self._auth)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(
                method, url, headers=self._headers(), timeout=self._timeout, **kwargs
            )
        except httpx.HTTPError as e:
            raise MediaApiError(f"Could not reach media API: {e}") from e

        if not response.is_success:
            raise MediaApiError(
                response_error_reason(response), status_code=response.status_code
            )
        return response

    @staticmethod
    def _record(response: httpx.Response) -> MediaRecord:
        try:
            return MediaRecord.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise MediaApiError("Invalid record returned by media API") from e

    async def create_record(
        self, content_type: ContentType, payload: dict[str, Any]
    ) -> MediaRecord:
        """Create a record from a camelCase payload."""
        response = await self._request("POST", self._url(content_type), json=payload)
        return self._record(response)

    async def update_secondary(
        self,
        content_type: ContentType,
        record_id: str,
        thumbnail_url: str,
        thumbnail_public_id: str | None = None,
    ) -> MediaRecord:
        body: dict[str, str] = {"thumbnailUrl": thumbnail_url}
        if thumbnail_public_id:
            body["thumbnailPublicId"] = thumbnail_public_id
        response = await self._request("PUT", self._url(content_type, record_id), json=body)
        return self._record(response)

    async def get_record(self, content_type: ContentType, record_id: str) -> MediaRecord:
        response = await self._request("GET", self._url(content_type, record_id))
        return self._record(response)

    async def toggle_like(self, content_type: ContentType, record_id: str) -> LikeState:
        response = await self._request("POST", self._url(content_type, record_id, "like"))
        try:
            return LikeState.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise MediaApiError("Invalid like state returned by media API") from e

    async def add_comment(
        self, content_type: ContentType, record_id: str, content: str
    ) -> MediaComment:
        response = await self._request(
            "POST", self._url(content_type, record_id, "comments"), json={"content": content}
        )
        try:
            return MediaComment.model_validate(response.json()["comment"])
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise MediaApiError("Invalid comment returned by media API") from e

    async def list_comments(
        self, content_type: ContentType, record_id: str
    ) -> list[MediaComment]:
        response = await self._request("GET", self._url(content_type, record_id, "comments"))
        try:
            return [MediaComment.model_validate(c) for c in response.json()]
        except (ValueError, TypeError, ValidationError) as e:
            raise MediaApiError("Invalid comments returned by media API") from e

    async def record_view(self, content_type: ContentType, record_id: str) -> bool:
        """Count a view. Best effort: failures are logged, never raised.

        Returns:
            True if the server counted the view
        """
        try:
            await self._request("POST", self._url(content_type, record_id, "view"))
        except MediaApiError as e:
            logger.warning("Failed to record view for %s/%s: %s", content_type, record_id, e)
            return False
        return True
