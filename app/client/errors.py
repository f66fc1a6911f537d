"""Typed errors raised by the upload client."""

from app.enums import ErrorKind


class UploadError(Exception):
    """An upload step failed.

    `kind` tells the caller which step failed so it can pick a message:
    a METADATA_PERSIST_FAILED error means the file itself reached the host.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"UploadError(kind={self.kind.value!r}, message={self.message!r})"


class MediaApiError(Exception):
    """The application API rejected a request or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
