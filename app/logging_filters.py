"""Logging filters shared by `python -m app.main` and `uvicorn app.asgi:app`."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

QUIET_PATHS = ("/health", "/api/check-env")


def _path_of(record: logging.LogRecord) -> str | None:
    # Uvicorn access records carry (client_addr, method, full_path, http_version, status_code)
    args: Any = record.args
    if isinstance(args, tuple) and len(args) >= 3:
        return str(args[2]).split("?", 1)[0]
    return None


class QuietPathsAccessFilter(logging.Filter):
    """Drop Uvicorn access log records for polled endpoints.

    Health checks and environment probes would otherwise flood the access
    log; every other route is still logged.
    """

    def __init__(self, paths: Iterable[str] = QUIET_PATHS) -> None:
        super().__init__()
        self.paths = frozenset(paths)

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (filter)
        path = _path_of(record)
        if path is not None:
            return path not in self.paths

        message = record.getMessage()
        for quiet in self.paths:
            if f'"GET {quiet} ' in message or f'"HEAD {quiet} ' in message:
                return False
        return True


def install_uvicorn_access_log_filters(paths: Iterable[str] = QUIET_PATHS) -> None:
    """Install the quiet-path filter on the Uvicorn access logger.

    Safe to call multiple times.
    """
    access_logger = logging.getLogger("uvicorn.access")
    for existing in access_logger.filters:
        if isinstance(existing, QuietPathsAccessFilter):
            return
    access_logger.addFilter(QuietPathsAccessFilter(paths))
