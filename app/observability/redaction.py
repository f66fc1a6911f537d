"""Redaction helpers to keep upload credentials out of logs.

Signatures, API keys and the API secret travel through signer responses and
multipart form fields. Anything logged from those paths goes through
`sanitize` first.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any


_REPLACEMENT = "[REDACTED]"
_TRUNC_SUFFIX = "…(truncated)"


# Matches both snake_case form fields and camelCase JSON keys.
_SECRET_KEY_RE = re.compile(
    r"(^|_)(signature|secret|password|token|authorization|api_?key)($|_)",
    flags=re.IGNORECASE,
)

_SENSITIVE_VALUE_RES: list[re.Pattern[str]] = [
    re.compile(r"\b(?:api_?key|apikey)\s*[:=]\s*\S+", flags=re.IGNORECASE),
    re.compile(r"\b(?:api_?secret|secret)\s*[:=]\s*\S+", flags=re.IGNORECASE),
    re.compile(r"\bsignature\s*[:=]\s*\S+", flags=re.IGNORECASE),
    re.compile(r"\bBearer\s+[A-Za-z0-9._\-]+\b", flags=re.IGNORECASE),
]


def _looks_sensitive_key(key: str) -> bool:
    # camelCase -> snake_case so "apiKey" and "api_key" behave the same.
    snake = re.sub(r"(?<!^)(?=[A-Z])", "_", key)
    return bool(_SECRET_KEY_RE.search(snake))


def redact_text(text: str, *, max_chars: int = 2000) -> str:
    """Redact credential-looking substrings and truncate."""
    if text is None:
        return text

    out = text
    for rx in _SENSITIVE_VALUE_RES:
        out = rx.sub(_REPLACEMENT, out)

    if max_chars and len(out) > max_chars:
        out = out[:max_chars] + _TRUNC_SUFFIX

    return out


def sanitize(obj: Any, *, max_depth: int = 4, max_chars: int = 2000) -> Any:
    """Sanitize an object for logging.

    - Mapping keys that look like credentials have their values replaced.
    - String values are scanned for credential substrings.
    - File payloads are reduced to their size.
    """
    if max_depth <= 0:
        return "…"

    if obj is None or isinstance(obj, (int, float, bool)):
        return obj

    if isinstance(obj, (bytes, bytearray)):
        return f"<bytes:{len(obj)}>"

    if isinstance(obj, str):
        return redact_text(obj, max_chars=max_chars)

    if isinstance(obj, Mapping):
        return {
            str(k): (
                _REPLACEMENT
                if _looks_sensitive_key(str(k))
                else sanitize(v, max_depth=max_depth - 1, max_chars=max_chars)
            )
            for k, v in obj.items()
        }

    if isinstance(obj, Sequence):
        return [sanitize(v, max_depth=max_depth - 1, max_chars=max_chars) for v in obj]

    return redact_text(str(obj), max_chars=max_chars)
