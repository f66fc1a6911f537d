from app.observability.redaction import redact_text, sanitize


def test_redact_text_masks_inline_credentials() -> None:
    out = redact_text("signature=abc123 api_key=987 Bearer tok.en-1 folder=boats")
    assert "abc123" not in out
    assert "987" not in out
    assert "tok.en-1" not in out
    assert "folder=boats" in out


def test_redact_text_truncates() -> None:
    out = redact_text("x" * 50, max_chars=10)
    assert out.startswith("x" * 10)
    assert out.endswith("…(truncated)")


def test_sanitize_masks_snake_and_camel_keys() -> None:
    data = {
        "signature": "abc",
        "apiKey": "123",
        "api_key": "123",
        "api_secret": "shh",
        "cloudName": "demo",
        "timestamp": 1700000000,
    }
    out = sanitize(data)
    assert out["signature"] == "[REDACTED]"
    assert out["apiKey"] == "[REDACTED]"
    assert out["api_key"] == "[REDACTED]"
    assert out["api_secret"] == "[REDACTED]"
    assert out["cloudName"] == "demo"
    assert out["timestamp"] == 1700000000


def test_sanitize_reduces_file_payloads_to_size() -> None:
    assert sanitize({"file": b"\x00" * 2048}) == {"file": "<bytes:2048>"}


def test_sanitize_nested_and_depth_limited() -> None:
    out = sanitize({"a": [{"token": "t"}]})
    assert out == {"a": [{"token": "[REDACTED]"}]}
    assert sanitize({"a": {"b": {"c": 1}}}, max_depth=2) == {"a": {"b": "…"}}
