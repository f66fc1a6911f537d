"""Unit tests for SignerClient."""

import json

import httpx
import pytest

from app.client.errors import UploadError
from app.client.signer_client import SignerClient
from app.enums import ErrorKind, ResourceKind

SIGNATURE_URL = "http://media.test/api/cloudinary/signature"

GOOD_SIGNATURE = {
    "signature": "abc",
    "timestamp": 1700000000,
    "cloudName": "demo",
    "apiKey": "123",
}


def _signer(handler) -> tuple[SignerClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(recording))
    return SignerClient(http, SIGNATURE_URL), seen


async def test_requests_signature_with_camel_case_body():
    signer, seen = _signer(lambda r: httpx.Response(200, json={**GOOD_SIGNATURE, "folder": "boats"}))

    sig = await signer.request_signature(ResourceKind.VIDEO, folder="boats")

    assert sig.signature == "abc"
    assert sig.cloud_name == "demo"
    assert sig.api_key == "123"
    assert sig.folder == "boats"
    assert json.loads(seen[0].content) == {"resourceType": "video", "folder": "boats"}


async def test_every_call_is_a_new_round_trip():
    signer, seen = _signer(lambda r: httpx.Response(200, json=GOOD_SIGNATURE))

    await signer.request_signature(ResourceKind.IMAGE)
    await signer.request_signature(ResourceKind.IMAGE)

    assert len(seen) == 2
    assert json.loads(seen[0].content) == {"resourceType": "image"}


@pytest.mark.parametrize(
    "response,expected",
    [
        (httpx.Response(500, json={"error": "Missing api secret configuration"}), "Missing api secret configuration"),
        (httpx.Response(403, json={"detail": "Forbidden"}), "Forbidden"),
        (httpx.Response(502, text="Bad gateway from proxy"), "Bad gateway from proxy"),
        (httpx.Response(503, json={}), "Service Unavailable"),
    ],
)
async def test_error_bodies(response, expected):
    signer, _ = _signer(lambda r: response)

    with pytest.raises(UploadError) as exc:
        await signer.request_signature(ResourceKind.VIDEO)

    assert exc.value.kind == ErrorKind.SIGNATURE_UNAVAILABLE
    assert exc.value.message == f"Failed to get upload signature: {expected}"
    assert exc.value.status_code == response.status_code


async def test_unreachable_signer():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    signer, _ = _signer(refuse)

    with pytest.raises(UploadError) as exc:
        await signer.request_signature(ResourceKind.VIDEO)

    assert exc.value.kind == ErrorKind.SIGNATURE_UNAVAILABLE


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        json.dumps({"signature": "abc"}).encode(),
        json.dumps({**GOOD_SIGNATURE, "signature": ""}).encode(),
        json.dumps({**GOOD_SIGNATURE, "cloudName": ""}).encode(),
    ],
)
async def test_unusable_success_bodies(body):
    signer, _ = _signer(lambda r: httpx.Response(200, content=body))

    with pytest.raises(UploadError) as exc:
        await signer.request_signature(ResourceKind.VIDEO)

    assert exc.value.kind == ErrorKind.SIGNATURE_UNAVAILABLE


async def test_signature_is_not_logged(caplog):
    caplog.set_level("DEBUG")
    signer, _ = _signer(
        lambda r: httpx.Response(200, json={**GOOD_SIGNATURE, "signature": "topsecretsig", "cloudName": ""})
    )

    with pytest.raises(UploadError):
        await signer.request_signature(ResourceKind.VIDEO)

    assert "topsecretsig" not in caplog.text
