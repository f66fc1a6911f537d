"""Unit tests for the signature router.

Tests HTTP endpoint behavior and the JSON error body clients parse.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.config import MediaConfig
from app.routers.signature_router import create_signature_router
from app.services.signing_service import SigningService, sign_params


def _client(config: MediaConfig) -> TestClient:
    app = FastAPI()
    service = SigningService(config, clock=lambda: 1700000000)
    app.include_router(create_signature_router(service, config))
    return TestClient(app)


@pytest.fixture
def client(media_config):
    return _client(media_config)


class TestPostSignature:
    def test_returns_camel_case_signature(self, client):
        response = client.post(
            "/api/cloudinary/signature",
            json={"resourceType": "video", "folder": "seafarer/videos"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["cloudName"] == "demo"
        assert data["apiKey"] == "123"
        assert data["timestamp"] == 1700000000
        assert data["folder"] == "seafarer/videos"
        assert data["resourceType"] == "video"
        assert data["signature"] == sign_params(
            {"timestamp": 1700000000, "folder": "seafarer/videos"}, "shh"
        )

    def test_empty_body(self, client):
        response = client.post("/api/cloudinary/signature", json={})

        assert response.status_code == 200
        assert response.json()["folder"] is None
        assert response.json()["signature"] == sign_params({"timestamp": 1700000000}, "shh")

    def test_unknown_resource_type_rejected(self, client):
        response = client.post("/api/cloudinary/signature", json={"resourceType": "movie"})
        assert response.status_code == 422

    def test_missing_secret_returns_json_error(self, media_config):
        client = _client(media_config.model_copy(update={"cloudinary_api_secret": None}))

        response = client.post("/api/cloudinary/signature", json={"resourceType": "image"})

        assert response.status_code == 500
        assert response.json() == {"error": "Missing api secret configuration"}


class TestGetSignature:
    def test_query_parameters(self, client):
        response = client.get(
            "/api/cloudinary/signature", params={"folder": "boats", "resourceType": "image"}
        )

        assert response.status_code == 200
        assert response.json()["folder"] == "boats"
        assert response.json()["resourceType"] == "image"


class TestCheckEnv:
    def test_reports_presence_only(self, client):
        response = client.get("/api/check-env")

        assert response.status_code == 200
        assert response.json() == {"cloudName": True, "apiKey": True, "apiSecret": True}

    def test_reports_missing(self):
        client = _client(MediaConfig(_env_file=None, cloudinary_cloud_name="demo"))

        response = client.get("/api/check-env")

        assert response.json() == {"cloudName": True, "apiKey": False, "apiSecret": False}
