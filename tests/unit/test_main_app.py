"""Tests for application wiring."""

import logging

import httpx
import pytest
import pytest_asyncio

from app.main import configure_logging, create_app, get_application


@pytest_asyncio.fixture
async def application(media_config, test_db):
    return await create_app(media_config, database=test_db)


def _client(application) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=application.fastapi_app),
        base_url="http://media.test",
    )


async def test_create_app_wires_services(application):
    assert get_application() is application
    assert application.media_dao is not None
    assert application.comment_dao is not None
    assert application.signing_service is not None
    assert application.media_service is not None


async def test_health(application):
    async with _client(application) as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.parametrize(
    "path",
    ["/api/check-env", "/api/cloudinary/signature"],
)
async def test_signature_routes_win_over_collections(application, path):
    async with _client(application) as client:
        response = await client.get(path)

    assert response.status_code == 200


async def test_collections_served(application):
    async with _client(application) as client:
        response = await client.get("/api/podcasts")

    assert response.status_code == 200
    assert response.json() == []


async def test_missing_credentials_logged(media_config, test_db, caplog):
    config = media_config.model_copy(update={"cloudinary_api_secret": None})

    await create_app(config, database=test_db)

    assert "Cloudinary settings missing (api_secret)" in caplog.text


def test_configure_logging_quiets_httpx():
    configure_logging()
    assert logging.getLogger("httpx").level == logging.WARNING
