"""Unit tests for SigningService and the Cloudinary signature algorithm."""

import hashlib

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from app.enums import ResourceKind
from app.services.signing_service import (
    SignerConfigurationError,
    SigningService,
    sign_params,
)


def _sha1(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


class TestSignParams:
    def test_timestamp_only(self):
        assert sign_params({"timestamp": 1700000000}, "shh") == _sha1("timestamp=1700000000shh")

    def test_keys_sorted_and_joined(self):
        params = {"timestamp": 1700000000, "folder": "boats"}
        assert sign_params(params, "shh") == _sha1("folder=boats&timestamp=1700000000shh")

    def test_empty_values_left_out(self):
        assert sign_params({"timestamp": 1, "folder": ""}, "s") == sign_params(
            {"timestamp": 1}, "s"
        )
        assert sign_params({"timestamp": 1, "folder": None}, "s") == sign_params(
            {"timestamp": 1}, "s"
        )

    @settings(max_examples=50)
    @given(
        timestamp=st.integers(min_value=0, max_value=2**31),
        folder=st.text(alphabet="abcdefghijklmnopqrstuvwxyz/_-", min_size=1, max_size=20),
    )
    def test_insertion_order_does_not_matter(self, timestamp, folder):
        a = sign_params({"timestamp": timestamp, "folder": folder}, "secret")
        b = sign_params({"folder": folder, "timestamp": timestamp}, "secret")
        assert a == b
        assert len(a) == 40


class TestIssue:
    def test_issues_signature_for_current_time(self, media_config):
        service = SigningService(media_config, clock=lambda: 1700000000.4)

        sig = service.issue(ResourceKind.VIDEO, folder="boats")

        assert sig.timestamp == 1700000000
        assert sig.cloud_name == "demo"
        assert sig.api_key == "123"
        assert sig.folder == "boats"
        assert sig.resource_type == "video"
        assert sig.signature == _sha1("folder=boats&timestamp=1700000000shh")

    def test_default_folder_is_signed(self, media_config):
        config = media_config.model_copy(update={"default_upload_folder": "seafarer"})
        service = SigningService(config, clock=lambda: 1700000000)

        sig = service.issue()

        assert sig.folder == "seafarer"
        assert sig.signature == _sha1("folder=seafarer&timestamp=1700000000shh")

    def test_no_folder(self, media_config):
        sig = SigningService(media_config, clock=lambda: 1700000000).issue()

        assert sig.folder is None
        assert sig.resource_type is None
        assert sig.signature == _sha1("timestamp=1700000000shh")

    def test_fresh_signature_per_call(self, media_config):
        ticks = iter([1700000000, 1700000001])
        service = SigningService(media_config, clock=lambda: next(ticks))

        assert service.issue().signature != service.issue().signature

    @pytest.mark.parametrize(
        "field,message",
        [
            ("cloudinary_cloud_name", "Missing cloud name configuration"),
            ("cloudinary_api_key", "Missing api key configuration"),
            ("cloudinary_api_secret", "Missing api secret configuration"),
        ],
    )
    def test_missing_credentials(self, media_config, field, message):
        config = media_config.model_copy(update={field: None})

        with pytest.raises(SignerConfigurationError, match=message):
            SigningService(config).issue()

    def test_secret_never_logged(self, media_config, caplog):
        caplog.set_level("INFO")
        sig = SigningService(media_config, clock=lambda: 1700000000).issue()

        assert sig.signature not in caplog.text
        assert "shh" not in caplog.text
