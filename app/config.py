"""Configuration with JSON file, secrets.yml, and env variable support."""

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "MEDIA_"


def _flatten_secrets_mapping(secrets: dict) -> dict:
    """Flatten nested secrets into MediaConfig keys.

    Converts nested YAML structure to flat config keys:
        cloudinary.api_secret -> cloudinary_api_secret
        database.url          -> database_url
    """
    flat = {}
    for section, values in secrets.items():
        if isinstance(values, dict):
            for key, value in values.items():
                flat[f"{section}_{key}"] = value
        else:
            flat[section] = values
    return flat


def _load_secrets(secrets_path: Path) -> dict:
    """Load and flatten secrets from YAML file."""
    if not secrets_path.exists():
        return {}

    with open(secrets_path) as f:
        secrets = yaml.safe_load(f) or {}

    if not isinstance(secrets, dict):
        return {}

    return _flatten_secrets_mapping(secrets)


class MediaConfig(BaseSettings):
    """Configuration with JSON file + secrets.yml + env var support.

    Load order (later overrides earlier):
    1. config.json - base configuration
    2. secrets.yml - Cloudinary credentials and other sensitive values
    3. Environment variables - runtime overrides

    Prefix: MEDIA_ (e.g., MEDIA_CLOUDINARY_API_SECRET)
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Cloud asset host
    cloudinary_cloud_name: str | None = Field(default=None)
    cloudinary_api_key: str | None = Field(default=None)
    cloudinary_api_secret: str | None = Field(default=None)
    cloudinary_upload_base_url: str = Field(default="https://api.cloudinary.com")
    default_upload_folder: str = Field(
        default="",
        description="Folder used when a caller does not name one. Empty means the account root.",
    )

    # Upload client
    api_base_url: str = Field(
        default="http://localhost:8742",
        description="Base URL of this service, as seen by upload clients.",
    )
    signature_path: str = Field(default="/api/cloudinary/signature")
    upload_chunk_size: int = Field(default=64 * 1024, gt=0)
    upload_timeout_seconds: float | None = Field(
        default=300.0,
        description=(
            "Overall limit for one file transfer. None disables the limit and "
            "leaves only the transport defaults in place."
        ),
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Limit for signature and metadata requests.",
    )

    # Database settings
    database_url: str = Field(default="sqlite+aiosqlite:///./media.db")
    auto_create_tables: bool = Field(
        default=False,
        description=(
            "If true, create tables on startup instead of relying on Alembic "
            "migrations. Convenient for local runs and tests."
        ),
    )

    # API settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8742)

    # Logging
    log_level: str = Field(default="INFO")

    def missing_cloudinary_settings(self) -> list[str]:
        """Names of unset Cloudinary credentials, in a stable order."""
        missing = []
        if not self.cloudinary_cloud_name:
            missing.append("cloud_name")
        if not self.cloudinary_api_key:
            missing.append("api_key")
        if not self.cloudinary_api_secret:
            missing.append("api_secret")
        return missing

    @property
    def signature_url(self) -> str:
        return self.api_base_url.rstrip("/") + "/" + self.signature_path.lstrip("/")

    @classmethod
    def from_json_file(
        cls,
        config_path: str = "config.json",
        secrets_path: str = "secrets.yml",
    ) -> "MediaConfig":
        """Load config from JSON + secrets.yml with env var overrides.

        Args:
            config_path: Path to JSON config file.
            secrets_path: Path to secrets YAML file.

        Returns:
            Configured MediaConfig instance.
        """
        config_data: dict[str, Any] = {}

        json_path = Path(config_path)
        if json_path.exists():
            with open(json_path) as f:
                config_data = json.load(f)

        # Merge secrets (overrides JSON values)
        config_data.update(_load_secrets(Path(secrets_path)))

        # Drop keys that an env var overrides so pydantic-settings can apply it.
        for key in list(config_data):
            if f"{ENV_PREFIX}{key.upper()}" in os.environ:
                del config_data[key]

        return cls(**config_data)
