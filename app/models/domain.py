"""Pydantic domain models.

These models are returned by DAOs, exchanged over HTTP, and passed between
the upload client components. SQLAlchemy ORM objects never leave the DAO
layer - always convert to these models.
"""

from datetime import datetime

from pydantic import ConfigDict, Field

from app.enums import ContentType, ResourceKind, UploadPhase, UserRole
from app.models.base import JsonModel


class UploadSignature(JsonModel):
    """Short-lived authorization for one direct upload.

    `cloud_name` identifies the storage account and `api_key` is the public
    access key; neither is a secret. Issued per attempt and never stored.
    """

    signature: str
    timestamp: int
    cloud_name: str
    api_key: str
    folder: str | None = None
    resource_type: str | None = None


class UploadedAsset(JsonModel):
    """Asset descriptor built from the cloud host's success response."""

    model_config = ConfigDict(frozen=True)

    remote_url: str
    storage_id: str
    resource_kind: ResourceKind
    format: str = ""
    duration: float | None = None
    size_bytes: int | None = None


class UploadProgress(JsonModel):
    """Progress snapshot for one transfer."""

    percent: float = Field(ge=0, le=100)
    phase: UploadPhase


class MediaRecord(JsonModel):
    """Persisted media entity.

    Holds the primary asset, an optional secondary (thumbnail) asset, and
    domain fields. The thumbnail fields stay None until a thumbnail upload
    has completed and been attached.
    """

    id: str
    content_type: ContentType
    owner_id: str | None = None
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    public_id: str
    url: str
    resource_type: str
    format: str | None = None
    duration: float | None = None
    thumbnail_url: str | None = None
    thumbnail_public_id: str | None = None
    views: int = 0
    likes_count: int = 0
    created_at: datetime
    updated_at: datetime

    @property
    def has_thumbnail(self) -> bool:
        return self.thumbnail_url is not None


class LikeState(JsonModel):
    """Result of toggling a like."""

    liked: bool
    likes_count: int


class MediaComment(JsonModel):
    """A comment left on a media record."""

    id: str
    record_id: str
    user_id: str
    user_name: str
    user_image: str | None = None
    content: str
    timestamp: datetime
    likes: int = 0


class AuthContext(JsonModel):
    """Identity asserted by the external identity provider."""

    user_id: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_modify(self, owner_id: str | None) -> bool:
        """Owners may modify their records; admins may modify any record."""
        if self.is_admin:
            return True
        return owner_id is not None and owner_id == self.user_id
