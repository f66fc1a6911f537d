"""Data Access Objects package."""

from .base import BaseDAO
from .comment_dao import MediaCommentDAO
from .media_dao import MediaRecordDAO

__all__ = [
    "BaseDAO",
    "MediaCommentDAO",
    "MediaRecordDAO",
]
