"""Optimistic local state for engagement counters."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from app.client.api_client import MediaApiClient
from app.enums import ContentType
from app.models.domain import LikeState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OptimisticValue(Generic[T]):
    """A value shown before the server confirms it.

    `apply` swaps in the guessed value and remembers the confirmed one,
    `reconcile` replaces the guess with what the server returned, and
    `rollback` restores the last confirmed value.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._confirmed = value

    @property
    def value(self) -> T:
        return self._value

    @property
    def is_pending(self) -> bool:
        return self._value is not self._confirmed

    def apply(self, value: T) -> None:
        self._value = value

    def reconcile(self, value: T) -> None:
        self._value = value
        self._confirmed = value

    def rollback(self) -> None:
        self._value = self._confirmed

    async def commit(self, guess: T, remote: Callable[[], Awaitable[T]]) -> T:
        """Apply `guess`, run `remote`, and keep the server's answer.

        Raises:
            Whatever `remote` raises, after rolling back.
        """
        self.apply(guess)
        try:
            confirmed = await remote()
        except Exception:
            self.rollback()
            raise
        self.reconcile(confirmed)
        return confirmed


class LikeToggle:
    """Like button state for one record."""

    def __init__(
        self,
        api: MediaApiClient,
        content_type: ContentType,
        record_id: str,
        state: LikeState,
    ) -> None:
        self._api = api
        self._content_type = content_type
        self._record_id = record_id
        self._state = OptimisticValue(state)

    @property
    def state(self) -> LikeState:
        return self._state.value

    async def toggle(self) -> LikeState:
        """Flip the like locally, then confirm it with the server.

        Raises:
            MediaApiError: The server call failed; the state is rolled back.
        """
        current = self._state.value
        delta = -1 if current.liked else 1
        guess = LikeState(
            liked=not current.liked,
            likes_count=max(current.likes_count + delta, 0),
        )

        async def remote() -> LikeState:
            return await self._api.toggle_like(self._content_type, self._record_id)

        try:
            return await self._state.commit(guess, remote)
        except Exception:
            logger.warning("Like toggle for %s rolled back", self._record_id)
            raise
