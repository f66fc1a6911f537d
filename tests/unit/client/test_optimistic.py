"""Unit tests for optimistic local state."""

from unittest.mock import AsyncMock

import pytest

from app.client.errors import MediaApiError
from app.client.optimistic import LikeToggle, OptimisticValue
from app.enums import ContentType
from app.models.domain import LikeState


class TestOptimisticValue:
    async def test_commit_reconciles_to_server_value(self):
        value = OptimisticValue(10)
        seen_during_commit = []

        async def remote():
            seen_during_commit.append(value.value)
            return 12

        confirmed = await value.commit(11, remote)

        assert seen_during_commit == [11]
        assert confirmed == 12
        assert value.value == 12
        assert not value.is_pending

    async def test_failure_rolls_back_and_reraises(self):
        value = OptimisticValue("a")

        async def remote():
            raise MediaApiError("offline")

        with pytest.raises(MediaApiError):
            await value.commit("b", remote)

        assert value.value == "a"

    def test_manual_apply_and_rollback(self):
        value = OptimisticValue([1])
        value.apply([1, 2])

        assert value.is_pending
        value.rollback()
        assert value.value == [1]


class TestLikeToggle:
    async def test_like_applies_then_confirms(self):
        api = AsyncMock()
        toggle = LikeToggle(api, ContentType.PHOTOS, "rec-1", LikeState(liked=False, likes_count=2))

        async def confirm(content_type, record_id):
            assert toggle.state == LikeState(liked=True, likes_count=3)
            return LikeState(liked=True, likes_count=5)

        api.toggle_like.side_effect = confirm

        state = await toggle.toggle()

        assert state == LikeState(liked=True, likes_count=5)
        assert toggle.state == state
        api.toggle_like.assert_awaited_once_with(ContentType.PHOTOS, "rec-1")

    async def test_unlike_never_goes_negative(self):
        api = AsyncMock()
        api.toggle_like.return_value = LikeState(liked=False, likes_count=0)
        toggle = LikeToggle(api, ContentType.PHOTOS, "rec-1", LikeState(liked=True, likes_count=0))

        state = await toggle.toggle()

        assert state.likes_count == 0

    async def test_failure_restores_previous_state(self):
        api = AsyncMock()
        api.toggle_like.side_effect = MediaApiError("Unauthorized", status_code=401)
        before = LikeState(liked=False, likes_count=7)
        toggle = LikeToggle(api, ContentType.VIDEOS, "rec-1", before)

        with pytest.raises(MediaApiError):
            await toggle.toggle()

        assert toggle.state == before
