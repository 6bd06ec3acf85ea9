"""Tests for the signed-in user context."""

import pytest

from horizon_talk.auth.context import UserContext
from horizon_talk.errors import NotSignedInError
from horizon_talk.models.user_profile import UserIdentity

IDENTITY = UserIdentity(uid="u1", email="sarah@example.com")


@pytest.fixture
def context(user_service):
    return UserContext(user_service)


class TestUserContext:
    def test_starts_signed_out(self, context):
        assert not context.is_signed_in
        assert context.user_id is None
        with pytest.raises(NotSignedInError):
            context.require_user()

    async def test_sign_in_creates_profile(self, context, fake_db):
        profile = await context.sign_in(IDENTITY)
        assert context.user_id == "u1"
        assert context.require_user() == IDENTITY
        assert profile.uid == "u1"
        assert "profile" in fake_db.root["users"]["u1"]

    async def test_sign_in_survives_store_outage(self, context, fake_db):
        fake_db.fail = True
        assert await context.sign_in(IDENTITY) is None
        assert context.is_signed_in
        assert context.profile is None

    async def test_sign_out(self, context):
        await context.sign_in(IDENTITY)
        context.sign_out()
        assert not context.is_signed_in
        assert context.profile is None

    async def test_auth_state_changes(self, context):
        await context.on_auth_state_changed(IDENTITY)
        assert context.user_id == "u1"
        other = UserIdentity(uid="u2", email="li@example.com")
        await context.on_auth_state_changed(other)
        assert context.user_id == "u2"
        assert context.profile.uid == "u2"
        await context.on_auth_state_changed(None)
        assert not context.is_signed_in
