"""Process-wide signed-in user context."""

import asyncio

import structlog

from horizon_talk.errors import NotSignedInError, PersistenceError
from horizon_talk.models.user_profile import UserIdentity, UserProfile
from horizon_talk.storage.user_service import UserService

logger = structlog.get_logger()


class UserContext:
    """Holds the current user for the components that need one.

    Lifecycle: created at start-up, filled by ``sign_in``, cleared by
    ``sign_out``, and re-filled whenever the identity provider reports an
    auth-state change.

    Args:
        user_service: Persistence service used to create/refresh profiles.
    """

    def __init__(self, user_service: UserService):
        self.user_service = user_service
        self.user: UserIdentity | None = None
        self.profile: UserProfile | None = None

    @property
    def is_signed_in(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> str | None:
        return self.user.uid if self.user else None

    def require_user(self) -> UserIdentity:
        if self.user is None:
            raise NotSignedInError("no user is signed in")
        return self.user

    async def sign_in(self, identity: UserIdentity) -> UserProfile | None:
        """Make ``identity`` current and make sure its profile exists.

        A profile failure is logged and leaves the user signed in without
        a loaded profile.
        """
        self.user = identity
        try:
            self.profile = await asyncio.to_thread(self.user_service.ensure_profile, identity)
        except PersistenceError:
            logger.warning("sign_in_profile_unavailable", user_id=identity.uid)
            self.profile = None
        logger.info("user_signed_in", user_id=identity.uid)
        return self.profile

    def sign_out(self) -> None:
        if self.user is not None:
            logger.info("user_signed_out", user_id=self.user.uid)
        self.user = None
        self.profile = None

    async def on_auth_state_changed(self, identity: UserIdentity | None) -> None:
        if identity is None:
            self.sign_out()
        elif self.user is None or self.user.uid != identity.uid:
            await self.sign_in(identity)


_context: UserContext | None = None


def get_user_context() -> UserContext:
    """Return the process-wide context, creating it on first use."""
    global _context
    if _context is None:
        _context = UserContext(UserService())
    return _context
