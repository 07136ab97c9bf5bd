"""
Signed-in user state.

Services that depend on who is signed in (cart, favorites) subscribe to the
session and are awaited whenever the user changes.
"""

import logging
from typing import Awaitable, Callable, Optional

from storefront.client.api_client import ApiClient
from storefront.client.notifier import Notifier
from storefront.schemas.user_schema import ProfileUpdate, User

logger = logging.getLogger(__name__)

UserListener = Callable[[Optional[User]], Awaitable[None]]

SIGN_IN_TO_EDIT_PROFILE = "Please sign in to edit your profile"


class AuthSession:
    def __init__(self, api: ApiClient, notifier: Notifier) -> None:
        self._api = api
        self._notifier = notifier
        self._user: Optional[User] = None
        self._listeners: list[UserListener] = []

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: UserListener) -> None:
        self._listeners.append(listener)

    async def set_user(self, user: Optional[User]) -> None:
        self._user = user
        for listener in self._listeners:
            await listener(user)

    async def sign_up(self, email: str, password: str, name: str) -> bool:
        """Create the account, then sign straight in."""
        response = await self._api.signup(email, password, name)
        if not response.success:
            self._notifier.error(response.error or "Sign up failed")
            return False
        return await self.sign_in(email, password)

    async def sign_in(self, email: str, password: str) -> bool:
        response = await self._api.signin(email, password)
        if not response.success:
            self._notifier.error(response.error or "Sign in failed")
            return False
        user = User.model_validate(response.data["user"])
        logger.info("Signed in as %s", user.id)
        await self.set_user(user)
        return True

    async def update_profile(self, **fields: str) -> bool:
        """Save profile fields (``full_name``, ``phone``, ``address``, ...).

        The checkout form is pre-filled from these on the next ``new_form``.
        Listeners are not notified since the signed-in user stays the same.
        """
        user = self._user
        if user is None:
            self._notifier.auth_required(SIGN_IN_TO_EDIT_PROFILE)
            return False
        body = ProfileUpdate.model_validate(fields).to_wire(exclude_unset=True)
        response = await self._api.update_profile(user.id, body)
        if not response.success:
            self._notifier.error(response.error or "Failed to update profile")
            return False
        self._user = User.model_validate(response.data["user"])
        self._notifier.success("Profile updated")
        return True

    async def sign_out(self) -> None:
        if self._user is None:
            return
        await self.set_user(None)
        self._notifier.info("Signed out")
