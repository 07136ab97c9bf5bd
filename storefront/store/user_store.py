"""
Account storage for signup and sign-in.

Users are stored at ``user:{id}`` with an email lookup at
``user_email:{email}``. New accounts are confirmed immediately since the
storefront sends no confirmation mail.
"""

import json
import logging
import uuid
from typing import Optional

from passlib.context import CryptContext

from storefront.errors import AuthenticationError, NotFoundError, ValidationError
from storefront.schemas.user_schema import SigninRequest, SignupRequest, User
from storefront.store.kv_store import KVStore
from storefront.utils import utc_now_iso

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def user_email_key(email: str) -> str:
    return f"user_email:{email}"


class UserStore:
    def __init__(self, store: KVStore) -> None:
        self._store = store

    async def create_user(self, request: SignupRequest) -> User:
        """Register and auto-confirm a new account.

        Raises:
            ValidationError: If the email is already registered.
        """
        user_id = str(uuid.uuid4())
        # claim the email first so two concurrent signups cannot both succeed
        claimed = await self._store.compare_and_set(user_email_key(request.email), None, user_id)
        if not claimed:
            raise ValidationError("A user with this email address has already been registered")

        now = utc_now_iso()
        user = User(
            id=user_id,
            email=request.email,
            email_confirmed_at=now,
            user_metadata={"name": request.name},
            created_at=now,
        )
        try:
            record = {"user": user.to_wire(), "passwordHash": pwd_context.hash(request.password)}
            await self._store.set(user_key(user_id), json.dumps(record))
        except Exception:
            logger.exception("Signup for %s failed, releasing the email", user_id)
            await self._store.delete(user_email_key(request.email))
            raise
        logger.info("User registered: %s", user_id)
        return user

    async def _load_record(self, user_id: str) -> Optional[dict]:
        raw = await self._store.get(user_key(user_id))
        return json.loads(raw) if raw else None

    async def get_user(self, user_id: str) -> Optional[User]:
        record = await self._load_record(user_id)
        return User.model_validate(record["user"]) if record else None

    async def authenticate(self, request: SigninRequest) -> User:
        """Return the user for valid credentials.

        Raises:
            AuthenticationError: On unknown email or wrong password.
        """
        user_id = await self._store.get(user_email_key(request.email))
        record = await self._load_record(user_id) if user_id else None
        if not record or not pwd_context.verify(request.password, record["passwordHash"]):
            raise AuthenticationError("Invalid login credentials")
        return User.model_validate(record["user"])

    async def update_metadata(self, user_id: str, metadata: dict) -> User:
        """Merge profile fields (phone, address, ...) into ``user_metadata``."""
        record = await self._load_record(user_id)
        if not record:
            raise NotFoundError("User not found")
        user = User.model_validate(record["user"])
        user.user_metadata = {**user.user_metadata, **metadata}
        record["user"] = user.to_wire()
        await self._store.set(user_key(user_id), json.dumps(record))
        return user
