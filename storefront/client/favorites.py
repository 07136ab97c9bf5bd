"""Per-user favorite services, kept in client storage only."""

import json
import logging
from typing import Optional

from storefront.catalog.services import get_favorite_services
from storefront.client.notifier import Notifier
from storefront.client.session import AuthSession
from storefront.client.storage import LocalStorage
from storefront.schemas.catalog_schema import Service
from storefront.schemas.user_schema import User

logger = logging.getLogger(__name__)

SIGN_IN_TO_SAVE = "Please log in to save favorites"


def favorites_key(user_id: str) -> str:
    return f"favorites-{user_id}"


class FavoritesService:
    def __init__(self, storage: LocalStorage, session: AuthSession, notifier: Notifier) -> None:
        self._storage = storage
        self._session = session
        self._notifier = notifier
        self.favorites: list[str] = []
        session.subscribe(self._on_user_changed)

    async def _on_user_changed(self, user: Optional[User]) -> None:
        self.favorites = self._load(user.id) if user else []

    def _load(self, user_id: str) -> list[str]:
        raw = self._storage.get_item(favorites_key(user_id))
        if not raw:
            return []
        try:
            return [str(service_id) for service_id in json.loads(raw)]
        except (json.JSONDecodeError, TypeError):
            logger.warning("Discarding malformed favorites for %s", user_id)
            return []

    def _save(self, user_id: str) -> None:
        self._storage.set_item(favorites_key(user_id), json.dumps(self.favorites))

    def toggle_favorite(self, service_id: str) -> bool:
        """Add or remove ``service_id``. Returns whether it is now a favorite."""
        user = self._session.user
        if user is None:
            self._notifier.auth_required(SIGN_IN_TO_SAVE)
            return False

        if service_id in self.favorites:
            self.favorites = [sid for sid in self.favorites if sid != service_id]
            self._notifier.success("Removed from favorites")
            added = False
        else:
            self.favorites = self.favorites + [service_id]
            self._notifier.success("Added to favorites")
            added = True
        self._save(user.id)
        return added

    def is_favorite(self, service_id: str) -> bool:
        return service_id in self.favorites

    def favorite_services(self) -> list[Service]:
        return get_favorite_services(self.favorites)
