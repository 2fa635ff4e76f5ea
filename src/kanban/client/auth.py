from __future__ import annotations

from src.kanban.client.cache import TaskCache
from src.kanban.client.storage import LocalStorage

TOKEN_KEY = "jwt_token"


class ClientAuth:
    """
    Holds the bearer token in local storage. Logout is client-side only and
    also drops the cached task snapshot, so the next session never paints
    the previous account's tasks.
    """

    def __init__(self, storage: LocalStorage, cache: TaskCache | None = None) -> None:
        self._storage = storage
        self._cache = cache

    def get_token(self) -> str | None:
        return self._storage.get_item(TOKEN_KEY)

    def set_token(self, token: str) -> None:
        self._storage.set_item(TOKEN_KEY, token)

    def is_authenticated(self) -> bool:
        return self.get_token() is not None

    def logout(self) -> None:
        self._storage.remove_item(TOKEN_KEY)
        if self._cache is not None:
            self._cache.clear()
