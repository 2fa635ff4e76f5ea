from __future__ import annotations

from dataclasses import dataclass

import httpx

from src.kanban.client.api import ApiClient
from src.kanban.client.auth import ClientAuth
from src.kanban.client.cache import TaskCache
from src.kanban.client.dragdrop import DragDropService
from src.kanban.client.notifications import NotificationCenter, Notifier
from src.kanban.client.storage import LocalStorage
from src.setup.client_config import ClientSettings, get_client_settings


@dataclass
class ClientContext:
    """Services shared by every board component. Built once, passed by reference."""

    storage: LocalStorage
    auth: ClientAuth
    api: ApiClient
    cache: TaskCache
    notifier: Notifier
    drag_drop: DragDropService
    reload_delay: float = 1.0

    def logout(self) -> None:
        """End the session: forget the token and the cached task list."""
        self.auth.logout()

    async def aclose(self) -> None:
        await self.api.aclose()


def build_client_context(
    settings: ClientSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    notifier: Notifier | None = None,
) -> ClientContext:
    if settings is None:
        settings = get_client_settings()

    storage = LocalStorage(settings.CACHE_PATH)
    cache = TaskCache(storage, ttl_seconds=settings.CACHE_TTL_SECONDS)
    auth = ClientAuth(storage, cache)
    http = httpx.AsyncClient(
        base_url=settings.API_BASE_URL,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        transport=transport,
    )
    return ClientContext(
        storage=storage,
        auth=auth,
        api=ApiClient(http, auth),
        cache=cache,
        notifier=notifier or NotificationCenter(),
        drag_drop=DragDropService(),
        reload_delay=settings.RELOAD_DELAY_SECONDS,
    )
