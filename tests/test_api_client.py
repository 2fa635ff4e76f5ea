import httpx
import inject
import pytest

from src.kanban.client.api import ApiClient, ApiError
from src.kanban.client.auth import ClientAuth
from src.kanban.client.storage import LocalStorage
from src.kanban.domain.models import TaskStatus
from src.kanban.infrastructure.sql.orm import DatabaseOrm
from src.kanban.presentation.app import create_app
from tests.conftest import PASSWORD, USERNAME, FakeTaskServer


@pytest.mark.asyncio
async def test_login_stores_token(fake_server: FakeTaskServer, client_context) -> None:
    client_context.auth.logout()

    token = await client_context.api.login(USERNAME, PASSWORD)

    assert token.token == "fake-token"
    assert token.expires_in == "24h"
    assert client_context.auth.get_token() == "fake-token"
    assert client_context.auth.is_authenticated()


@pytest.mark.asyncio
async def test_failed_login_keeps_logged_out(client_context) -> None:
    client_context.auth.logout()
    client_context.api.set_unauthorized_handler(lambda: pytest.fail("not a session loss"))

    with pytest.raises(ApiError) as exc_info:
        await client_context.api.login(USERNAME, "wrong")

    assert exc_info.value.is_unauthorized
    assert exc_info.value.message == "Invalid username or password"
    assert not client_context.auth.is_authenticated()


@pytest.mark.asyncio
async def test_task_calls_decode_responses(fake_server: FakeTaskServer, client_context) -> None:
    created = await client_context.api.create_task("Write spec")
    moved = await client_context.api.update_task_status(created.id, TaskStatus.COMPLETED)
    edited = await client_context.api.update_task(created.id, "Ship it", "today")

    assert created.status is TaskStatus.PENDING
    assert created.description is None
    assert moved.status is TaskStatus.COMPLETED
    assert (edited.title, edited.description) == ("Ship it", "today")
    assert [t.id for t in await client_context.api.get_tasks()] == [created.id]


@pytest.mark.asyncio
async def test_error_envelope_becomes_api_error(client_context) -> None:
    with pytest.raises(ApiError) as exc_info:
        await client_context.api.update_task_status("missing", TaskStatus.COMPLETED)

    assert exc_info.value.status_code == 404
    assert exc_info.value.kind == "Not Found"
    assert exc_info.value.message == "Task with ID missing not found"


@pytest.mark.asyncio
async def test_rejected_token_logs_out(fake_server: FakeTaskServer, client_context) -> None:
    lost_sessions = []
    client_context.api.set_unauthorized_handler(lambda: lost_sessions.append(True))
    fake_server.reject_token = True

    with pytest.raises(ApiError) as exc_info:
        await client_context.api.get_tasks()

    assert exc_info.value.is_unauthorized
    assert not client_context.auth.is_authenticated()
    assert lost_sessions == [True]


@pytest.mark.asyncio
async def test_non_json_error_uses_status_line() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
    auth = ClientAuth(LocalStorage())
    api = ApiClient(httpx.AsyncClient(base_url="http://testserver", transport=transport), auth)

    with pytest.raises(ApiError) as exc_info:
        await api.get_tasks()
    await api.aclose()

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "HTTP 502: Bad Gateway"


@pytest.mark.asyncio
async def test_network_failure_becomes_api_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    auth = ClientAuth(LocalStorage())
    api = ApiClient(
        httpx.AsyncClient(base_url="http://testserver", transport=httpx.MockTransport(refuse)),
        auth,
    )

    with pytest.raises(ApiError) as exc_info:
        await api.get_tasks()
    await api.aclose()

    assert exc_info.value.status_code is None
    assert "connection refused" in exc_info.value.message


@pytest.mark.asyncio
async def test_client_round_trip_against_app(configured_di: None, api_settings) -> None:
    orm = inject.instance(DatabaseOrm)
    # ASGITransport does not run the lifespan hooks.
    await orm.create_schema()
    transport = httpx.ASGITransport(app=create_app(api_settings))
    auth = ClientAuth(LocalStorage())
    api = ApiClient(httpx.AsyncClient(base_url="http://testserver", transport=transport), auth)

    try:
        await api.login(USERNAME, PASSWORD)
        created = await api.create_task("  Write spec ")
        moved = await api.update_task_status(created.id, TaskStatus.IN_PROGRESS)
        tasks = await api.get_tasks()
    finally:
        await api.aclose()
        await orm.dispose()

    assert created.title == "Write spec"
    assert moved.updated_at > created.updated_at
    assert tasks == [moved]


@pytest.mark.asyncio
async def test_logout_drops_cached_tasks(fake_server: FakeTaskServer, client_context) -> None:
    fake_server.add("secret")
    client_context.cache.set(await client_context.api.get_tasks())

    client_context.logout()

    assert not client_context.auth.is_authenticated()
    assert client_context.cache.get() is None


@pytest.mark.asyncio
async def test_rejected_token_drops_cached_tasks(
    fake_server: FakeTaskServer, client_context
) -> None:
    fake_server.add("secret")
    client_context.cache.set(await client_context.api.get_tasks())
    fake_server.reject_token = True

    with pytest.raises(ApiError):
        await client_context.api.get_tasks()

    assert not client_context.auth.is_authenticated()
    assert client_context.cache.get() is None


def test_logout_without_cache_only_forgets_token() -> None:
    storage = LocalStorage()
    auth = ClientAuth(storage)
    auth.set_token("abc")
    storage.set_item("other", "kept")

    auth.logout()

    assert auth.get_token() is None
    assert storage.get_item("other") == "kept"
