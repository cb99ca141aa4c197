"""gateway 测试配置 -- 手动组装 app.state（绕过 lifespan）+ 假执行池"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskrelay.core.models import TaskList
from taskrelay.core.store import create_store_group
from taskrelay.notifier import NotifierConfig, RosterNotifier

PUBLIC_BASE_URL = "http://registry.test"


@pytest_asyncio.fixture
async def roster_requests() -> list[httpx.Request]:
    """假执行池收到的请求"""
    return []


@pytest_asyncio.fixture
async def test_app(tmp_path: Path, roster_requests: list[httpx.Request]):
    os.environ["TASKRELAY_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["TASKRELAY_LOG_FORMAT"] = "json"

    from taskrelay.gateway.main import create_app
    from taskrelay.gateway.services.task_service import TaskService

    app = create_app()

    def roster(request: httpx.Request) -> httpx.Response:
        roster_requests.append(request)
        return httpx.Response(200)

    # 手动初始化（绕过 lifespan）
    store_group = await create_store_group(str(tmp_path / "test.db"))
    notifier_config = NotifierConfig(
        roster_base_url="http://roster.test",
        public_base_url=PUBLIC_BASE_URL,
    )
    app.state.store_group = store_group
    app.state.notifier_config = notifier_config
    app.state.task_service = TaskService(
        store_group=store_group,
        publisher=RosterNotifier(
            notifier_config.roster_base_url,
            transport=httpx.MockTransport(roster),
        ),
        task_list=TaskList(name="ops"),
        public_base_url=notifier_config.public_base_url,
    )

    yield app

    await store_group.conn.close()
    os.environ.pop("TASKRELAY_DB_PATH", None)
    os.environ.pop("TASKRELAY_LOG_FORMAT", None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
