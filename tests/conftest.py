"""全局 pytest 配置 -- 临时 SQLite 数据库与 Store fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from taskrelay.core.models import Task, TaskList, TaskStatus
from taskrelay.core.store import StoreGroup, create_store_group


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from taskrelay.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "conn_test.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """提供 StoreGroup（文档存储 + Persistence Bridge）"""
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.conn.close()


@pytest.fixture
def task_list() -> TaskList:
    return TaskList(name="ops")


@pytest.fixture
def make_task():
    """构造 Task 的工厂"""

    def _make(
        task_id: str = "t1",
        task_status: TaskStatus = TaskStatus.UNASSIGNED,
        **kwargs,
    ) -> Task:
        kwargs.setdefault("task_name", "print greeting")
        kwargs.setdefault("task_type", "print")
        kwargs.setdefault("input_data", "hello")
        return Task(task_id=task_id, task_status=task_status, **kwargs)

    return _make
