"""DocumentStore SQLite 实现测试

测试内容：
1. insert / find_one / find_by_list
2. _id 全局唯一
3. replace 的版本校验
4. 超时与驱动错误包装
"""

import asyncio

import aiosqlite
import pytest
from taskrelay.core.exceptions import (
    ConflictError,
    DependencyTimeoutError,
    DependencyUnavailableError,
    VersionConflictError,
)
from taskrelay.core.models import TaskDocument, TaskStatus
from taskrelay.core.store.document_store import SqliteDocumentStore


def _document(doc_id: str = "t1", task_list_name: str = "ops", **kwargs) -> TaskDocument:
    kwargs.setdefault("task_type", "print")
    kwargs.setdefault("task_status", TaskStatus.UNASSIGNED)
    return TaskDocument(id=doc_id, task_list_name=task_list_name, **kwargs)


class TestInsertAndFind:
    async def test_insert_then_find(self, db_conn):
        store = SqliteDocumentStore(db_conn)
        stored = await store.insert(_document(input_data="hello"))
        assert stored.version == 1

        found = await store.find_one("t1", "ops")
        assert found is not None
        assert found.input_data == "hello"
        assert found.version == 1

    async def test_find_requires_matching_task_list(self, db_conn):
        store = SqliteDocumentStore(db_conn)
        await store.insert(_document())
        assert await store.find_one("t1", "other") is None

    async def test_find_missing_returns_none(self, db_conn):
        store = SqliteDocumentStore(db_conn)
        assert await store.find_one("missing", "ops") is None

    async def test_duplicate_id_rejected(self, db_conn):
        """_id 全局唯一，即使属于不同任务列表"""
        store = SqliteDocumentStore(db_conn)
        await store.insert(_document())
        with pytest.raises(ConflictError):
            await store.insert(_document(task_list_name="other"))

    async def test_find_by_list(self, db_conn):
        store = SqliteDocumentStore(db_conn)
        await store.insert(_document("b"))
        await store.insert(_document("a"))
        await store.insert(_document("c", task_list_name="other"))

        documents = await store.find_by_list("ops")
        assert [d.id for d in documents] == ["a", "b"]


class TestReplace:
    async def test_replace_increments_version(self, db_conn):
        store = SqliteDocumentStore(db_conn)
        await store.insert(_document())

        updated = await store.replace(
            _document(task_status=TaskStatus.ASSIGNED), expected_version=1
        )
        assert updated.version == 2

        found = await store.find_one("t1", "ops")
        assert found.task_status == TaskStatus.ASSIGNED
        assert found.version == 2

    async def test_stale_version_rejected(self, db_conn):
        store = SqliteDocumentStore(db_conn)
        await store.insert(_document())
        await store.replace(_document(task_status=TaskStatus.ASSIGNED), expected_version=1)

        with pytest.raises(VersionConflictError) as exc_info:
            await store.replace(_document(task_status=TaskStatus.UNASSIGNED), expected_version=1)
        assert exc_info.value.expected_version == 1

        # 冲突的写入不生效
        found = await store.find_one("t1", "ops")
        assert found.task_status == TaskStatus.ASSIGNED

    async def test_replace_missing_document(self, db_conn):
        store = SqliteDocumentStore(db_conn)
        with pytest.raises(VersionConflictError):
            await store.replace(_document(), expected_version=1)


class _SlowCursor:
    async def fetchone(self):
        return None


class _SlowConnection:
    """每次 execute 都挂起的假连接"""

    async def execute(self, *args, **kwargs):
        await asyncio.sleep(1)
        return _SlowCursor()


class _BrokenConnection:
    async def execute(self, *args, **kwargs):
        raise aiosqlite.OperationalError("disk I/O error")


class TestDependencyErrors:
    async def test_timeout_raises_dependency_timeout(self):
        store = SqliteDocumentStore(_SlowConnection(), timeout_s=0.01)
        with pytest.raises(DependencyTimeoutError) as exc_info:
            await store.find_one("t1", "ops")
        assert exc_info.value.dependency == "document_store"

    async def test_driver_error_raises_dependency_unavailable(self):
        store = SqliteDocumentStore(_BrokenConnection())
        with pytest.raises(DependencyUnavailableError):
            await store.find_by_list("ops")

    async def test_ping(self, db_conn):
        store = SqliteDocumentStore(db_conn)
        await store.ping()


class TestWriteTimeouts:
    """超时报告与落盘状态必须一致"""

    async def test_timed_out_replace_is_rolled_back(self, db_conn, monkeypatch):
        store = SqliteDocumentStore(db_conn, timeout_s=0.2)
        await store.insert(_document())

        execute = db_conn.execute

        async def execute_then_hang(sql, *args, **kwargs):
            cursor = await execute(sql, *args, **kwargs)
            if sql.lstrip().startswith("UPDATE"):
                await asyncio.sleep(1)
            return cursor

        monkeypatch.setattr(db_conn, "execute", execute_then_hang)
        with pytest.raises(DependencyTimeoutError):
            await store.replace(_document(task_status=TaskStatus.ASSIGNED), expected_version=1)
        monkeypatch.undo()

        # 下一次写事务的 commit 不得带上超时的 UPDATE
        await store.insert(_document("t2"))

        found = await store.find_one("t1", "ops")
        assert found.task_status == TaskStatus.UNASSIGNED
        assert found.version == 1

    async def test_timed_out_insert_is_rolled_back(self, db_conn, monkeypatch):
        store = SqliteDocumentStore(db_conn, timeout_s=0.2)
        execute = db_conn.execute

        async def execute_then_hang(sql, *args, **kwargs):
            cursor = await execute(sql, *args, **kwargs)
            if sql.lstrip().startswith("INSERT"):
                await asyncio.sleep(1)
            return cursor

        monkeypatch.setattr(db_conn, "execute", execute_then_hang)
        with pytest.raises(DependencyTimeoutError):
            await store.insert(_document())
        monkeypatch.undo()

        await store.insert(_document("t2"))
        assert await store.find_one("t1", "ops") is None

    async def test_slow_commit_reports_real_outcome(self, db_conn, monkeypatch):
        """commit 发出后不再受超时约束，返回值与落盘状态一致"""
        store = SqliteDocumentStore(db_conn, timeout_s=0.2)
        await store.insert(_document())

        commit = db_conn.commit

        async def slow_commit():
            await asyncio.sleep(0.5)
            await commit()

        monkeypatch.setattr(db_conn, "commit", slow_commit)
        updated = await store.replace(
            _document(task_status=TaskStatus.ASSIGNED), expected_version=1
        )
        monkeypatch.undo()

        found = await store.find_one("t1", "ops")
        assert updated.version == found.version == 2
        assert found.task_status == TaskStatus.ASSIGNED

    async def test_write_lock_released_after_timeout(self, db_conn, monkeypatch):
        store = SqliteDocumentStore(db_conn, timeout_s=0.2)
        execute = db_conn.execute

        async def hang(sql, *args, **kwargs):
            await asyncio.sleep(1)
            return await execute(sql, *args, **kwargs)

        monkeypatch.setattr(db_conn, "execute", hang)
        with pytest.raises(DependencyTimeoutError):
            await store.insert(_document())
        monkeypatch.undo()

        stored = await store.insert(_document())
        assert stored.version == 1
