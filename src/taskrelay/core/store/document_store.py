"""DocumentStore SQLite 实现

task_documents 表存放 JSON 文档正文，_id 唯一。
锁等待、语句执行与查询受 timeout_s 约束，超时抛出 DependencyTimeoutError；
驱动层错误统一包装为 DependencyUnavailableError，不在此处重试。

写事务的生效点是 commit：commit 之前的任何退出（包括超时取消）都会回滚，
commit 一旦发出就等待其真实结果，报告的结果与落盘状态一致。
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

import aiosqlite
import structlog

from ..exceptions import (
    ConflictError,
    DependencyTimeoutError,
    DependencyUnavailableError,
    VersionConflictError,
)
from ..models.document import TaskDocument

log = structlog.get_logger()

T = TypeVar("T")

_DEPENDENCY = "document_store"


class SqliteDocumentStore:
    """DocumentStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection, timeout_s: float = 5.0) -> None:
        self._conn = conn
        self._timeout_s = timeout_s
        # 同一连接上的写事务必须串行，否则一方的 rollback 会撤销另一方未提交的写入
        self._write_lock = asyncio.Lock()

    async def insert(self, document: TaskDocument) -> TaskDocument:
        """插入新文档（version=1）

        Raises:
            ConflictError: _id 已存在（可能属于其他任务列表）
        """
        try:
            await self._write(
                "insert",
                """
                INSERT INTO task_documents (_id, task_list_name, version, body)
                VALUES (?, ?, 1, ?)
                """,
                (
                    document.id,
                    document.task_list_name,
                    document.model_dump_json(by_alias=True),
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise ConflictError(f"Document {document.id} already exists") from e
        return document.model_copy(update={"version": 1})

    async def replace(self, document: TaskDocument, expected_version: int) -> TaskDocument:
        """按版本号条件替换文档，成功后版本号 +1

        Raises:
            VersionConflictError: 文档不存在于该任务列表，或版本号已变化
        """
        rowcount = await self._write(
            "replace",
            """
            UPDATE task_documents
            SET body = ?, version = version + 1
            WHERE _id = ? AND task_list_name = ? AND version = ?
            """,
            (
                document.model_dump_json(by_alias=True),
                document.id,
                document.task_list_name,
                expected_version,
            ),
        )
        if rowcount == 0:
            raise VersionConflictError(document.id, expected_version)
        return document.model_copy(update={"version": expected_version + 1})

    async def find_one(self, doc_id: str, task_list_name: str) -> TaskDocument | None:
        """按 (_id, taskListName) 查询单个文档"""

        async def _find() -> TaskDocument | None:
            cursor = await self._conn.execute(
                "SELECT version, body FROM task_documents WHERE _id = ? AND task_list_name = ?",
                (doc_id, task_list_name),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_document(row)

        return await self._run("find_one", _find)

    async def find_by_list(self, task_list_name: str) -> list[TaskDocument]:
        """列出任务列表下的所有文档，按 _id 排序"""

        async def _find_all() -> list[TaskDocument]:
            cursor = await self._conn.execute(
                "SELECT version, body FROM task_documents WHERE task_list_name = ? ORDER BY _id",
                (task_list_name,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_document(row) for row in rows]

        return await self._run("find_by_list", _find_all)

    async def ping(self) -> None:
        """存储连通性检查（就绪探针使用）"""

        async def _ping() -> None:
            cursor = await self._conn.execute("SELECT 1")
            await cursor.fetchone()

        await self._run("ping", _ping)

    async def _write(self, operation: str, sql: str, params: tuple) -> int:
        """在写锁内执行单条写语句并提交，返回受影响行数（0 行时不提交）"""
        locked = False
        committed = False
        try:
            async with self._guard(operation, self._timeout_s):
                await self._write_lock.acquire()
                locked = True
                cursor = await self._conn.execute(sql, params)
            if cursor.rowcount == 0:
                return 0
            async with self._guard(operation, None):
                await asyncio.shield(self._conn.commit())
            committed = True
            return cursor.rowcount
        finally:
            if locked:
                if not committed:
                    await asyncio.shield(self._conn.rollback())
                self._write_lock.release()

    async def _run(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """在超时约束下执行一次只读存储调用"""
        async with self._guard(operation, self._timeout_s):
            return await call()

    @asynccontextmanager
    async def _guard(self, operation: str, timeout_s: float | None) -> AsyncIterator[None]:
        """超时与驱动层异常包装；IntegrityError 原样抛出，由调用方解释"""
        try:
            async with asyncio.timeout(timeout_s):
                yield
        except TimeoutError as e:
            log.error(
                "document_store_timeout",
                operation=operation,
                timeout_s=timeout_s,
            )
            raise DependencyTimeoutError(_DEPENDENCY, e) from e
        except aiosqlite.IntegrityError:
            raise
        except aiosqlite.Error as e:
            log.error(
                "document_store_failed",
                operation=operation,
                error_type=type(e).__name__,
            )
            raise DependencyUnavailableError(_DEPENDENCY, e) from e

    @staticmethod
    def _row_to_document(row: aiosqlite.Row) -> TaskDocument:
        """将数据库行转换为 TaskDocument"""
        document = TaskDocument.model_validate_json(row[1])
        return document.model_copy(update={"version": row[0]})
