"""TaskRelay Core Store -- SQLite 文档存储实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from .document_store import SqliteDocumentStore
from .mapping import document_to_task, task_to_document
from .sqlite_init import init_db
from .task_repository import DocumentTaskRepository


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection, timeout_s: float = 5.0) -> None:
        self.conn = conn
        self.document_store = SqliteDocumentStore(conn, timeout_s=timeout_s)
        self.task_repository = DocumentTaskRepository(self.document_store)


async def create_store_group(db_path: str, timeout_s: float = 5.0) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径
        timeout_s: 单次存储调用超时（秒）

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn, timeout_s=timeout_s)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteDocumentStore",
    "DocumentTaskRepository",
    "init_db",
    "task_to_document",
    "document_to_task",
]
