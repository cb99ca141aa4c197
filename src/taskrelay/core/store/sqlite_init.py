"""SQLite 数据库初始化

PRAGMA 配置 + task_documents 表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# 文档表：正文为 JSON，分区键与版本号单独成列以便查询和条件更新
_TASK_DOCUMENTS_DDL = """
CREATE TABLE IF NOT EXISTS task_documents (
    _id             TEXT PRIMARY KEY,
    task_list_name  TEXT NOT NULL,
    version         INTEGER NOT NULL DEFAULT 1,
    body            TEXT NOT NULL DEFAULT '{}'
);
"""

_TASK_DOCUMENTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_task_documents_list ON task_documents(task_list_name);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    await conn.execute(_TASK_DOCUMENTS_DDL)
    for idx_sql in _TASK_DOCUMENTS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()
