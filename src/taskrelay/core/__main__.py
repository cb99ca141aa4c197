"""CLI 入口模块 -- python -m taskrelay.core <command>

支持的命令：
  init-db                      初始化文档存储
  list-tasks [task_list_name]  列出任务列表下的任务
"""

import asyncio
import sys

from .config import get_db_path, get_store_timeout_s, get_task_list_name


def main(argv: list[str] | None = None) -> None:
    """CLI 主入口"""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("用法: python -m taskrelay.core <command>")
        print("命令:")
        print("  init-db                      初始化文档存储")
        print("  list-tasks [task_list_name]  列出任务列表下的任务")
        sys.exit(1)

    command = args[0]

    if command == "init-db":
        asyncio.run(init_db())
    elif command == "list-tasks":
        task_list_name = args[1] if len(args) > 1 else get_task_list_name()
        asyncio.run(list_tasks(task_list_name))
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db, list-tasks")
        sys.exit(1)


async def init_db() -> None:
    """创建数据库文件与表结构"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path, timeout_s=get_store_timeout_s())
    await store_group.conn.close()
    print("初始化完成")


async def list_tasks(task_list_name: str) -> None:
    """打印任务列表下的所有任务"""
    from .models import TaskList
    from .store import create_store_group

    store_group = await create_store_group(get_db_path(), timeout_s=get_store_timeout_s())
    try:
        tasks = await store_group.task_repository.list_tasks(TaskList(name=task_list_name))
    finally:
        await store_group.conn.close()

    print(f"任务列表 {task_list_name}: {len(tasks)} 个任务")
    for task in tasks:
        print(f"  {task.task_id}  {task.task_status.value:<10}  {task.task_type}  {task.task_name}")


if __name__ == "__main__":
    main()
