"""Store Protocol 接口定义

定义 DocumentStore 与 TaskRepository 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Protocol

from ..models.document import TaskDocument
from ..models.task import Task, TaskList


class DocumentStore(Protocol):
    """以任务标识为键的文档存储

    只提供 insert 和带版本校验的 replace，upsert 由上层模拟。
    """

    async def insert(self, document: TaskDocument) -> TaskDocument:
        """插入新文档，_id 已存在时抛出 ConflictError"""
        ...

    async def replace(self, document: TaskDocument, expected_version: int) -> TaskDocument:
        """按版本号条件替换文档，版本不匹配时抛出 VersionConflictError"""
        ...

    async def find_one(self, doc_id: str, task_list_name: str) -> TaskDocument | None:
        """按 (_id, taskListName) 查询单个文档"""
        ...

    async def find_by_list(self, task_list_name: str) -> list[TaskDocument]:
        """列出任务列表下的所有文档"""
        ...


class TaskRepository(Protocol):
    """Persistence Bridge -- Task 与存储文档之间的唯一通道"""

    async def add_task(self, task: Task, task_list: TaskList) -> tuple[Task, bool]:
        """登记任务（upsert），返回 (已存储的 Task, 是否新建)

        内容变化时只替换仍处于 UNASSIGNED 的文档，否则抛出 InvalidTransitionError。
        """
        ...

    async def load_task(self, task_id: str, task_list: TaskList) -> Task:
        """读取任务，不存在时抛出 TaskNotFoundError"""
        ...

    async def save_task(self, task: Task, task_list: TaskList) -> Task:
        """保存已加载并修改过的任务，返回带新版本号的 Task"""
        ...

    async def list_tasks(self, task_list: TaskList) -> list[Task]:
        """列出任务列表下的所有任务"""
        ...
