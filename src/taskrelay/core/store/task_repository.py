"""Persistence Bridge -- 基于 DocumentStore 的 TaskRepository 实现

文档存储只支持 insert 和条件 replace，add_task 在此之上模拟 upsert：
同一个未变化的 Task 重复登记不会产生重复文档；内容变化的 Task 只能替换
仍处于 UNASSIGNED 的文档，判断与替换基于同一次读取的版本号。
load_task 是只读投影，不修改存储状态。
"""

import structlog

from ..exceptions import ConflictError, InvalidTransitionError, TaskNotFoundError
from ..models.enums import TaskStatus
from ..models.task import Task, TaskList
from .mapping import document_to_task, task_to_document
from .protocols import DocumentStore

log = structlog.get_logger()


class DocumentTaskRepository:
    """TaskRepository 的文档存储实现"""

    _max_upsert_attempts = 2

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def add_task(self, task: Task, task_list: TaskList) -> tuple[Task, bool]:
        """登记任务（upsert）

        Returns:
            (已存储的 Task, created) -- created=True 表示新插入

        Raises:
            ConflictError: 同一 task_id 已被其他任务列表占用
            InvalidTransitionError: 已存储的任务已离开 UNASSIGNED 且内容不同
            VersionConflictError: 替换期间文档被并发修改
        """
        document = task_to_document(task, task_list)
        for attempt in range(1, self._max_upsert_attempts + 1):
            existing = await self._store.find_one(task.task_id, task_list.name)
            if existing is None:
                try:
                    stored = await self._store.insert(document)
                except ConflictError:
                    # 并发插入竞争：重新查询后走替换分支
                    if attempt < self._max_upsert_attempts:
                        log.warning(
                            "task_insert_conflict_retry",
                            task_id=task.task_id,
                            attempt=attempt,
                        )
                        continue
                    raise
                return document_to_task(stored), True

            if existing.model_dump(by_alias=True) == document.model_dump(by_alias=True):
                return document_to_task(existing), False

            if existing.task_status != TaskStatus.UNASSIGNED:
                raise InvalidTransitionError(
                    task.task_id, existing.task_status, task.task_status
                )

            stored = await self._store.replace(document, expected_version=existing.version)
            return document_to_task(stored), False

        raise RuntimeError("failed to add task after retries")

    async def load_task(self, task_id: str, task_list: TaskList) -> Task:
        """读取任务

        Raises:
            TaskNotFoundError: 任务列表中不存在该任务
        """
        document = await self._store.find_one(task_id, task_list.name)
        if document is None:
            raise TaskNotFoundError(task_id, task_list.name)
        return document_to_task(document)

    async def save_task(self, task: Task, task_list: TaskList) -> Task:
        """以 task.version 作为期望版本号保存任务

        Raises:
            VersionConflictError: 加载后文档已被其他请求修改
        """
        document = task_to_document(task, task_list)
        stored = await self._store.replace(document, expected_version=task.version)
        return document_to_task(stored)

    async def list_tasks(self, task_list: TaskList) -> list[Task]:
        """列出任务列表下的所有任务"""
        documents = await self._store.find_by_list(task_list.name)
        return [document_to_task(d) for d in documents]
