"""用例处理器 -- 任务登记与状态流转

流转处理器的流程：
1. 通过 Persistence Bridge 加载 Task
2. 按 VALID_TRANSITIONS 校验前置状态
3. 以加载时的版本号保存（乐观并发）

登记处理器在写入成功后向执行池发送通知；通知失败只记录日志，
已提交的写入不会回滚（通知通道为至少一次、最终一致）。
"""

import asyncio
from typing import Protocol
from urllib.parse import quote

import structlog
from pydantic import BaseModel, Field

from .exceptions import DependencyError, InvalidTransitionError
from .models import (
    INITIAL_STATES,
    Task,
    TaskAddedEvent,
    TaskList,
    TaskStatus,
    validate_transition,
)
from .store.protocols import TaskRepository

log = structlog.get_logger()


class AddTaskCommand(BaseModel):
    """登记任务命令"""

    task: Task


class AssignTaskCommand(BaseModel):
    """分配任务命令"""

    task_id: str


class StartTaskCommand(BaseModel):
    """开始任务命令"""

    task_id: str


class ExecuteTaskCommand(BaseModel):
    """完成任务命令，允许没有输出"""

    task_id: str
    output_data: str | None = None


class TransitionOutcome(BaseModel):
    """一次成功流转的结果"""

    task_id: str
    from_status: TaskStatus
    to_status: TaskStatus
    version: int = Field(description="保存后的文档版本号")


class TaskEventPublisher(Protocol):
    """任务事件的对外发布端"""

    async def publish(self, event: TaskAddedEvent) -> None:
        ...


class _TransitionHandler:
    """状态流转处理器基类，子类只声明目标状态"""

    target_status: TaskStatus

    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    async def _apply(
        self,
        task_id: str,
        task_list: TaskList,
        output_data: str | None = None,
    ) -> TransitionOutcome:
        task = await self._repository.load_task(task_id, task_list)

        if not validate_transition(task.task_status, self.target_status):
            raise InvalidTransitionError(task_id, task.task_status, self.target_status)

        update: dict = {"task_status": self.target_status}
        if output_data is not None:
            update["output_data"] = output_data
        updated = task.model_copy(update=update)

        # 写入一旦发出就不受请求取消影响
        saved = await asyncio.shield(self._repository.save_task(updated, task_list))

        log.info(
            "task_status_changed",
            task_id=task_id,
            task_list=task_list.name,
            from_status=task.task_status.value,
            to_status=saved.task_status.value,
            version=saved.version,
        )
        return TransitionOutcome(
            task_id=task_id,
            from_status=task.task_status,
            to_status=saved.task_status,
            version=saved.version,
        )


class AssignTaskHandler(_TransitionHandler):
    """UNASSIGNED -> ASSIGNED"""

    target_status = TaskStatus.ASSIGNED

    async def handle(self, command: AssignTaskCommand, task_list: TaskList) -> TransitionOutcome:
        return await self._apply(command.task_id, task_list)


class StartTaskHandler(_TransitionHandler):
    """ASSIGNED -> STARTED"""

    target_status = TaskStatus.STARTED

    async def handle(self, command: StartTaskCommand, task_list: TaskList) -> TransitionOutcome:
        return await self._apply(command.task_id, task_list)


class ExecuteTaskHandler(_TransitionHandler):
    """STARTED -> EXECUTED，有输出时一并写入"""

    target_status = TaskStatus.EXECUTED

    async def handle(self, command: ExecuteTaskCommand, task_list: TaskList) -> TransitionOutcome:
        return await self._apply(command.task_id, task_list, output_data=command.output_data)


class AddTaskHandler:
    """任务登记 + 执行池通知"""

    def __init__(
        self,
        repository: TaskRepository,
        publisher: TaskEventPublisher,
        location_base: str,
    ) -> None:
        """
        Args:
            repository: Persistence Bridge
            publisher: 通知发布端
            location_base: 对外可访问的本服务基础 URL，用于拼接任务地址
        """
        self._repository = repository
        self._publisher = publisher
        self._location_base = location_base.rstrip("/")

    def location_for(self, task_id: str) -> str:
        """任务的可解引用地址，task_id 按路径段转义"""
        return f"{self._location_base}/tasks/{quote(task_id, safe='')}"

    async def handle(self, command: AddTaskCommand, task_list: TaskList) -> tuple[Task, bool]:
        """登记任务

        Returns:
            (已存储的 Task, created)

        Raises:
            InvalidTransitionError: 初始状态非法，或已存在的任务已离开 UNASSIGNED 且内容不同
            VersionConflictError: 登记期间任务被并发流转
        """
        task = command.task
        if task.task_status not in INITIAL_STATES:
            raise InvalidTransitionError(task.task_id, "NEW", task.task_status)

        stored, created = await self._repository.add_task(task, task_list)
        log.info(
            "task_added" if created else "task_already_registered",
            task_id=stored.task_id,
            task_list=task_list.name,
            task_status=stored.task_status.value,
        )

        await self._announce(stored, task_list)
        return stored, created

    async def _announce(self, task: Task, task_list: TaskList) -> None:
        """通知执行池；失败只记录日志"""
        event = TaskAddedEvent(
            task_id=task.task_id,
            task_list_name=task_list.name,
            location=self.location_for(task.task_id),
        )
        try:
            await self._publisher.publish(event)
        except DependencyError as e:
            log.warning(
                "task_added_notification_failed",
                task_id=task.task_id,
                dependency=e.dependency,
                error_type=type(e).__name__,
            )
