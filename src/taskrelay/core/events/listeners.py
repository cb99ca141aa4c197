"""事件监听器 -- 事件 -> 用例命令 -> 处理器

监听器分别记录 task_not_found 与 invalid_transition，随后原样抛出类型化异常，
调用方无需从日志反推失败原因。
"""

from typing import Protocol

import structlog

from ..exceptions import InvalidTransitionError, TaskNotFoundError
from ..models import TaskExecutedEvent, TaskList, TaskStartedEvent
from ..usecases import (
    ExecuteTaskCommand,
    ExecuteTaskHandler,
    StartTaskCommand,
    StartTaskHandler,
    TransitionOutcome,
)

log = structlog.get_logger()


class EventListener(Protocol):
    """监听器接口"""

    async def on_event(self, event, task_list: TaskList) -> TransitionOutcome:
        ...


async def _invoke(event_name: str, task_id: str, call) -> TransitionOutcome:
    try:
        return await call
    except TaskNotFoundError as e:
        log.info("task_not_found", event_kind=event_name, task_id=task_id, task_list=e.task_list_name)
        raise
    except InvalidTransitionError as e:
        log.info(
            "invalid_transition",
            event_kind=event_name,
            task_id=task_id,
            from_status=str(e.from_status),
            to_status=str(e.to_status),
        )
        raise


class TaskStartedListener:
    """TaskStartedEvent -> StartTaskCommand"""

    def __init__(self, handler: StartTaskHandler) -> None:
        self._handler = handler

    async def on_event(self, event: TaskStartedEvent, task_list: TaskList) -> TransitionOutcome:
        command = StartTaskCommand(task_id=event.task_id)
        return await _invoke(
            event.kind.value,
            event.task_id,
            self._handler.handle(command, task_list),
        )


class TaskExecutedListener:
    """TaskExecutedEvent -> ExecuteTaskCommand"""

    def __init__(self, handler: ExecuteTaskHandler) -> None:
        self._handler = handler

    async def on_event(self, event: TaskExecutedEvent, task_list: TaskList) -> TransitionOutcome:
        command = ExecuteTaskCommand(task_id=event.task_id, output_data=event.output_data)
        return await _invoke(
            event.kind.value,
            event.task_id,
            self._handler.handle(command, task_list),
        )
