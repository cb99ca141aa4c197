"""事件分发器 -- 按事件变体调用唯一的监听器

分发器无状态。翻译器与分发器共享 TransitionEvent 这一组变体；
出现未匹配的变体说明两者已失去同步，属于内部错误。
"""

import structlog

from ..exceptions import UnhandledEventError
from ..models import TaskExecutedEvent, TaskList, TaskStartedEvent, TransitionEvent
from ..usecases import TransitionOutcome
from .listeners import TaskExecutedListener, TaskStartedListener

log = structlog.get_logger()


class EventDispatcher:
    """TransitionEvent -> 监听器"""

    def __init__(
        self,
        started_listener: TaskStartedListener,
        executed_listener: TaskExecutedListener,
    ) -> None:
        self._started_listener = started_listener
        self._executed_listener = executed_listener

    async def dispatch(self, event: TransitionEvent, task_list: TaskList) -> TransitionOutcome:
        """分发事件并返回流转结果

        Raises:
            UnhandledEventError: 事件变体没有对应的监听器
            TaskNotFoundError / InvalidTransitionError / VersionConflictError / DependencyError:
                由处理器抛出，原样向上传播
        """
        log.debug("event_dispatched", event_kind=str(event.kind), task_id=event.task_id)
        match event:
            case TaskStartedEvent():
                return await self._started_listener.on_event(event, task_list)
            case TaskExecutedEvent():
                return await self._executed_listener.on_event(event, task_list)
            case _:
                raise UnhandledEventError(
                    f"No listener registered for {type(event).__name__}"
                )
