"""TaskRelay Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .document import TaskDocument
from .enums import (
    INITIAL_STATES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    EventKind,
    TaskStatus,
    validate_transition,
)
from .event import (
    DomainEvent,
    TaskAddedEvent,
    TaskExecutedEvent,
    TaskStartedEvent,
    TransitionEvent,
)
from .task import Task, TaskList

__all__ = [
    # 枚举
    "TaskStatus",
    "EventKind",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "INITIAL_STATES",
    "validate_transition",
    # Task
    "Task",
    "TaskList",
    "TaskDocument",
    # Event
    "DomainEvent",
    "TaskStartedEvent",
    "TaskExecutedEvent",
    "TaskAddedEvent",
    "TransitionEvent",
]
