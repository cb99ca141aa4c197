"""领域事件 -- 以 kind 为判别字段的封闭联合类型

事件是不可变的纯数据，不含 I/O。
TransitionEvent 是 PATCH 翻译器的输出，也是分发器的输入，两者共享同一组变体。
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .enums import EventKind


class DomainEvent(BaseModel):
    """领域事件基类"""

    model_config = ConfigDict(frozen=True)

    task_id: str = Field(description="关联的 Task ID")


class TaskStartedEvent(DomainEvent):
    """任务开始执行"""

    kind: Literal[EventKind.TASK_STARTED] = EventKind.TASK_STARTED


class TaskExecutedEvent(DomainEvent):
    """任务执行完成，允许没有输出"""

    kind: Literal[EventKind.TASK_EXECUTED] = EventKind.TASK_EXECUTED
    output_data: str | None = Field(default=None, description="执行输出")


class TaskAddedEvent(DomainEvent):
    """任务已登记 -- 仅用于对外通知"""

    kind: Literal[EventKind.TASK_ADDED] = EventKind.TASK_ADDED
    task_list_name: str = Field(description="所属任务列表")
    location: str = Field(description="可解引用的任务地址")


TransitionEvent = Annotated[
    TaskStartedEvent | TaskExecutedEvent,
    Field(discriminator="kind"),
]
