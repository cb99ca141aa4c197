"""TaskService -- 网关侧的用例组装

启动时显式构造一次（在 lifespan 中），不依赖容器注册：
Persistence Bridge -> 处理器 -> 监听器 -> 分发器。
TaskList 作为显式上下文由构造参数传入，每次用例调用都携带它。
"""

from taskrelay.core.events import (
    EventDispatcher,
    TaskExecutedListener,
    TaskStartedListener,
    translate_patch,
)
from taskrelay.core.models import Task, TaskList
from taskrelay.core.store import StoreGroup
from taskrelay.core.usecases import (
    AddTaskCommand,
    AddTaskHandler,
    AssignTaskCommand,
    AssignTaskHandler,
    ExecuteTaskHandler,
    StartTaskHandler,
    TaskEventPublisher,
    TransitionOutcome,
)


class TaskService:
    """任务业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        publisher: TaskEventPublisher,
        task_list: TaskList,
        public_base_url: str,
    ) -> None:
        repository = store_group.task_repository
        self._repository = repository
        self._task_list = task_list

        self._add_handler = AddTaskHandler(repository, publisher, public_base_url)
        self._assign_handler = AssignTaskHandler(repository)
        self._dispatcher = EventDispatcher(
            started_listener=TaskStartedListener(StartTaskHandler(repository)),
            executed_listener=TaskExecutedListener(ExecuteTaskHandler(repository)),
        )

    @property
    def task_list(self) -> TaskList:
        return self._task_list

    def location_for(self, task_id: str) -> str:
        return self._add_handler.location_for(task_id)

    async def add_task(self, task: Task) -> tuple[Task, bool]:
        """登记任务并通知执行池"""
        return await self._add_handler.handle(AddTaskCommand(task=task), self._task_list)

    async def assign_task(self, task_id: str) -> TransitionOutcome:
        """UNASSIGNED -> ASSIGNED"""
        return await self._assign_handler.handle(
            AssignTaskCommand(task_id=task_id), self._task_list
        )

    async def apply_patch(self, task_id: str, payload: bytes | str | list) -> TransitionOutcome:
        """翻译 PATCH 请求体并分发事件"""
        event = translate_patch(task_id, payload)
        return await self._dispatcher.dispatch(event, self._task_list)

    async def get_task(self, task_id: str) -> Task:
        """查询任务详情，不存在时抛出 TaskNotFoundError"""
        return await self._repository.load_task(task_id, self._task_list)

    async def list_tasks(self) -> list[Task]:
        """查询任务列表"""
        return await self._repository.list_tasks(self._task_list)
