"""TaskRelay 异常体系

领域错误（请求方的问题）与依赖错误（存储/通知对端的问题）严格区分，
网关层按类型映射 HTTP 状态码。
"""


class TaskRelayError(Exception):
    """TaskRelay 基础异常"""

    code = "TASKRELAY_ERROR"

    def __init__(self, message: str, recoverable: bool = False) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方重试是否可能成功
        """
        super().__init__(message)
        self.recoverable = recoverable


class MalformedPatchError(TaskRelayError):
    """PATCH 请求体结构非法（不是 JSON Patch 操作列表，或状态操作互相冲突）"""

    code = "MALFORMED_PATCH"


class UnknownEventError(TaskRelayError):
    """PATCH 请求体语法合法，但不对应任何已知事件"""

    code = "UNKNOWN_EVENT"


class UnhandledEventError(TaskRelayError):
    """分发器没有为事件注册监听器 -- 内部不变量被破坏"""

    code = "UNHANDLED_EVENT"


class InvalidTransitionError(TaskRelayError):
    """状态前置条件不满足，不重试"""

    code = "INVALID_TRANSITION"

    def __init__(self, task_id: str, from_status: str, to_status: str) -> None:
        super().__init__(
            f"Task {task_id} cannot transition from {from_status} to {to_status}"
        )
        self.task_id = task_id
        self.from_status = from_status
        self.to_status = to_status


class TaskNotFoundError(TaskRelayError):
    """任务不存在"""

    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: str, task_list_name: str) -> None:
        super().__init__(
            f"Task with id {task_id} does not exist in task list {task_list_name}"
        )
        self.task_id = task_id
        self.task_list_name = task_list_name


class ConflictError(TaskRelayError):
    """写入与已存储文档冲突"""

    code = "TASK_CONFLICT"

    def __init__(self, message: str) -> None:
        super().__init__(message, recoverable=True)


class VersionConflictError(ConflictError):
    """乐观并发校验失败 -- 文档已被其他请求更新，由调用方重新加载后重试"""

    code = "VERSION_CONFLICT"

    def __init__(self, task_id: str, expected_version: int) -> None:
        super().__init__(
            f"Task {task_id} was modified concurrently (expected version {expected_version})"
        )
        self.task_id = task_id
        self.expected_version = expected_version


class DependencyError(TaskRelayError):
    """外部依赖（文档存储、执行池通知端点）失败"""

    code = "DEPENDENCY_ERROR"

    def __init__(self, dependency: str, original_error: BaseException | None = None) -> None:
        """
        Args:
            dependency: 依赖名称，如 "document_store" / "roster"
            original_error: 原始异常
        """
        detail = f" -- {original_error!r}" if original_error is not None else ""
        super().__init__(f"{dependency} failed{detail}", recoverable=True)
        self.dependency = dependency
        self.original_error = original_error


class DependencyTimeoutError(DependencyError):
    """外部依赖超时 -- 超时永远不视为成功"""

    code = "DEPENDENCY_TIMEOUT"


class DependencyUnavailableError(DependencyError):
    """外部依赖不可用（连接失败、返回错误）"""

    code = "DEPENDENCY_UNAVAILABLE"
