"""枚举定义 -- Task 状态机与领域事件类型

包含 TaskStatus 状态机、EventKind 事件类型，
以及 VALID_TRANSITIONS 合法流转映射。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态机 -- 单调递增，不允许回退"""

    UNASSIGNED = "UNASSIGNED"
    ASSIGNED = "ASSIGNED"
    STARTED = "STARTED"
    EXECUTED = "EXECUTED"


# 合法状态流转：每次只能前进一步
VALID_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.UNASSIGNED: {TaskStatus.ASSIGNED},
    TaskStatus.ASSIGNED: {TaskStatus.STARTED},
    TaskStatus.STARTED: {TaskStatus.EXECUTED},
    # 终态不可再流转
    TaskStatus.EXECUTED: set(),
}

TERMINAL_STATES: set[TaskStatus] = {TaskStatus.EXECUTED}

# 新建任务允许的初始状态（执行池可直接登记已分配的任务）
INITIAL_STATES: set[TaskStatus] = {TaskStatus.UNASSIGNED, TaskStatus.ASSIGNED}


class EventKind(StrEnum):
    """领域事件类型"""

    TASK_ADDED = "TASK_ADDED"
    TASK_STARTED = "TASK_STARTED"
    TASK_EXECUTED = "TASK_EXECUTED"


def validate_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    """验证状态流转是否合法

    Args:
        from_status: 当前状态
        to_status: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_status, set())
    return to_status in allowed
