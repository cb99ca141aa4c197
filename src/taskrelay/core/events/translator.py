"""PATCH 请求翻译器 -- JSON Patch 操作列表 -> 领域事件

每个请求恰好产生一个事件：
- /taskStatus = STARTED                       -> TaskStartedEvent
- /taskStatus = EXECUTED (+ 可选 /outputData) -> TaskExecutedEvent
结构非法抛出 MalformedPatchError，无法识别抛出 UnknownEventError。
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..exceptions import MalformedPatchError, UnknownEventError
from ..models import TaskExecutedEvent, TaskStartedEvent, TaskStatus, TransitionEvent

STATUS_PATH = "/taskStatus"
OUTPUT_DATA_PATH = "/outputData"

# 可以设置字段值的操作
_SETTING_OPS = {"add", "replace"}


class PatchOperation(BaseModel):
    """单个 JSON Patch 操作"""

    model_config = ConfigDict(populate_by_name=True)

    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: str = Field(pattern=r"^/")
    value: Any = None
    from_: str | None = Field(default=None, alias="from")


_operations_adapter = TypeAdapter(list[PatchOperation])


def parse_patch(payload: bytes | str | list) -> list[PatchOperation]:
    """将原始请求体解析为操作列表

    Raises:
        MalformedPatchError: 不是合法的 JSON Patch 操作列表
    """
    if isinstance(payload, (bytes, str)):
        try:
            payload = json.loads(payload)
        except (ValueError, UnicodeDecodeError) as e:
            raise MalformedPatchError(f"Patch body is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise MalformedPatchError("Patch body must be a list of operations")
    if not payload:
        raise MalformedPatchError("Patch body contains no operations")

    try:
        return _operations_adapter.validate_python(payload)
    except ValidationError as e:
        raise MalformedPatchError(
            f"Patch body contains invalid operations: {e.error_count()} error(s)"
        ) from e


def translate_patch(task_id: str, payload: bytes | str | list) -> TransitionEvent:
    """将 PATCH 请求体翻译为领域事件

    Args:
        task_id: 被修改的任务 ID
        payload: 原始请求体或已解码的操作列表

    Raises:
        MalformedPatchError: 结构非法，或同一路径出现多个操作
        UnknownEventError: 不对应任何已知事件
    """
    operations = parse_patch(payload)

    status_ops = [o for o in operations if o.path == STATUS_PATH]
    output_ops = [o for o in operations if o.path == OUTPUT_DATA_PATH]
    if len(status_ops) > 1:
        raise MalformedPatchError("Patch contains more than one taskStatus operation")
    if len(output_ops) > 1:
        raise MalformedPatchError("Patch contains more than one outputData operation")

    if not status_ops:
        paths = sorted({o.path for o in operations})
        raise UnknownEventError(f"No event matches patch paths {paths}")

    status_op = status_ops[0]
    if status_op.op not in _SETTING_OPS:
        raise UnknownEventError(f"Unsupported operation {status_op.op!r} on {STATUS_PATH}")

    others = [o for o in operations if o.path not in (STATUS_PATH, OUTPUT_DATA_PATH)]
    if others:
        raise UnknownEventError(f"No event matches patch path {others[0].path}")

    if status_op.value == TaskStatus.STARTED:
        if output_ops:
            raise UnknownEventError("A started event cannot carry outputData")
        return TaskStartedEvent(task_id=task_id)

    if status_op.value == TaskStatus.EXECUTED:
        return TaskExecutedEvent(task_id=task_id, output_data=_output_value(output_ops))

    raise UnknownEventError(f"No event matches taskStatus value {status_op.value!r}")


def _output_value(output_ops: list[PatchOperation]) -> str | None:
    if not output_ops:
        return None
    output_op = output_ops[0]
    if output_op.op not in _SETTING_OPS:
        raise UnknownEventError(f"Unsupported operation {output_op.op!r} on {OUTPUT_DATA_PATH}")
    if output_op.value is not None and not isinstance(output_op.value, str):
        raise UnknownEventError("outputData must be a string")
    return output_op.value or None
