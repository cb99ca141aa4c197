"""任务路由

GET   /tasks                        任务列表（当前 TaskList）
GET   /tasks/{task_id}              任务详情
PATCH /tasks/{task_id}              JSON Patch 状态更新（STARTED / EXECUTED）
POST  /tasks/{task_id}/assignment   UNASSIGNED -> ASSIGNED
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from starlette.responses import JSONResponse, Response
from taskrelay.core.models import Task

from ..deps import get_task_service
from ..services.task_service import TaskService

router = APIRouter()


class TaskView(BaseModel):
    """任务详情（camelCase 输出）"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    task_id: str
    task_name: str
    task_type: str
    task_status: str
    input_data: str | None
    output_data: str | None
    version: int

    @classmethod
    def from_task(cls, task: Task) -> "TaskView":
        return cls(
            task_id=task.task_id,
            task_name=task.task_name,
            task_type=task.task_type,
            task_status=task.task_status.value,
            input_data=task.input_data,
            output_data=task.output_data,
            version=task.version,
        )


@router.get("/tasks")
async def list_tasks(service: TaskService = Depends(get_task_service)):
    """查询当前任务列表下的所有任务"""
    tasks = await service.list_tasks()
    return JSONResponse(
        content={
            "taskListName": service.task_list.name,
            "tasks": [TaskView.from_task(t).model_dump(by_alias=True) for t in tasks],
        }
    )


@router.get("/tasks/{task_id}")
async def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """查询任务详情，不存在返回 404"""
    task = await service.get_task(task_id)
    return JSONResponse(content=TaskView.from_task(task).model_dump(by_alias=True))


@router.patch("/tasks/{task_id}", status_code=204)
async def patch_task(
    task_id: str,
    request: Request,
    service: TaskService = Depends(get_task_service),
):
    """应用 JSON Patch 状态更新

    - 204: 流转成功
    - 400: 请求体不是合法的 JSON Patch
    - 404: 任务不存在
    - 409: 前置状态不满足，或并发修改冲突
    - 422: 无法识别的事件
    """
    body = await request.body()
    await service.apply_patch(task_id, body)
    return Response(status_code=204)


@router.post("/tasks/{task_id}/assignment", status_code=204)
async def assign_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """执行池领取任务：UNASSIGNED -> ASSIGNED"""
    await service.assign_task(task_id)
    return Response(status_code=204)
