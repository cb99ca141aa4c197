"""任务登记路由

POST /taskEvents: 接收扁平的任务对象，登记到当前 TaskList 并通知执行池。
- 201: 新登记
- 200: 任务已存在（重复登记不会产生重复文档）
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from starlette.responses import JSONResponse
from taskrelay.core.models import INITIAL_STATES, Task, TaskStatus
from ulid import ULID

from ..deps import get_task_service
from ..services.task_service import TaskService

router = APIRouter()


class TaskEventRequest(BaseModel):
    """任务登记请求体"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    task_id: str | None = Field(default=None, description="任务标识，缺省时生成 ULID")
    task_name: str = Field(default="", description="任务名称")
    task_type: str = Field(min_length=1, description="可执行类型")
    task_status: TaskStatus = Field(default=TaskStatus.UNASSIGNED, description="初始状态")
    input_data: str | None = Field(default=None, description="输入数据")
    output_data: str | None = Field(default=None, description="新任务必须为空")

    @model_validator(mode="after")
    def _check_new_task(self) -> "TaskEventRequest":
        if self.task_status not in INITIAL_STATES:
            raise ValueError(f"taskStatus must be one of {sorted(INITIAL_STATES)} for a new task")
        if self.output_data:
            raise ValueError("outputData must be empty for a new task")
        return self


class TaskEventResponse(BaseModel):
    """任务登记响应"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    task_id: str
    task_status: str
    location: str
    created: bool


@router.post("/taskEvents", response_model=TaskEventResponse)
async def add_task(
    body: TaskEventRequest,
    service: TaskService = Depends(get_task_service),
):
    """登记任务"""
    task = Task(
        task_id=body.task_id or str(ULID()),
        task_name=body.task_name,
        task_type=body.task_type,
        task_status=body.task_status,
        input_data=body.input_data,
    )

    stored, created = await service.add_task(task)
    location = service.location_for(stored.task_id)

    return JSONResponse(
        status_code=201 if created else 200,
        content=TaskEventResponse(
            task_id=stored.task_id,
            task_status=stored.task_status.value,
            location=location,
            created=created,
        ).model_dump(by_alias=True),
        headers={"Location": location} if created else None,
    )
