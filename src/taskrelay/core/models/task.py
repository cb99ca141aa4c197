"""Task / TaskList 领域模型

Task 由持有它的用例处理器独占；持久状态的唯一权威是 Persistence Bridge，
任何组件都不得跨请求缓存 Task。
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import TaskStatus


class TaskList(BaseModel):
    """任务列表上下文 -- 启动时创建一次，显式传入每个用例调用

    成员关系由存储中的 taskListName 决定，不在内存中维护。
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="任务列表名称（存储分区键）")


class Task(BaseModel):
    """Task 数据模型

    output_data 仅在 EXECUTED 状态下存在；空字符串视为缺省。
    """

    task_id: str = Field(min_length=1, description="任务标识，在所属 TaskList 内唯一")
    task_name: str = Field(default="", description="任务名称")
    task_type: str = Field(description="可执行类型")
    task_status: TaskStatus = Field(default=TaskStatus.UNASSIGNED, description="当前状态")
    input_data: str | None = Field(default=None, description="输入数据（创建时设置）")
    output_data: str | None = Field(default=None, description="输出数据（执行完成后设置）")
    version: int = Field(default=0, ge=0, description="乐观并发版本号，0 表示尚未存储")

    @field_validator("input_data", "output_data", mode="before")
    @classmethod
    def _empty_as_absent(cls, value: str | None) -> str | None:
        if value == "":
            return None
        return value

    @model_validator(mode="after")
    def _output_requires_executed(self) -> "Task":
        if self.output_data is not None and self.task_status != TaskStatus.EXECUTED:
            raise ValueError("output_data can only be set once the task is EXECUTED")
        return self
