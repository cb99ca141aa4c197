"""存储文档模型 -- Task 面向文档存储的投影

文档形状：{_id, taskName, taskType, taskStatus, inputData, outputData, taskListName}。
缺省的 inputData/outputData 以空字符串落盘。
version 由存储单独维护，不写入文档正文。
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import TaskStatus


class TaskDocument(BaseModel):
    """task_documents 表中的一条文档"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(alias="_id", description="任务标识，全局唯一")
    task_name: str = Field(default="")
    task_type: str
    task_status: TaskStatus
    input_data: str = Field(default="")
    output_data: str = Field(default="")
    task_list_name: str = Field(description="反规范化的分区键")
    version: int = Field(default=0, exclude=True, description="存储版本号")
