"""Task <-> TaskDocument 映射

写入时缺省的 input_data/output_data 落盘为空字符串，
读取时空字符串还原为缺省（None），而不是字面量 ""。
"""

from ..models.document import TaskDocument
from ..models.task import Task, TaskList


def task_to_document(task: Task, task_list: TaskList) -> TaskDocument:
    """将 Task 转换为存储文档"""
    return TaskDocument(
        id=task.task_id,
        task_name=task.task_name,
        task_type=task.task_type,
        task_status=task.task_status,
        input_data=task.input_data or "",
        output_data=task.output_data or "",
        task_list_name=task_list.name,
        version=task.version,
    )


def document_to_task(document: TaskDocument) -> Task:
    """将存储文档转换为 Task"""
    return Task(
        task_id=document.id,
        task_name=document.task_name,
        task_type=document.task_type,
        task_status=document.task_status,
        input_data=document.input_data or None,
        output_data=document.output_data or None,
        version=document.version,
    )
