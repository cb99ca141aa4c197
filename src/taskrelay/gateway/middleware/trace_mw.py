"""TraceMiddleware -- 为任务操作绑定 task_id

从 /tasks/{task_id} 及其子路由中提取 task_id，贯穿该请求的全部日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


def extract_task_id(path: str) -> str | None:
    """从请求路径中提取 task_id，没有则返回 None"""
    parts = [p for p in path.split("/") if p]
    if len(parts) >= 2 and parts[0] == "tasks":
        return parts[1]
    return None


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        task_id = extract_task_id(request.url.path)
        if task_id:
            structlog.contextvars.bind_contextvars(task_id=task_id)

        return await call_next(request)
