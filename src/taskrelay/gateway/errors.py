"""异常 -> HTTP 响应映射

领域错误映射为 4xx，依赖错误映射为 5xx。
响应体统一为 {"error": {"code": ..., "message": ...}}。
"""

import structlog
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse
from taskrelay.core.exceptions import (
    ConflictError,
    DependencyTimeoutError,
    DependencyUnavailableError,
    InvalidTransitionError,
    MalformedPatchError,
    TaskNotFoundError,
    TaskRelayError,
    UnknownEventError,
)

log = structlog.get_logger()

# 按 MRO 查找，子类优先
STATUS_CODES: dict[type[TaskRelayError], int] = {
    MalformedPatchError: 400,
    TaskNotFoundError: 404,
    InvalidTransitionError: 409,
    ConflictError: 409,
    UnknownEventError: 422,
    DependencyUnavailableError: 503,
    DependencyTimeoutError: 504,
}


def status_code_for(error: TaskRelayError) -> int:
    """查找异常对应的 HTTP 状态码，未登记的类型视为 500"""
    for cls in type(error).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


async def taskrelay_error_handler(request: Request, exc: TaskRelayError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        await log.aerror(
            "request_failed",
            error_code=exc.code,
            error_type=type(exc).__name__,
            status_code=status_code,
        )
    else:
        await log.ainfo(
            "request_rejected",
            error_code=exc.code,
            status_code=status_code,
        )
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": exc.code,
                "message": str(exc),
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """注册异常处理器"""
    app.add_exception_handler(TaskRelayError, taskrelay_error_handler)
