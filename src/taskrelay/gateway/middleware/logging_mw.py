"""LoggingMiddleware -- 请求级日志

request_id 优先沿用调用方传入的 X-Request-ID（执行池回调时携带），
否则生成 ULID；绑定到 structlog contextvars 并在响应头中返回。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"

# 调用方传入的 request_id 长度上限，超出则重新生成
_MAX_REQUEST_ID_LEN = 64


def resolve_request_id(incoming: str | None) -> str:
    """沿用合法的调用方 request_id，否则生成新的 ULID"""
    if incoming and len(incoming) <= _MAX_REQUEST_ID_LEN and incoming.isprintable():
        return incoming
    return str(ULID())


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        log = structlog.get_logger()
        await log.ainfo("request_started")
        start_time = time.monotonic()

        response = await call_next(request)

        duration_ms = int((time.monotonic() - start_time) * 1000)
        if response.status_code >= 500:
            await log.awarning(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
        else:
            await log.ainfo(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
