"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含文档存储连通性与通知配置。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. document_store: 文档存储连通性
    2. roster: 通知是否启用（不做网络探测）
    """
    checks = {}
    all_ok = True

    try:
        store_group = request.app.state.store_group
        await store_group.document_store.ping()
        checks["document_store"] = "ok"
    except Exception as e:
        # 连接关闭后 aiosqlite 抛出 ValueError 而非 aiosqlite.Error
        log.warning("readiness_store_check_failed", error_type=type(e).__name__)
        checks["document_store"] = f"error: {getattr(e, 'code', type(e).__name__)}"
        all_ok = False

    notifier_config = getattr(request.app.state, "notifier_config", None)
    if notifier_config is not None and notifier_config.enabled:
        checks["roster"] = "enabled"
    else:
        checks["roster"] = "disabled"

    status_code = 200 if all_ok else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if all_ok else "not_ready",
            "task_list": request.app.state.task_service.task_list.name,
            "checks": checks,
        },
    )
