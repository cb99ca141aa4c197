"""FastAPI 应用主文件

app 创建 + lifespan 管理：文档存储初始化/关闭、通知端与用例的显式组装、路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from taskrelay.core.config import get_db_path, get_store_timeout_s, get_task_list_name
from taskrelay.core.models import TaskList
from taskrelay.core.store import create_store_group
from taskrelay.notifier import create_notifier, load_notifier_config

from .errors import register_exception_handlers
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, task_events, tasks
from .services.task_service import TaskService

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时组装服务，关闭时清理连接"""
    store_group = await create_store_group(get_db_path(), timeout_s=get_store_timeout_s())
    app.state.store_group = store_group

    notifier_config = load_notifier_config()
    app.state.notifier_config = notifier_config
    notifier = create_notifier(notifier_config)

    task_list = TaskList(name=get_task_list_name())
    app.state.task_service = TaskService(
        store_group=store_group,
        publisher=notifier,
        task_list=task_list,
        public_base_url=notifier_config.public_base_url,
    )
    log.info(
        "task_service_initialized",
        task_list=task_list.name,
        roster_enabled=notifier_config.enabled,
        roster_url=notifier_config.roster_base_url,
    )

    yield

    # 关闭：清理数据库连接
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.conn.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="TaskRelay",
        version="0.1.0",
        description="任务登记与生命周期状态机 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    register_exception_handlers(app)

    app.include_router(task_events.router, tags=["task-events"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
