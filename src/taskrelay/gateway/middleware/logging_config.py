"""structlog 配置模块

TASKRELAY_LOG_FORMAT=json 输出单行 JSON（异常展开为结构化 traceback），
其余取值使用 dev 控制台渲染。TASKRELAY_LOG_LEVEL 控制根 logger 级别。

请求日志由 LoggingMiddleware 输出，uvicorn.access 与 httpx 的逐请求日志被压低到 WARNING。
"""

import logging
import os

import structlog

# 与 LoggingMiddleware / roster_notified 重复的逐请求日志
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _processors(log_format: str) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
    else:
        processors.append(structlog.processors.StackInfoRenderer())
    return processors


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog + 标准库 logging

    Args:
        log_format: "json" 或 "dev"，缺省读取 TASKRELAY_LOG_FORMAT
        log_level: 日志级别名称，缺省读取 TASKRELAY_LOG_LEVEL（默认 INFO）
    """
    log_format = log_format or os.environ.get("TASKRELAY_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("TASKRELAY_LOG_LEVEL", "INFO")
    shared_processors = _processors(log_format)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
