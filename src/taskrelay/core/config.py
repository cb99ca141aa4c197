"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、任务列表名称、存储调用超时等可配置项。
"""

import os
from pathlib import Path

import structlog

log = structlog.get_logger()

DEFAULT_TASK_LIST_NAME = "default"
DEFAULT_STORE_TIMEOUT_S = 5.0


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKRELAY_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKRELAY_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskrelay.db"),
    )


def get_task_list_name() -> str:
    """获取本进程服务的任务列表名称"""
    return os.environ.get("TASKRELAY_TASK_LIST_NAME") or DEFAULT_TASK_LIST_NAME


def get_store_timeout_s() -> float:
    """获取单次文档存储调用的超时（秒）"""
    val = os.environ.get("TASKRELAY_STORE_TIMEOUT_S")
    if not val:
        return DEFAULT_STORE_TIMEOUT_S
    try:
        timeout_s = float(val)
    except ValueError:
        timeout_s = 0.0
    if timeout_s <= 0:
        log.warning(
            "invalid_timeout_config",
            env_var="TASKRELAY_STORE_TIMEOUT_S",
            value=val,
            fallback=DEFAULT_STORE_TIMEOUT_S,
        )
        return DEFAULT_STORE_TIMEOUT_S
    return timeout_s
