"""NotifierConfig -- 执行池通知配置加载

从环境变量加载配置；未配置 roster 地址时通知被禁用。
"""

import os

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

_DEFAULT_TIMEOUT_S = 5.0


class NotifierConfig(BaseModel):
    """通知配置 -- 从环境变量加载

    环境变量:
        TASKRELAY_ROSTER_URL: 执行池基础 URL（为空则禁用通知）
        TASKRELAY_NOTIFY_TIMEOUT_S: 通知调用超时（秒，默认 5）
        TASKRELAY_PUBLIC_BASE_URL: 本服务对外基础 URL，用于拼接任务地址
    """

    roster_base_url: str = Field(
        default="",
        description="执行池基础 URL，空字符串表示禁用",
    )
    timeout_s: float = Field(
        default=_DEFAULT_TIMEOUT_S,
        gt=0,
        description="通知调用超时（秒）",
    )
    public_base_url: str = Field(
        default="http://localhost:8000",
        description="本服务对外基础 URL",
    )

    @property
    def enabled(self) -> bool:
        return bool(self.roster_base_url)


def load_notifier_config() -> NotifierConfig:
    """从环境变量加载通知配置

    Returns:
        NotifierConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKRELAY_ROSTER_URL"):
        kwargs["roster_base_url"] = val

    if val := os.environ.get("TASKRELAY_PUBLIC_BASE_URL"):
        kwargs["public_base_url"] = val

    if val := os.environ.get("TASKRELAY_NOTIFY_TIMEOUT_S"):
        try:
            timeout_s = float(val)
            if timeout_s <= 0:
                raise ValueError(val)
            kwargs["timeout_s"] = timeout_s
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="TASKRELAY_NOTIFY_TIMEOUT_S",
                value=val,
                fallback=_DEFAULT_TIMEOUT_S,
            )
            # 使用默认值，不阻塞启动

    return NotifierConfig(**kwargs)
