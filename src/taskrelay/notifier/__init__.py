"""TaskRelay Notifier -- 执行池通知

包的公开接口导出。
"""

from .client import NEW_TASK_PATH, RosterNotifier
from .config import NotifierConfig, load_notifier_config
from .disabled import DisabledNotifier


def create_notifier(config: NotifierConfig) -> RosterNotifier | DisabledNotifier:
    """根据配置选择通知实现"""
    if config.enabled:
        return RosterNotifier(
            roster_base_url=config.roster_base_url,
            timeout_s=config.timeout_s,
        )
    return DisabledNotifier()


__all__ = [
    "RosterNotifier",
    "DisabledNotifier",
    "NotifierConfig",
    "load_notifier_config",
    "create_notifier",
    "NEW_TASK_PATH",
]
