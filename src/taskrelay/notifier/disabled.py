"""DisabledNotifier -- 未配置执行池地址时使用

只记录日志，不发出网络请求。
"""

import structlog
from taskrelay.core.models import TaskAddedEvent

log = structlog.get_logger()


class DisabledNotifier:
    """不发送通知的发布端"""

    async def publish(self, event: TaskAddedEvent) -> None:
        log.debug(
            "roster_notify_skipped",
            task_id=event.task_id,
            task_list=event.task_list_name,
        )
