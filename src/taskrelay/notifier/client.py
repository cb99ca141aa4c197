"""RosterNotifier -- 执行池新任务通知

POST {roster_base_url}/roster/newtask/，一次调用，不重试。
超时抛出 DependencyTimeoutError；连接失败、非 2xx 响应或地址非法抛出
DependencyUnavailableError。
"""

import time

import httpx
import structlog
from taskrelay.core.exceptions import DependencyTimeoutError, DependencyUnavailableError
from taskrelay.core.models import TaskAddedEvent

log = structlog.get_logger()

NEW_TASK_PATH = "/roster/newtask/"

_DEPENDENCY = "roster"


class RosterNotifier:
    """执行池通知客户端"""

    def __init__(
        self,
        roster_base_url: str,
        timeout_s: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            roster_base_url: 执行池基础 URL
            timeout_s: 请求超时（秒）
            transport: 可选的 httpx transport（测试时注入）
        """
        self._roster_base_url = roster_base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self._roster_base_url}{NEW_TASK_PATH}"

    async def publish(self, event: TaskAddedEvent) -> None:
        """发送新任务通知

        Raises:
            DependencyTimeoutError: 请求超时
            DependencyUnavailableError: 连接失败、执行池返回错误或地址非法
        """
        body = {
            "location": event.location,
            "taskListName": event.task_list_name,
            "taskId": event.task_id,
        }
        start_time = time.monotonic()
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout_s,
            ) as http_client:
                resp = await http_client.post(self.url, json=body)
                resp.raise_for_status()
        except httpx.TimeoutException as e:
            log.error(
                "roster_notify_timeout",
                task_id=event.task_id,
                url=self.url,
                timeout_s=self._timeout_s,
            )
            raise DependencyTimeoutError(_DEPENDENCY, e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.error(
                "roster_notify_failed",
                task_id=event.task_id,
                url=self.url,
                error_type=type(e).__name__,
            )
            raise DependencyUnavailableError(_DEPENDENCY, e) from e

        log.info(
            "roster_notified",
            task_id=event.task_id,
            task_list=event.task_list_name,
            status_code=resp.status_code,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
