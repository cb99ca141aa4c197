"""TaskRelay Core Events -- PATCH 翻译、事件分发与监听器"""

from .dispatcher import EventDispatcher
from .listeners import EventListener, TaskExecutedListener, TaskStartedListener
from .translator import PatchOperation, parse_patch, translate_patch

__all__ = [
    "EventDispatcher",
    "EventListener",
    "TaskStartedListener",
    "TaskExecutedListener",
    "PatchOperation",
    "parse_patch",
    "translate_patch",
]
