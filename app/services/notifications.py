"""
Transient user notifications raised by the pipeline, controller and translation flow
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


class Notifier:
    """Default notifier: notifications only go to the log"""

    def success(self, message: str) -> None:
        logger.info(f"[notify:success] {message}")

    def info(self, message: str) -> None:
        logger.info(f"[notify:info] {message}")

    def error(self, message: str) -> None:
        logger.warning(f"[notify:error] {message}")


@dataclass
class Notification:
    level: str
    message: str


class CollectingNotifier(Notifier):
    """Keeps notifications so a request handler or CLI can show them afterwards"""

    def __init__(self):
        self.notifications: List[Notification] = []

    def success(self, message: str) -> None:
        super().success(message)
        self.notifications.append(Notification("success", message))

    def info(self, message: str) -> None:
        super().info(message)
        self.notifications.append(Notification("info", message))

    def error(self, message: str) -> None:
        super().error(message)
        self.notifications.append(Notification("error", message))

    def last_error(self) -> Optional[str]:
        for notification in reversed(self.notifications):
            if notification.level == "error":
                return notification.message
        return None
