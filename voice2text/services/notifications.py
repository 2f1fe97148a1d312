"""User-visible alerts and notices."""

import logging
from pubsub import pub

from ..models.ui import DisplayState, Notice

logger = logging.getLogger(__name__)

NOTICE_TOPIC = "ui.notice"


class Notifier:
    """Records notices on the display and publishes them on the notice topic."""

    def __init__(self, display: DisplayState, topic: str = NOTICE_TOPIC):
        self.display = display
        self.topic = topic

    def alert(self, title: str, message: str) -> Notice:
        """An error the user must see."""
        return self._post(Notice(title=title, message=message, level="alert"))

    def notice(self, title: str, message: str) -> Notice:
        return self._post(Notice(title=title, message=message, level="notice"))

    def _post(self, notice: Notice) -> Notice:
        logger.info(f"{notice.level.upper()}: {notice.title} - {notice.message}")
        self.display.notices.append(notice)
        pub.sendMessage(self.topic, event=notice)
        return notice
