"""Desktop notifications posted through the system tray icon."""

from __future__ import annotations

import logging

from PyQt6.QtWidgets import QSystemTrayIcon

logger = logging.getLogger(__name__)

NOTIFICATION_TIMEOUT_MS = 5000
NOTIFICATION_TITLE = "Timer Completed"


def notifications_supported() -> bool:
    return (
        QSystemTrayIcon.isSystemTrayAvailable()
        and QSystemTrayIcon.supportsMessages()
    )


class TrayNotifier:
    """Shows "<label> - Completed" balloons.  Silent when unsupported."""

    def __init__(self, tray_icon: QSystemTrayIcon) -> None:
        self._tray_icon = tray_icon

    @property
    def supported(self) -> bool:
        return notifications_supported()

    def notify(self, label: str) -> bool:
        if not self.supported:
            logger.debug("Notifications unsupported; skipping %r", label)
            return False
        self._tray_icon.showMessage(
            NOTIFICATION_TITLE,
            f"{label} - Completed",
            QSystemTrayIcon.MessageIcon.Information,
            NOTIFICATION_TIMEOUT_MS,
        )
        logger.info("Timer completion notification shown: %s", label)
        return True
