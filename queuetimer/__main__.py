"""Allow running QueueTimer as a module: python -m queuetimer."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import QueueTimerApp


def main() -> None:
    logging.basicConfig(
        level=logging.DEBUG if os.environ.get("QUEUETIMER_DEBUG") else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()
    logging.getLogger(__name__).info("QueueTimer ready")

    app = QApplication(sys.argv)
    app.setApplicationName("QueueTimer")
    app.setOrganizationName("QueueTimer")

    window = QueueTimerApp()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
