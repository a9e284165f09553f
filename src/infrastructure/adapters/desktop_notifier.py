"""Best-effort desktop notification adapter."""

from __future__ import annotations

import logging
import platform
import shutil
import subprocess

logger = logging.getLogger(__name__)


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopNotifier:
    """
    Shows a desktop notification with the platform's command-line notifier:
    ``notify-send`` on Linux/BSD, ``osascript`` on macOS.

    Missing notifier programs are not an error; the notification is skipped.
    """

    def __init__(self, app_name: str = "flicksync", timeout_seconds: float = 5.0) -> None:
        self.app_name = app_name
        self.timeout_seconds = timeout_seconds

    def command(self, title: str, message: str) -> list[str] | None:
        """Build the notifier command for this platform, or None if none is available."""
        if platform.system() == "Darwin":
            if shutil.which("osascript") is None:
                return None
            script = f"display notification {_applescript_quote(message)} with title {_applescript_quote(title)}"
            return ["osascript", "-e", script]

        if shutil.which("notify-send") is None:
            return None
        return ["notify-send", "--app-name", self.app_name, title, message]

    def notify(self, title: str, message: str) -> None:
        command = self.command(title, message)
        if command is None:
            logger.debug("No desktop notifier available, skipping notification")
            return

        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=self.timeout_seconds,
            check=False,
        )
        if completed.returncode != 0:
            logger.warning(f"Desktop notification failed: {completed.stderr.strip()}")
