"""Start-at-login registration for Drag Timer.

macOS gets a LaunchAgent property list, Linux desktops an XDG autostart
entry. Other platforms are not supported.
"""

import logging
import plistlib
import sys
from pathlib import Path
from typing import Optional

from .errors import LoginItemError

LAUNCH_AGENT_LABEL = "io.github.drag-timer"
AUTOSTART_FILE = "drag-timer.desktop"


def default_command() -> list[str]:
    return [sys.executable, "-m", "drag_timer"]


class LoginItem:
    """Registers or unregisters the app to start when the user logs in."""

    def __init__(
        self,
        platform: Optional[str] = None,
        home: Optional[Path] = None,
        command: Optional[list[str]] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.platform = platform or sys.platform
        self.home = Path(home) if home else Path.home()
        self.command = command or default_command()

    @property
    def entry_path(self) -> Path:
        if self.platform == "darwin":
            return self.home / "Library" / "LaunchAgents" / f"{LAUNCH_AGENT_LABEL}.plist"
        if self.platform.startswith("linux"):
            return self.home / ".config" / "autostart" / AUTOSTART_FILE
        raise LoginItemError(f"Start at login is not supported on {self.platform}")

    def is_enabled(self) -> bool:
        try:
            return self.entry_path.exists()
        except LoginItemError:
            return False

    def set_enabled(self, enabled: bool) -> None:
        """Create or remove the login entry.

        Raises:
            LoginItemError: If the platform is unsupported or the file cannot be written
        """
        path = self.entry_path
        try:
            if not enabled:
                path.unlink(missing_ok=True)
                self.logger.info(f"Login item removed: {path}")
                return

            path.parent.mkdir(parents=True, exist_ok=True)
            if self.platform == "darwin":
                with open(path, "wb") as f:
                    plistlib.dump(
                        {"Label": LAUNCH_AGENT_LABEL, "ProgramArguments": self.command, "RunAtLoad": True},
                        f,
                    )
            else:
                path.write_text(self._desktop_entry(), encoding="utf-8")
            self.logger.info(f"Login item registered: {path}")
        except OSError as e:
            action = "enabling" if enabled else "disabling"
            raise LoginItemError(f"Error {action} login item: {e}") from e

    def _desktop_entry(self) -> str:
        exec_line = " ".join(f'"{part}"' if " " in part else part for part in self.command)
        return (
            "[Desktop Entry]\n"
            "Type=Application\n"
            "Name=Drag Timer\n"
            f"Exec={exec_line}\n"
            "X-GNOME-Autostart-enabled=true\n"
        )
