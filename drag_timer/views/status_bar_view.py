"""Status bar (system tray) view for Drag Timer.

This module contains the StatusBarView class that owns the tray icon and
its menu of active timers.
"""

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, QPointF, QRectF, Qt
from PyQt6.QtGui import QAction, QColor, QFont, QIcon, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import QMenu, QSystemTrayIcon

ICON_SIZE = 64
MESSAGE_TIMEOUT_MS = 10_000


def badge_text(count: int) -> str:
    """Text drawn on the tray icon for ``count`` active timers."""
    if count <= 0:
        return ""
    return "+" if count > 9 else str(count)


class StatusBarView(QObject):
    """Tray icon with a menu listing active timers.

    Clicking a timer entry cancels it. Entries are updated in place while the
    set of timers is unchanged, so the menu can stay open during refreshes.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger(__name__)

        # Callback functions (to be set by presenter)
        self.on_cancel_timer: Callable[[str], None] | None = None
        self.on_show_drag_handle: Callable[[], None] | None = None
        self.on_preferences: Callable[[], None] | None = None
        self.on_quit: Callable[[], None] | None = None

        self._timer_actions: dict[str, QAction] = {}
        self._menu = QMenu()

        self.tray_icon = QSystemTrayIcon(self)
        self.tray_icon.setToolTip("Drag Timer")
        self.tray_icon.setContextMenu(self._menu)
        self.tray_icon.activated.connect(self._on_activated)

        self._rebuild_menu([])
        self.set_active_count(0)
        self.logger.info("StatusBarView initialized")

    def show(self) -> None:
        self.tray_icon.show()

    def hide(self) -> None:
        self.tray_icon.hide()

    def show_message(self, title: str, body: str) -> None:
        if not QSystemTrayIcon.supportsMessages():
            self.logger.warning("System tray messages are not supported on this platform")
            return
        self.tray_icon.showMessage(title, body, QSystemTrayIcon.MessageIcon.Information, MESSAGE_TIMEOUT_MS)

    def set_timers(self, entries: list[tuple[str, str]]) -> None:
        """Show ``(timer_id, label)`` entries in the menu."""
        if [timer_id for timer_id, _ in entries] != list(self._timer_actions):
            self._rebuild_menu(entries)
        else:
            for timer_id, label in entries:
                self._timer_actions[timer_id].setText(label)
        self.set_active_count(len(entries))

    def set_active_count(self, count: int) -> None:
        self.tray_icon.setIcon(self._render_icon(count))
        self.tray_icon.setToolTip(f"Drag Timer - {count} active" if count else "Drag Timer")

    def _rebuild_menu(self, entries: list[tuple[str, str]]) -> None:
        self._menu.clear()
        self._timer_actions.clear()

        if entries:
            header = self._menu.addAction("Active Timers (click to cancel)")
            header.setEnabled(False)
            for timer_id, label in entries:
                action = self._menu.addAction(label)
                action.triggered.connect(lambda _checked=False, tid=timer_id: self._cancel(tid))
                self._timer_actions[timer_id] = action
            self._menu.addSeparator()

        self._menu.addAction("Show Drag Handle").triggered.connect(self._show_drag_handle)
        preferences = self._menu.addAction("Preferences")
        preferences.setShortcut("Ctrl+,")
        preferences.triggered.connect(self._preferences)
        quit_action = self._menu.addAction("Quit Drag Timer")
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self._quit)

    def _render_icon(self, count: int) -> QIcon:
        pixmap = QPixmap(ICON_SIZE, ICON_SIZE)
        pixmap.fill(Qt.GlobalColor.transparent)

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(QPen(QColor(0, 0, 0), 6))
        rect = QRectF(5, 5, ICON_SIZE - 10, ICON_SIZE - 10)
        painter.drawEllipse(rect)

        text = badge_text(count)
        if text:
            font = QFont()
            font.setPixelSize(30)
            font.setBold(True)
            painter.setFont(font)
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, text)
        else:
            # Clock hands
            center = rect.center()
            painter.drawLine(center, QPointF(center.x(), center.y() - 18))
            painter.drawLine(center, QPointF(center.x() + 14, center.y()))
        painter.end()

        icon = QIcon(pixmap)
        icon.setIsMask(True)
        return icon

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self._show_drag_handle()

    def _cancel(self, timer_id: str) -> None:
        if self.on_cancel_timer:
            self.on_cancel_timer(timer_id)

    def _show_drag_handle(self) -> None:
        if self.on_show_drag_handle:
            self.on_show_drag_handle()

    def _preferences(self) -> None:
        if self.on_preferences:
            self.on_preferences()

    def _quit(self) -> None:
        if self.on_quit:
            self.on_quit()
