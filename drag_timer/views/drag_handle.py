"""Drag handle and duration preview widgets for Drag Timer.

The tray icon cannot report drag gestures, so timers are started from a
small always-on-top handle. Dragging away from it sets the duration; a
floating panel follows the pointer with a preview of the timer.
"""

import logging
import sys

from PyQt6.QtCore import QPoint, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QFont, QGuiApplication, QMouseEvent, QPainter, QPen
from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget

HANDLE_SIZE = 44
SCREEN_MARGIN = 12


def ctrl_modifier() -> Qt.KeyboardModifier:
    """The modifier produced by the physical Control key.

    Qt maps Command to ControlModifier on macOS and reports Control as Meta.
    """
    if sys.platform == "darwin":
        return Qt.KeyboardModifier.MetaModifier
    return Qt.KeyboardModifier.ControlModifier


class DragHandleWidget(QWidget):
    """Frameless handle that reports drag gestures in global coordinates."""

    drag_started = pyqtSignal(float, float)  # x, y
    drag_moved = pyqtSignal(float, float, bool, bool)  # x, y, ctrl_held, shift_held
    drag_finished = pyqtSignal()

    def __init__(self):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self._dragging = False

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint | Qt.WindowType.Tool
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setFixedSize(HANDLE_SIZE, HANDLE_SIZE)
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.setToolTip("Drag away to start a timer")
        self.move_to_default_position()

    def move_to_default_position(self) -> None:
        """Place the handle in the top-right corner of the primary screen."""
        screen = QGuiApplication.primaryScreen()
        if screen is None:
            return
        geometry = screen.availableGeometry()
        self.move(geometry.right() - HANDLE_SIZE - SCREEN_MARGIN, geometry.top() + SCREEN_MARGIN)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setBrush(QColor(30, 30, 30, 220))
        painter.setPen(QPen(QColor(0, 170, 255), 3 if self._dragging else 2))
        rect = QRectF(3, 3, HANDLE_SIZE - 6, HANDLE_SIZE - 6)
        painter.drawEllipse(rect)

        font = QFont()
        font.setPixelSize(20)
        painter.setFont(font)
        painter.setPen(QColor(255, 255, 255))
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, "⏱")
        painter.end()

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        self._dragging = True
        self.setCursor(Qt.CursorShape.ClosedHandCursor)
        position = event.globalPosition()
        self.drag_started.emit(position.x(), position.y())
        self.update()

    def mouseMoveEvent(self, event: QMouseEvent):
        if not self._dragging:
            return
        modifiers = event.modifiers()
        position = event.globalPosition()
        self.drag_moved.emit(
            position.x(),
            position.y(),
            bool(modifiers & ctrl_modifier()),
            bool(modifiers & Qt.KeyboardModifier.ShiftModifier),
        )

    def mouseReleaseEvent(self, event: QMouseEvent):
        if not self._dragging or event.button() != Qt.MouseButton.LeftButton:
            return
        self._dragging = False
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.drag_finished.emit()
        self.update()


class DragPreviewPanel(QWidget):
    """Floating panel showing the duration and end time of the pending timer."""

    def __init__(self):
        super().__init__()
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
            | Qt.WindowType.WindowTransparentForInput
        )
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setStyleSheet(
            "QWidget { background-color: rgba(30, 30, 30, 230); border-radius: 8px; }"
            "QLabel { color: white; padding: 2px 8px; }"
        )

        layout = QVBoxLayout()
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(0)

        self.duration_label = QLabel()
        duration_font = QFont()
        duration_font.setPointSize(16)
        duration_font.setBold(True)
        self.duration_label.setFont(duration_font)
        self.duration_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.end_time_label = QLabel()
        self.end_time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addWidget(self.duration_label)
        layout.addWidget(self.end_time_label)
        self.setLayout(layout)

    def update_preview(self, duration_text: str, end_time_text: str, x: float, y: float) -> None:
        self.duration_label.setText(duration_text)
        self.end_time_label.setText(f"Ends {end_time_text}")
        self.adjustSize()
        # Centered slightly left of the pointer, just below it
        self.move(QPoint(int(x - self.width() / 2 - 10), int(y + 16)))
        if not self.isVisible():
            self.show()
