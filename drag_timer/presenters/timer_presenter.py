"""Timer Presenter for Drag Timer.

This module contains the TimerPresenter class that connects the drag
handle, the tray menu and the preferences dialog to the TimerRegistry.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from PyQt6.QtCore import QObject, QTimer
from PyQt6.QtWidgets import QApplication, QDialog, QInputDialog

from ..models.configuration_model import ConfigurationData, ConfigurationModel
from ..models.duration_quantizer import DragGesture, format_display, format_remaining
from ..models.errors import LoginItemError
from ..models.login_item import LoginItem
from ..models.notification_service import TrayNotificationService
from ..models.reminder_service import RemindKitReminderService
from ..models.sound_player import SoundPlayer
from ..models.timer_data import Timer
from ..models.timer_registry import TimerRegistry
from ..models.timer_store import JsonTimerStore, TimerStore
from ..utils.qt_clock import QtClock
from ..views.drag_handle import DragHandleWidget, DragPreviewPanel
from ..views.preferences_dialog import PreferencesDialog
from ..views.status_bar_view import StatusBarView

MENU_REFRESH_INTERVAL_MS = 1000
SHUTDOWN_TIMEOUT_S = 5.0


class TimerPresenter(QObject):
    """Presenter class for Drag Timer.

    Owns the registry and its collaborators, turns drag gestures into
    timers and keeps the tray menu in sync with the live set.
    """

    def __init__(
        self,
        config_model: Optional[ConfigurationModel] = None,
        timer_store: Optional[TimerStore] = None,
    ):
        """Initialize the TimerPresenter.

        Args:
            config_model: Preferences; loaded from the default location when omitted
            timer_store: Storage for active timers; the default JSON file when omitted
        """
        super().__init__()
        self.logger = logging.getLogger(__name__)

        # Models
        self.config_model = config_model or ConfigurationModel()
        self.sound_player = SoundPlayer(self.config_model)
        self.reminder_service = RemindKitReminderService(self.config_model)
        self.login_item = LoginItem()

        # Views
        self.view = StatusBarView(self)
        self.drag_handle = DragHandleWidget()
        self.preview_panel = DragPreviewPanel()

        self.notification_service = TrayNotificationService(
            self.view.show_message, self.sound_player.play_selected_alarm_if_enabled
        )
        self.clock = QtClock(self)
        self.registry = TimerRegistry(
            clock=self.clock,
            store=timer_store or JsonTimerStore(),
            notification_service=self.notification_service,
            reminder_service=self.reminder_service,
            settings_provider=lambda: self.config_model.config_data,
        )

        self._gesture = DragGesture()

        self._connect_view_callbacks()
        self.registry.add_timers_changed_callback(self._on_timers_changed)
        self.config_model.add_config_changed_callback(self._on_config_changed)

        # Remaining times in the menu tick once per second
        self._refresh_timer = QTimer(self)
        self._refresh_timer.timeout.connect(self._refresh_view)
        self._refresh_timer.start(MENU_REFRESH_INTERVAL_MS)

        restored = self.registry.load_saved_timers()
        self._refresh_view()

        self.logger.info(f"TimerPresenter initialized with {len(restored)} restored timer(s)")

    def _connect_view_callbacks(self) -> None:
        self.view.on_cancel_timer = self.cancel_timer
        self.view.on_show_drag_handle = self.show_drag_handle
        self.view.on_preferences = self.show_preferences
        self.view.on_quit = self.quit

        self.drag_handle.drag_started.connect(self._on_drag_started)
        self.drag_handle.drag_moved.connect(self._on_drag_moved)
        self.drag_handle.drag_finished.connect(self._on_drag_finished)

    def show_view(self) -> None:
        self.view.show()
        self.drag_handle.show()

    def show_drag_handle(self) -> None:
        self.drag_handle.show()
        self.drag_handle.raise_()

    def cancel_timer(self, timer_id: str) -> None:
        timer = self.registry.get_timer(timer_id)
        if timer is None:
            self.logger.debug(f"Timer {timer_id} already finished, nothing to cancel")
            return
        self.logger.info(f"Cancelling {self.registry.display_name(timer)} from the menu")
        self.registry.cancel(timer_id)

    def _on_drag_started(self, x: float, y: float) -> None:
        config = self.config_model.config_data
        self._gesture = DragGesture(
            five_minute_mode_enabled=config.allow_five_minute_mode,
            seconds_mode_enabled=config.allow_seconds_mode,
        )
        self._gesture.begin(x, y)

    def _on_drag_moved(self, x: float, y: float, ctrl_held: bool, shift_held: bool) -> None:
        duration = self._gesture.update(x, y, ctrl_held=ctrl_held, shift_held=shift_held)
        config = self.config_model.config_data

        if not (self._gesture.preview_visible and config.show_drag_indicator):
            self.preview_panel.hide()
            return

        end_time = datetime.now() + timedelta(seconds=duration)
        self.preview_panel.update_preview(
            format_display(duration, view_as_minutes=config.view_as_minutes),
            end_time.strftime("%H:%M"),
            x,
            y,
        )

    def _on_drag_finished(self) -> None:
        self.preview_panel.hide()
        duration = self._gesture.end()
        if duration <= 0:
            return

        name = None
        if self.config_model.config_data.allow_custom_names:
            default_name = f"Timer {len(self.registry.active_timers()) + 1}"
            name, accepted = QInputDialog.getText(
                None,
                "Timer Name",
                f"Name for the {format_display(duration)} timer (empty for {default_name}):",
            )
            if not accepted:
                self.logger.info("Timer naming cancelled, no timer started")
                return

        self.registry.create(duration, name)

    def _on_timers_changed(self, timers: list[Timer]) -> None:
        self.logger.debug(f"Active timers changed: {len(timers)}")
        self._refresh_view()

    def _on_config_changed(self, config: ConfigurationData) -> None:
        self.logger.debug(f"Configuration changed: {config!r}")
        if not config.play_alarm_sound:
            self.sound_player.stop_active_sound()

    def _refresh_view(self) -> None:
        now = self.clock.now()
        entries = [
            (timer.id, f"{self.registry.display_name(timer)}: {format_remaining(timer.remaining(now))}")
            for timer in self.registry.active_timers()
        ]
        self.view.set_timers(entries)

    def show_preferences(self) -> None:
        config = self.config_model.config_data
        reminder_lists = self.reminder_service.list_reminder_lists() if config.allow_reminders else []
        dialog = PreferencesDialog(
            config,
            reminder_lists=reminder_lists,
            alarm_sounds=self.sound_player.available_alarm_sounds(),
            start_at_login=self.login_item.is_enabled(),
        )
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return

        self.config_model.update_configuration(**dialog.get_values())

        if dialog.start_at_login != self.login_item.is_enabled():
            try:
                self.login_item.set_enabled(dialog.start_at_login)
            except LoginItemError as e:
                self.logger.warning(str(e))

    def quit(self) -> None:
        self.logger.info("Quitting Drag Timer")
        self._refresh_timer.stop()
        self.sound_player.stop_active_sound()
        if not self.registry.wait_for_pending_reminder_tasks(timeout=SHUTDOWN_TIMEOUT_S):
            self.logger.warning("Some reminder deletions did not finish before quitting")
        self.registry.shutdown(wait_for_tasks=False)
        self.view.hide()
        QApplication.quit()
