"""Preferences dialog for Drag Timer."""

import logging
from typing import Any, Optional

from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QGroupBox,
    QSpinBox,
    QVBoxLayout,
)

from ..models.configuration_model import ConfigurationData


class PreferencesDialog(QDialog):
    """Edits a copy of the preferences; the presenter applies the result."""

    def __init__(
        self,
        config: ConfigurationData,
        reminder_lists: list[tuple[str, str]],
        alarm_sounds: list[str],
        start_at_login: bool = False,
        parent=None,
    ):
        super().__init__(parent)
        self.logger = logging.getLogger(__name__)
        self.setWindowTitle("Drag Timer Preferences")
        self.setModal(True)
        self._config = config
        self._reminder_lists = reminder_lists
        self._alarm_sounds = alarm_sounds
        self._start_at_login = start_at_login
        self.init_ui()

    def _check(self, text: str, checked: bool) -> QCheckBox:
        box = QCheckBox(text)
        box.setChecked(checked)
        return box

    def init_ui(self):
        config = self._config
        layout = QVBoxLayout()

        general_group = QGroupBox("General")
        general_layout = QFormLayout()
        self.start_at_login_check = self._check("Start at login", self._start_at_login)
        self.custom_names_check = self._check("Ask for a timer name", config.allow_custom_names)
        self.drag_indicator_check = self._check("Show preview while dragging", config.show_drag_indicator)
        self.view_as_minutes_check = self._check("Show long timers in minutes", config.view_as_minutes)
        for box in (
            self.start_at_login_check,
            self.custom_names_check,
            self.drag_indicator_check,
            self.view_as_minutes_check,
        ):
            general_layout.addRow(box)
        general_group.setLayout(general_layout)
        layout.addWidget(general_group)

        modes_group = QGroupBox("Drag Modes")
        modes_layout = QFormLayout()
        self.five_minute_check = self._check("Ctrl-drag in 5 minute steps", config.allow_five_minute_mode)
        self.seconds_check = self._check("Shift-drag in 1 second steps", config.allow_seconds_mode)
        modes_layout.addRow(self.five_minute_check)
        modes_layout.addRow(self.seconds_check)
        modes_group.setLayout(modes_layout)
        layout.addWidget(modes_group)

        reminders_group = QGroupBox("Reminders")
        reminders_layout = QFormLayout()
        self.reminders_check = self._check("Create a reminder for each timer", config.allow_reminders)
        self.delete_reminders_check = self._check("Delete reminder when cancelling", config.delete_reminders)
        self.ignore_short_check = self._check("Skip reminders for short timers", config.ignore_short_timers)
        self.threshold_spin = QSpinBox()
        self.threshold_spin.setRange(1, 240)
        self.threshold_spin.setSuffix(" min")
        self.threshold_spin.setValue(int(config.short_timer_threshold_minutes))
        self.reminder_list_combo = QComboBox()
        self.reminder_list_combo.addItem("Default list", None)
        for list_id, list_name in self._reminder_lists:
            self.reminder_list_combo.addItem(list_name, list_id)
        self._select_data(self.reminder_list_combo, config.selected_reminder_list)
        reminders_layout.addRow(self.reminders_check)
        reminders_layout.addRow(self.delete_reminders_check)
        reminders_layout.addRow(self.ignore_short_check)
        reminders_layout.addRow("Short timer threshold:", self.threshold_spin)
        reminders_layout.addRow("Reminder list:", self.reminder_list_combo)
        reminders_group.setLayout(reminders_layout)
        layout.addWidget(reminders_group)

        sound_group = QGroupBox("Alarm")
        sound_layout = QFormLayout()
        self.play_sound_check = self._check("Play a sound when a timer finishes", config.play_alarm_sound)
        self.sound_combo = QComboBox()
        self.sound_combo.addItem("First available", None)
        for sound in self._alarm_sounds:
            self.sound_combo.addItem(sound, sound)
        self._select_data(self.sound_combo, config.selected_alarm_sound)
        sound_layout.addRow(self.play_sound_check)
        sound_layout.addRow("Sound:", self.sound_combo)
        sound_group.setLayout(sound_layout)
        layout.addWidget(sound_group)

        self.reminders_check.toggled.connect(self._update_enabled_state)
        self.ignore_short_check.toggled.connect(self._update_enabled_state)
        self.play_sound_check.toggled.connect(self._update_enabled_state)
        self._update_enabled_state()

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self.setLayout(layout)

    @staticmethod
    def _select_data(combo: QComboBox, value: Optional[str]) -> None:
        index = combo.findData(value)
        combo.setCurrentIndex(index if index >= 0 else 0)

    def _update_enabled_state(self) -> None:
        reminders_on = self.reminders_check.isChecked()
        self.delete_reminders_check.setEnabled(reminders_on)
        self.ignore_short_check.setEnabled(reminders_on)
        self.threshold_spin.setEnabled(reminders_on and self.ignore_short_check.isChecked())
        self.reminder_list_combo.setEnabled(reminders_on)
        self.sound_combo.setEnabled(self.play_sound_check.isChecked())

    @property
    def start_at_login(self) -> bool:
        return self.start_at_login_check.isChecked()

    def get_values(self) -> dict[str, Any]:
        """Preference values as keyword arguments for ConfigurationModel.update_configuration."""
        return {
            "allow_custom_names": self.custom_names_check.isChecked(),
            "show_drag_indicator": self.drag_indicator_check.isChecked(),
            "view_as_minutes": self.view_as_minutes_check.isChecked(),
            "allow_five_minute_mode": self.five_minute_check.isChecked(),
            "allow_seconds_mode": self.seconds_check.isChecked(),
            "allow_reminders": self.reminders_check.isChecked(),
            "delete_reminders": self.delete_reminders_check.isChecked(),
            "ignore_short_timers": self.ignore_short_check.isChecked(),
            "short_timer_threshold_minutes": self.threshold_spin.value(),
            "selected_reminder_list": self.reminder_list_combo.currentData(),
            "play_alarm_sound": self.play_sound_check.isChecked(),
            "selected_alarm_sound": self.sound_combo.currentData(),
        }
