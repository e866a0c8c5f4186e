"""Configuration Model for Drag Timer.

This module contains the ConfigurationModel class that handles
user preferences: drag modes, naming, reminders and alarm sounds.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, ClassVar, Optional

APP_DIR_NAME = "drag_timer"


def get_config_dir() -> Path:
    """Return the OS-specific directory for settings and saved timers."""
    if sys.platform == "win32":
        config_dir = Path.home() / "AppData" / "Roaming"
    elif sys.platform == "darwin":
        config_dir = Path.home() / "Library" / "Application Support"
    else:  # Linux and other Unix-like
        config_dir = Path.home() / ".config"
    return config_dir / APP_DIR_NAME


class ConfigurationData:
    """Data class representing user preferences."""

    def __init__(
        self,
        allow_five_minute_mode: bool = False,
        allow_seconds_mode: bool = False,
        allow_custom_names: bool = False,
        view_as_minutes: bool = False,
        show_drag_indicator: bool = True,
        allow_reminders: bool = False,
        delete_reminders: bool = True,
        ignore_short_timers: bool = False,
        short_timer_threshold_minutes: float = 5,
        selected_reminder_list: Optional[str] = None,
        play_alarm_sound: bool = True,
        selected_alarm_sound: Optional[str] = None,
        auto_save: bool = True,
    ):
        """Initialize configuration data.

        Args:
            allow_five_minute_mode: Ctrl-drag counts in 5 minute steps
            allow_seconds_mode: Shift-drag counts in 1 second steps
            allow_custom_names: Ask for a timer name when a drag ends
            view_as_minutes: Never switch the preview to hours
            show_drag_indicator: Show the duration preview while dragging
            allow_reminders: Create a system reminder for each timer
            delete_reminders: Delete the reminder when its timer is cancelled
            ignore_short_timers: Skip reminders for short timers
            short_timer_threshold_minutes: Timers at or below this length count as short
            selected_reminder_list: Reminder list (calendar) identifier
            play_alarm_sound: Play a sound when a timer finishes
            selected_alarm_sound: Sound file name to play
            auto_save: Whether to automatically save configuration changes
        """
        self.allow_five_minute_mode = allow_five_minute_mode
        self.allow_seconds_mode = allow_seconds_mode
        self.allow_custom_names = allow_custom_names
        self.view_as_minutes = view_as_minutes
        self.show_drag_indicator = show_drag_indicator
        self.allow_reminders = allow_reminders
        self.delete_reminders = delete_reminders
        self.ignore_short_timers = ignore_short_timers
        self.short_timer_threshold_minutes = short_timer_threshold_minutes
        self.selected_reminder_list = selected_reminder_list
        self.play_alarm_sound = play_alarm_sound
        self.selected_alarm_sound = selected_alarm_sound
        self.auto_save = auto_save
        self.last_modified = datetime.now()

    def should_create_reminder(self, duration: float) -> bool:
        """Whether a timer of this length gets a system reminder.

        Short timers are exempt only when strictly not longer than the
        threshold, so a 5 minute timer with a 5 minute threshold is skipped.
        """
        if not self.allow_reminders:
            return False
        if not self.ignore_short_timers:
            return True
        return duration > self.short_timer_threshold_minutes * 60

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "allow_five_minute_mode": self.allow_five_minute_mode,
            "allow_seconds_mode": self.allow_seconds_mode,
            "allow_custom_names": self.allow_custom_names,
            "view_as_minutes": self.view_as_minutes,
            "show_drag_indicator": self.show_drag_indicator,
            "allow_reminders": self.allow_reminders,
            "delete_reminders": self.delete_reminders,
            "ignore_short_timers": self.ignore_short_timers,
            "short_timer_threshold_minutes": self.short_timer_threshold_minutes,
            "selected_reminder_list": self.selected_reminder_list,
            "play_alarm_sound": self.play_alarm_sound,
            "selected_alarm_sound": self.selected_alarm_sound,
            "auto_save": self.auto_save,
            "last_modified": self.last_modified.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigurationData":
        """Create configuration from dictionary, falling back to defaults per key."""
        defaults = cls()
        config = cls(
            **{
                key: data.get(key, getattr(defaults, key))
                for key in defaults.to_dict()
                if key != "last_modified"
            }
        )

        if "last_modified" in data:
            try:
                config.last_modified = datetime.fromisoformat(data["last_modified"])
            except (ValueError, TypeError):
                config.last_modified = datetime.now()

        return config

    def __repr__(self) -> str:
        return (
            f"ConfigurationData(allow_reminders={self.allow_reminders}, "
            f"allow_custom_names={self.allow_custom_names}, play_alarm_sound={self.play_alarm_sound})"
        )


class ConfigurationModel:
    """Model class for managing application configuration.

    This class handles loading, saving, and managing user preferences
    and notifies listeners whenever they change.
    """

    DEFAULT_CONFIG_FILE = "config.json"

    # Keys the preferences dialog may not touch
    READ_ONLY_KEYS: ClassVar[set[str]] = {"last_modified"}

    def __init__(self, config_file_path: Optional[str] = None):
        """Initialize the ConfigurationModel.

        Args:
            config_file_path: Path to configuration file (defaults to the OS config directory)
        """
        self.logger = logging.getLogger(__name__)

        if config_file_path:
            self.config_file_path = Path(config_file_path)
        else:
            self.config_file_path = get_config_dir() / self.DEFAULT_CONFIG_FILE

        self._config_data = ConfigurationData()
        self._config_changed_callbacks: list[Callable[[ConfigurationData], None]] = []

        self.load_configuration()

        self.logger.info(
            "ConfigurationModel initialized",
            extra={
                "config_file": str(self.config_file_path),
                "allow_reminders": self._config_data.allow_reminders,
            },
        )

    @property
    def config_data(self) -> ConfigurationData:
        """Get current configuration data."""
        return self._config_data

    def update_configuration(self, **kwargs) -> bool:
        """Update multiple configuration settings.

        Args:
            **kwargs: Configuration settings to update

        Returns:
            True if configuration was updated successfully, False otherwise
        """
        unknown = [key for key in kwargs if key in self.READ_ONLY_KEYS or not hasattr(self._config_data, key)]
        if unknown:
            self.logger.warning("Unknown configuration keys", extra={"keys": unknown})

        for key, value in kwargs.items():
            if key not in unknown:
                setattr(self._config_data, key, value)

        self._config_data.last_modified = datetime.now()

        if self._config_data.auto_save:
            self.save_configuration()

        self._notify_config_changed()

        self.logger.info("Configuration updated", extra={"updated_keys": list(kwargs.keys())})
        return not unknown

    def load_configuration(self) -> bool:
        """Load configuration from file.

        Returns:
            True if configuration was loaded successfully, False otherwise
        """
        try:
            if not self.config_file_path.exists():
                self.logger.info(
                    "Configuration file not found, using defaults", extra={"config_file": str(self.config_file_path)}
                )
                return True

            with open(self.config_file_path, encoding="utf-8") as f:
                data = json.load(f)

            self._config_data = ConfigurationData.from_dict(data)

            self.logger.info("Configuration loaded successfully", extra={"config_file": str(self.config_file_path)})
            return True

        except Exception:
            self.logger.exception("Error loading configuration", extra={"config_file": str(self.config_file_path)})
            self._config_data = ConfigurationData()
            return False

    def save_configuration(self) -> bool:
        """Save configuration to file.

        Returns:
            True if configuration was saved successfully, False otherwise
        """
        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_file_path, "w", encoding="utf-8") as f:
                json.dump(self._config_data.to_dict(), f, indent=2, ensure_ascii=False)

            self.logger.info("Configuration saved successfully", extra={"config_file": str(self.config_file_path)})
            return True

        except Exception:
            self.logger.exception("Error saving configuration", extra={"config_file": str(self.config_file_path)})
            return False

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self._config_data = ConfigurationData()

        if self._config_data.auto_save:
            self.save_configuration()

        self._notify_config_changed()
        self.logger.info("Configuration reset to defaults")

    def add_config_changed_callback(self, callback: Callable[[ConfigurationData], None]) -> None:
        """Add callback for configuration changes.

        Args:
            callback: Function to call when configuration changes
        """
        self._config_changed_callbacks.append(callback)
        self.logger.debug("Configuration change callback added", extra={"callback": str(callback)})

    def remove_config_changed_callback(self, callback: Callable[[ConfigurationData], None]) -> bool:
        """Remove configuration change callback.

        Returns:
            True if callback was removed, False if not found
        """
        try:
            self._config_changed_callbacks.remove(callback)
            return True
        except ValueError:
            return False

    def _notify_config_changed(self) -> None:
        for callback in self._config_changed_callbacks:
            try:
                callback(self._config_data)
            except Exception:
                self.logger.exception("Error in configuration change callback", extra={"callback": str(callback)})
