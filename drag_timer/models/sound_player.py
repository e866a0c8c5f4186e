"""Alarm sound playback for Drag Timer."""

import logging
from pathlib import Path
from typing import ClassVar, Optional

from PyQt6.QtCore import QUrl
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer

from .configuration_model import ConfigurationModel, get_config_dir


class SoundPlayer:
    """Plays the alarm selected in the preferences.

    Sounds are looked up by file name in a sounds directory. A name without
    an extension matches the first allowed extension that exists.
    """

    ALLOWED_EXTENSIONS: ClassVar[list[str]] = ["mp3", "wav", "aiff", "caf", "m4a"]

    def __init__(self, config_model: ConfigurationModel, sounds_dir: Optional[Path] = None):
        self.logger = logging.getLogger(__name__)
        self._config_model = config_model
        self.sounds_dir = Path(sounds_dir) if sounds_dir else get_config_dir() / "sounds"
        self._player: Optional[QMediaPlayer] = None
        self._audio_output: Optional[QAudioOutput] = None

    def available_alarm_sounds(self) -> list[str]:
        """File names of every playable sound, sorted."""
        if not self.sounds_dir.is_dir():
            return []
        return sorted({
            path.name
            for path in self.sounds_dir.iterdir()
            if path.is_file() and path.suffix.lstrip(".").lower() in self.ALLOWED_EXTENSIONS
        })

    def sound_path(self, name: str) -> Optional[Path]:
        """Resolve a sound name to a file in the sounds directory."""
        candidate = self.sounds_dir / name
        if candidate.suffix.lstrip(".").lower() in self.ALLOWED_EXTENSIONS and candidate.is_file():
            return candidate

        for ext in self.ALLOWED_EXTENSIONS:
            candidate = self.sounds_dir / f"{name}.{ext}"
            if candidate.is_file():
                return candidate
        return None

    def play_selected_alarm_if_enabled(self, loop: bool = False) -> bool:
        """Play the configured alarm, falling back to the first available sound.

        Returns:
            True if a sound started playing
        """
        config = self._config_model.config_data
        if not config.play_alarm_sound:
            return False

        self.stop_active_sound()

        if config.selected_alarm_sound and self.play(config.selected_alarm_sound, loop=loop):
            return True

        sounds = self.available_alarm_sounds()
        if sounds:
            return self.play(sounds[0], loop=loop)

        self.logger.info(f"No alarm sounds found in {self.sounds_dir}")
        return False

    def play(self, name: str, loop: bool = False) -> bool:
        path = self.sound_path(name)
        if path is None:
            self.logger.warning(f"Could not find sound named {name}")
            return False

        if self._player is None:
            self._player = QMediaPlayer()
            self._audio_output = QAudioOutput()
            self._audio_output.setVolume(1.0)
            self._player.setAudioOutput(self._audio_output)

        self._player.setSource(QUrl.fromLocalFile(str(path)))
        loops = QMediaPlayer.Loops.Infinite if loop else QMediaPlayer.Loops.Once
        self._player.setLoops(loops.value)
        self._player.play()
        self.logger.debug(f"Playing alarm sound {path}")
        return True

    def stop_active_sound(self) -> None:
        if self._player is not None:
            self._player.stop()
