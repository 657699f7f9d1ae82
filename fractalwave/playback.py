"""Loading and playing one audio file at a time."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Union

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class AudioPlayback:
    """A transport over one loaded track: play, pause, resume and seek.

    The position is kept in seconds. Stopping keeps the position, so a later
    start resumes from it; ``play`` always starts again from the beginning.
    """

    def __init__(self) -> None:
        self.current_track_path = ""
        self._loaded = False
        self._length = 0.0
        self._offset = 0.0
        self._resumed_at = 0.0
        self._playing = False
        self._started = False

    # -- internals ------------------------------------------------------

    @staticmethod
    def _ensure_mixer() -> None:
        if not pygame.mixer.get_init():
            pygame.mixer.init()

    def _reset_state(self) -> None:
        self._loaded = False
        self._length = 0.0
        self._offset = 0.0
        self._resumed_at = 0.0
        self._playing = False
        self._started = False

    def _start(self) -> None:
        if not self._loaded or self._playing:
            return
        if self._started:
            pygame.mixer.music.unpause()
        else:
            try:
                pygame.mixer.music.play(start=self._offset)
            except pygame.error as exc:
                log.debug("cannot start at %.2fs (%s); starting from the top", self._offset, exc)
                pygame.mixer.music.play()
            self._started = True
        self._playing = True
        self._resumed_at = time.monotonic()

    def _halt(self) -> None:
        if not self._playing:
            return
        self._offset = self.position()
        self._playing = False
        pygame.mixer.music.pause()

    # -- loading --------------------------------------------------------

    def load_file(self, file_path: PathLike) -> bool:
        """Open an audio file; return False if it cannot be read."""
        self.current_track_path = str(file_path)
        if self._loaded:
            pygame.mixer.music.stop()
        self._reset_state()
        try:
            self._ensure_mixer()
            length = pygame.mixer.Sound(self.current_track_path).get_length()
            pygame.mixer.music.load(self.current_track_path)
        except (pygame.error, OSError) as exc:
            log.debug("could not open %s: %s", self.current_track_path, exc)
            return False
        self._length = float(length)
        self._loaded = True
        return True

    def unload_file(self) -> None:
        """Stop playback and forget the current track."""
        self._halt()
        if self._loaded:
            pygame.mixer.music.stop()
            pygame.mixer.music.unload()
        self._reset_state()
        self.current_track_path = ""

    def replace_track(self, file_path: PathLike) -> bool:
        """Unload the current track, load another and play it from the start."""
        self.unload_file()
        if not self.load_file(file_path):
            return False
        self.play()
        return True

    # -- transport ------------------------------------------------------

    def play(self) -> None:
        """Start the loaded track from the beginning."""
        if not self._loaded:
            return
        if self._started:
            pygame.mixer.music.stop()
        self._offset = 0.0
        self._playing = False
        self._started = False
        self._start()

    def stop(self) -> None:
        """Stop playback, keeping the current position."""
        self._halt()

    def toggle_pause(self) -> None:
        """Pause when playing, resume otherwise."""
        if self.is_playing():
            self._halt()
        else:
            self._start()

    def seek(self, position: float) -> None:
        """Move to ``position`` seconds."""
        if not self._loaded:
            return
        target = min(max(0.0, float(position)), self._length)
        self._offset = target
        self._resumed_at = time.monotonic()
        if not self._started:
            return
        try:
            pygame.mixer.music.set_pos(target)
        except pygame.error as exc:
            log.debug("seek to %.2fs failed (%s); restarting there", target, exc)
            was_playing = self._playing
            pygame.mixer.music.stop()
            self._started = False
            self._playing = False
            if was_playing:
                self._start()

    # -- state ----------------------------------------------------------

    def is_playing(self) -> bool:
        """True while the track is running and has not reached its end."""
        return self._playing and self.position() < self._length

    def position(self) -> float:
        """Current playback position in seconds."""
        if not self._loaded:
            return 0.0
        position = self._offset
        if self._playing:
            position += time.monotonic() - self._resumed_at
        return min(position, self._length)

    def length(self) -> float:
        """Length of the loaded track in seconds, 0.0 when nothing is loaded."""
        return self._length

    def has_audio_loaded(self) -> bool:
        """True when a track is loaded."""
        return self._loaded