"""Ties the current tracklist to audio playback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Optional

from fractalwave.library import LibraryManager
from fractalwave.playback import AudioPlayback
from fractalwave.tracklist import TracklistManager

log = logging.getLogger(__name__)


class MediaController:
    """Plays tracks of the current playlist and moves between them."""

    def __init__(self, library: LibraryManager, playback: Optional[Any] = None) -> None:
        self.library = library
        self.playback = playback if playback is not None else AudioPlayback()
        self.tracklist = TracklistManager(library)
        self.current_music_folder = ""
        self._focus_callback: Optional[Callable[[int], Any]] = None

    def initialize_playlist(self, playlist_name: str) -> None:
        """Make a saved playlist the current one."""
        self.tracklist.initialize_playlist(playlist_name)
        log.debug(
            "playlist %r initialised with %d tracks",
            playlist_name,
            len(self.tracklist.current_playlist),
        )

    def set_focus_callback(self, callback: Optional[Callable[[int], Any]]) -> None:
        """Set the function told which index became current on next/previous."""
        self._focus_callback = callback

    def _focus(self, index: int) -> None:
        if self._focus_callback is not None and 0 <= index < len(self.tracklist.current_playlist):
            self._focus_callback(index)

    def load_and_play_track(self, index: int) -> bool:
        """Play the track at ``index``; the current track toggles pause instead."""
        try:
            self.tracklist.set_current_index(index)
        except IndexError:
            log.debug("invalid track index: %d", index)
            return False

        track = self.tracklist.current_track()
        if self.playback.current_track_path == track.file_path:
            self.playback.toggle_pause()
            return True

        if not self.playback.replace_track(track.file_path):
            log.debug("failed to replace track with %s", track.file_path)
            return False
        return True

    def next_track(self) -> bool:
        """Advance (wrapping around) and play."""
        index = self.tracklist.next_track()
        self._focus(index)
        return self.load_and_play_track(index)

    def previous_track(self) -> bool:
        """Step back (wrapping around) and play."""
        index = self.tracklist.previous_track()
        self._focus(index)
        return self.load_and_play_track(index)