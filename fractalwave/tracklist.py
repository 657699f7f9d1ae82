"""The queue of tracks currently being played."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Union

from fractalwave.library import LibraryManager
from fractalwave.tracks import Playlist, Track

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

TRACK_NAME_FILTERS = ("*.mp3", "*.wav", "*.flac", "*.ogg", "*.opus")


class TracklistManager:
    """Holds the current playlist and the position within it."""

    def __init__(self, library: LibraryManager) -> None:
        self.library = library
        self.current_index = -1
        self.current_playlist = Playlist("")
        self._tracks: list[Track] = []

    @property
    def tracks(self) -> tuple[Track, ...]:
        """Tracks found by the last directory scan."""
        return tuple(self._tracks)

    def scan_directory(self, directory_path: PathLike) -> None:
        """Collect the audio files of a directory, using file names as titles."""
        directory = Path(directory_path)
        names = sorted(
            (
                entry.name
                for entry in directory.iterdir()
                if entry.is_file()
                and any(fnmatchcase(entry.name.lower(), pattern) for pattern in TRACK_NAME_FILTERS)
            )
            if directory.is_dir()
            else (),
            key=str.lower,
        )
        self._tracks = [
            Track(file_path=str((directory / name).absolute()), title=name) for name in names
        ]
        self.current_index = 0 if self._tracks else -1

    def initialize_playlist(self, playlist_name: str) -> None:
        """Load a saved playlist from the library as the current playlist."""
        music_dir = self.library.current_music_directory
        track_names = self.library.tracks_in_playlist(playlist_name)

        self.current_playlist.clear()
        self.current_playlist.name = playlist_name
        for track_name in track_names:
            self.current_playlist.add_track(
                Track(
                    file_path=os.path.join(music_dir, track_name),
                    title=Path(track_name).name.split(".", 1)[0],
                )
            )

    def set_current_index(self, index: int) -> None:
        """Select a track; raises IndexError if ``index`` is outside the playlist."""
        size = len(self.current_playlist)
        if not 0 <= index < size:
            raise IndexError(f"track index {index} out of range for playlist of {size}")
        self.current_index = index

    def current_track(self) -> Track:
        """The selected track, or an empty Track when nothing valid is selected."""
        if 0 <= self.current_index < len(self.current_playlist):
            return self.current_playlist[self.current_index]
        return Track()

    def next_track(self) -> int:
        """Advance, wrapping to the first track; return the new index."""
        if self.current_index + 1 < len(self.current_playlist):
            self.current_index += 1
        else:
            self.current_index = 0
        return self.current_index

    def previous_track(self) -> int:
        """Step back, wrapping to the last track; return the new index."""
        if self.current_index - 1 >= 0:
            self.current_index -= 1
        else:
            self.current_index = len(self.current_playlist) - 1
        return self.current_index