"""Tracks and ordered playlists of tracks."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Track:
    """An audio file and the title shown for it."""

    file_path: str = ""
    title: str = ""


class Playlist:
    """A named, ordered list of tracks."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._tracks: list[Track] = []

    def add_track(self, track: Track) -> None:
        """Append a track to the end of the playlist."""
        self._tracks.append(track)

    @property
    def tracks(self) -> tuple[Track, ...]:
        """The tracks in playlist order."""
        return tuple(self._tracks)

    def clear(self) -> None:
        """Remove every track; the name is kept."""
        log.debug("clearing tracks in playlist %r", self.name)
        self._tracks.clear()

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, index: int) -> Track:
        if not 0 <= index < len(self._tracks):
            raise IndexError(f"track index {index} out of range")
        return self._tracks[index]

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks)

    def __repr__(self) -> str:
        return f"Playlist(name={self.name!r}, tracks={len(self._tracks)})"