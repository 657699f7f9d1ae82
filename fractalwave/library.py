"""The music library: scanning the music folder and managing saved playlists."""

from __future__ import annotations

import functools
import json
import logging
import os
import re
import subprocess
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Optional, Union

import platformdirs

from fractalwave.helpers import find_executable_in_app_dir
from fractalwave.tracks import Playlist, Track

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

APP_NAME = "FractalWave"
MASTER_PLAYLIST_NAME = "All Songs"
PLAYLISTS_FILE_NAME = "playlists.json"
SETTINGS_FILE_NAME = "settings.json"
MUSIC_FOLDER_KEY = "musicFolder"
LAST_PLAYLIST_KEY = "lastPlaylistPlayed"
AUDIO_NAME_FILTERS = ("*.mp3", "*.wav", "*.flac", "*.ogg", ".opus")

_ILLEGAL_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9 _\.-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


class MissingToolsError(RuntimeError):
    """Raised when ffmpeg or yt-dlp cannot be found next to the application."""


class DownloadError(RuntimeError):
    """Raised when the download tool cannot be run."""


def sanitize_for_filename(raw: str) -> str:
    """Replace characters that are unsafe in file names with underscores."""
    cleaned = _ILLEGAL_FILENAME_CHARS.sub("_", raw)
    cleaned = _REPEATED_UNDERSCORES.sub("_", cleaned)
    return cleaned.strip()


def _base_name(path: PathLike) -> str:
    """File name up to its first dot."""
    return Path(path).name.split(".", 1)[0]


def _matches_audio_filter(name: str) -> bool:
    lowered = name.lower()
    return any(fnmatchcase(lowered, pattern) for pattern in AUDIO_NAME_FILTERS)


class Settings:
    """Persistent key/value settings stored as a JSON file."""

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path)
        self._values: dict[str, Any] = {}
        try:
            loaded = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            loaded = {}
        if isinstance(loaded, dict):
            self._values = loaded

    def value(self, key: str, default: Any = None) -> Any:
        """Return the stored value for ``key``, or ``default``."""
        return self._values.get(key, default)

    def set_value(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and write the settings to disk."""
        self._values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=4), encoding="utf-8")


class LibraryManager:
    """Owns the master playlist and the playlists file."""

    def __init__(
        self,
        data_dir: PathLike,
        settings: Optional[Settings] = None,
        app_dir: Optional[PathLike] = None,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.settings = settings if settings is not None else Settings(self.data_dir / SETTINGS_FILE_NAME)
        self.app_dir = Path(app_dir) if app_dir is not None else None
        self.master_playlist = Playlist(MASTER_PLAYLIST_NAME)
        self.current_music_directory = ""
        self.last_playlist_played = ""
        self._ffmpeg_path: Optional[Path] = None
        self._ytdlp_path: Optional[Path] = None
        self.ensure_playlists_file_exists()

    # -- playlists file -------------------------------------------------

    def playlists_file_path(self) -> Path:
        """Path of the playlists JSON file; its directory is created."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir / PLAYLISTS_FILE_NAME

    def ensure_playlists_file_exists(self) -> bool:
        """Create an empty playlists file if there is none. True on success."""
        path = self.playlists_file_path()
        if path.exists():
            return True
        try:
            path.write_text(json.dumps({"playlists": {}}, indent=4), encoding="utf-8")
        except OSError:
            return False
        return True

    def _load_json(self) -> Optional[dict[str, Any]]:
        try:
            root = json.loads(self.playlists_file_path().read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        return root if isinstance(root, dict) else None

    def _save_json(self, root: dict[str, Any]) -> bool:
        try:
            self.playlists_file_path().write_text(json.dumps(root, indent=4), encoding="utf-8")
        except OSError:
            return False
        return True

    def _playlists(self) -> dict[str, Any]:
        root = self._load_json()
        if root is None:
            log.warning("could not read %s", PLAYLISTS_FILE_NAME)
            return {}
        playlists = root.get("playlists")
        return playlists if isinstance(playlists, dict) else {}

    # -- scanning -------------------------------------------------------

    def scan_directory(self) -> bool:
        """Scan the configured music folder into the master playlist.

        Returns True if the folder exists and holds at least one track.
        Playlist entries whose files are gone are pruned from disk.
        """
        folder = self.settings.value(MUSIC_FOLDER_KEY, "") or ""
        if not folder:
            log.debug("no music folder configured")
            return False
        music_dir = Path(folder)
        if not music_dir.is_dir():
            log.debug("music folder %s does not exist", folder)
            return False

        self.settings.set_value(MUSIC_FOLDER_KEY, folder)
        self.current_music_directory = str(folder)

        file_names = sorted(
            entry.name
            for entry in music_dir.iterdir()
            if entry.is_file() and not entry.is_symlink() and _matches_audio_filter(entry.name)
        )

        self.master_playlist.clear()
        self.master_playlist.name = MASTER_PLAYLIST_NAME
        for file_name in file_names:
            full_path = str((music_dir / file_name).absolute())
            self.master_playlist.add_track(Track(file_path=full_path, title=_base_name(full_path)))

        if len(self.master_playlist) == 0:
            return False

        root = self._load_json()
        if root is None:
            return True

        playlists = root.get("playlists")
        playlists = dict(playlists) if isinstance(playlists, dict) else {}
        modified = False
        for name, entries in playlists.items():
            old = entries if isinstance(entries, list) else []
            kept = []
            for entry in old:
                track_name = entry if isinstance(entry, str) else ""
                if track_name and (music_dir / track_name).exists():
                    kept.append(track_name)
                else:
                    modified = True
            if len(kept) != len(old):
                playlists[name] = kept

        if modified:
            root["playlists"] = playlists
            self._save_json(root)

        queue = root.get("last_playlist_in_queue")
        first = queue[0] if isinstance(queue, list) and queue else None
        self.last_playlist_played = first if isinstance(first, str) else ""
        return True

    # -- playlists ------------------------------------------------------

    def create_playlist(self, playlist_name: str) -> bool:
        """Add an empty playlist; False if it exists or the file is unusable."""
        root = self._load_json()
        if root is None:
            return False
        playlists = root.get("playlists")
        playlists = dict(playlists) if isinstance(playlists, dict) else {}
        if playlist_name in playlists:
            return False
        playlists[playlist_name] = []
        root["playlists"] = playlists
        return self._save_json(root)

    def add_track_to_playlist(self, playlist_name: str, track_path: str) -> bool:
        """Append a track to a playlist; False if missing, duplicate or unsaved."""
        root = self._load_json()
        if root is None:
            return False
        playlists = root.get("playlists")
        playlists = dict(playlists) if isinstance(playlists, dict) else {}
        if playlist_name not in playlists:
            return False
        entries = playlists[playlist_name]
        entries = list(entries) if isinstance(entries, list) else []
        if track_path in entries:
            return False
        entries.append(track_path)
        playlists[playlist_name] = entries
        root["playlists"] = playlists
        return self._save_json(root)

    def playlist_names(self) -> list[str]:
        """Names of the saved playlists, sorted."""
        return sorted(self._playlists())

    def tracks_in_playlist(self, playlist_name: str) -> list[str]:
        """Track file names stored in a playlist; empty if there is no such playlist."""
        entries = self._playlists().get(playlist_name)
        if not isinstance(entries, list):
            return []
        return [entry if isinstance(entry, str) else "" for entry in entries]

    def set_last_playlist_played(self, playlist_name: str) -> None:
        """Remember the playlist last put in the queue."""
        self.last_playlist_played = playlist_name
        self.settings.set_value(LAST_PLAYLIST_KEY, playlist_name)

    # -- downloading ----------------------------------------------------

    def _locate_tools(self) -> tuple[Path, Path]:
        if self._ffmpeg_path is None:
            self._ffmpeg_path = find_executable_in_app_dir("ffmpeg/bin", "ffmpeg.exe", self.app_dir)
        if self._ytdlp_path is None:
            self._ytdlp_path = find_executable_in_app_dir("yt-dlp", "yt-dlp.exe", self.app_dir)
        if self._ffmpeg_path is None or self._ytdlp_path is None:
            raise MissingToolsError(
                "This feature requires ffmpeg and yt-dlp.\n"
                "Please make sure they are installed or included in the app bundle."
            )
        return self._ffmpeg_path, self._ytdlp_path

    @staticmethod
    def _run(args: list[str]) -> subprocess.CompletedProcess[bytes]:
        try:
            return subprocess.run(args, capture_output=True, check=False)
        except OSError as exc:
            raise DownloadError(f"could not run {args[0]}: {exc}") from exc

    def _output_filename(self, ytdlp: Path, url: str, output_folder: str) -> str:
        result = self._run([str(ytdlp), "--get-filename", "-o", "%(title)s.mp4", url])
        filename = sanitize_for_filename(result.stdout.decode("utf-8", errors="replace").strip())
        return os.path.join(output_folder, filename)

    def _download(self, ytdlp: Path, url: str, output_folder: str) -> None:
        self._run(
            [
                str(ytdlp),
                "-o",
                output_folder + "/%(title)s.%(ext)s",
                "--merge-output-format",
                "mp4",
                url,
            ]
        )

    def add_track_from_url(self, url: str) -> bool:
        """Download a track, convert it to Ogg Vorbis in the music folder and rescan.

        Raises MissingToolsError when the tools are not bundled; returns False
        when the conversion fails.
        """
        ffmpeg, ytdlp = self._locate_tools()
        folder = self.current_music_directory

        input_path = self._output_filename(ytdlp, url, folder)
        log.debug("will download to %s", input_path)
        self._download(ytdlp, url, folder)

        dot = input_path.rfind(".")
        output_path = (input_path[:dot] if dot != -1 else input_path) + ".ogg"

        result = self._run(
            [str(ffmpeg), "-y", "-i", input_path, "-vn", "-c:a", "libvorbis", "-q:a", "10", output_path]
        )
        if result.returncode != 0:
            log.warning("ffmpeg failed: %s", result.stderr.decode("utf-8", errors="replace"))
            return False

        if not os.path.exists(output_path):
            log.warning("output file missing: %s", output_path)
            return False

        if os.path.exists(input_path):
            try:
                os.remove(input_path)
            except OSError:
                log.warning("failed to delete temporary file %s", input_path)

        self.scan_directory()
        return True


@functools.lru_cache(maxsize=None)
def default_library() -> LibraryManager:
    """The application-wide library, stored in the user's data directories."""
    data_dir = Path(platformdirs.user_data_dir(APP_NAME, APP_NAME))
    config_dir = Path(platformdirs.user_config_dir(APP_NAME, APP_NAME))
    return LibraryManager(data_dir, Settings(config_dir / SETTINGS_FILE_NAME))