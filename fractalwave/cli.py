"""Command-line music player."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Optional, TextIO

from fractalwave.controller import MediaController
from fractalwave.library import (
    MUSIC_FOLDER_KEY,
    LibraryManager,
    MissingToolsError,
    DownloadError,
    default_library,
)
from fractalwave.playback import AudioPlayback

SLIDER_MAX = 10000

HELP_TEXT = (
    "commands: next (n), prev (p), toggle (t), play <number>, "
    "seek <percent>, status (s), list (l), help (h), quit (q)"
)


def seek_position(slider_value: int, slider_max: int, track_length: float) -> float:
    """Seconds that a slider value stands for."""
    if slider_max <= 0:
        raise ValueError(f"slider_max must be positive, got {slider_max}")
    return (slider_value / float(slider_max)) * track_length


def slider_value(position: float, track_length: float, slider_max: int = SLIDER_MAX) -> Optional[int]:
    """Slider value for a position, or None when the track has no length."""
    if track_length <= 0:
        return None
    return int((position / track_length) * slider_max)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fractalwave", description="Play and manage music playlists.")
    parser.add_argument("--data-dir", type=Path, help="directory holding playlists and settings")
    parser.add_argument("--music-folder", type=Path, help="set the music folder to scan")
    parser.add_argument("--list", action="store_true", help="list saved playlists")
    parser.add_argument("--tracks", metavar="PLAYLIST", help="list the tracks of a playlist")
    parser.add_argument("--create", metavar="PLAYLIST", help="create an empty playlist")
    parser.add_argument("--add", nargs=2, metavar=("PLAYLIST", "TRACK"), help="add a track to a playlist")
    parser.add_argument("--add-url", metavar="URL", help="download a track into the music folder")
    parser.add_argument(
        "--play",
        nargs="?",
        const="",
        metavar="PLAYLIST",
        help="play a playlist (the last one played by default)",
    )
    return parser


def _status(controller: MediaController) -> str:
    playback = controller.playback
    track = controller.tracklist.current_track()
    if not playback.has_audio_loaded():
        return "nothing loaded"
    state = "playing" if playback.is_playing() else "paused"
    position, length = playback.position(), playback.length()
    value = slider_value(position, length)
    bar = "" if value is None else f" [{value * 100 // SLIDER_MAX}%]"
    return f"{state}: {track.title} {position:.1f}/{length:.1f}s{bar}"


def _run_commands(controller: MediaController, lines: Iterable[str], out: TextIO) -> None:
    playback = controller.playback
    print(HELP_TEXT, file=out)
    for line in lines:
        words = line.split()
        if not words:
            continue
        command, rest = words[0].lower(), words[1:]
        if command in ("q", "quit", "exit"):
            break
        if command in ("n", "next"):
            ok = controller.next_track()
        elif command in ("p", "prev", "previous"):
            ok = controller.previous_track()
        elif command in ("t", "toggle", "pause"):
            playback.toggle_pause()
            ok = True
        elif command == "play" and rest and rest[0].isdigit():
            ok = controller.load_and_play_track(int(rest[0]) - 1)
        elif command == "seek" and rest:
            try:
                percent = float(rest[0])
            except ValueError:
                print(f"not a number: {rest[0]}", file=out)
                continue
            playback.seek(seek_position(int(percent * SLIDER_MAX / 100), SLIDER_MAX, playback.length()))
            ok = True
        elif command in ("l", "list"):
            for number, track in enumerate(controller.tracklist.current_playlist, start=1):
                print(f"{number:3d}. {track.title}", file=out)
            continue
        elif command in ("s", "status"):
            ok = True
        elif command in ("h", "help"):
            print(HELP_TEXT, file=out)
            continue
        else:
            print(f"unknown command: {line.strip()}", file=out)
            continue
        if not ok:
            print("could not play that track", file=out)
        print(_status(controller), file=out)


def _play(library: LibraryManager, playlist_name: str) -> int:
    name = playlist_name or library.last_playlist_played
    if not name:
        print("no playlist given and none played before", file=sys.stderr)
        return 1
    controller = MediaController(library, AudioPlayback())
    controller.current_music_folder = library.current_music_directory
    controller.initialize_playlist(name)
    if len(controller.tracklist.current_playlist) == 0:
        print(f"playlist {name!r} has no tracks", file=sys.stderr)
        return 1
    library.set_last_playlist_played(name)
    if not controller.load_and_play_track(0):
        print("could not play the first track", file=sys.stderr)
    print(_status(controller))
    try:
        _run_commands(controller, sys.stdin, sys.stdout)
    finally:
        controller.playback.unload_file()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the player; return the exit status."""
    args = _build_parser().parse_args(argv)
    library = LibraryManager(args.data_dir) if args.data_dir is not None else default_library()
    status = 0

    if args.music_folder is not None:
        library.settings.set_value(MUSIC_FOLDER_KEY, str(args.music_folder))
    library.scan_directory()

    if args.create is not None:
        if library.create_playlist(args.create):
            print(f"Playlist \u201c{args.create}\u201d was created.")
        else:
            print(f"A playlist named \u201c{args.create}\u201d already exists.", file=sys.stderr)
            status = 1

    if args.add is not None:
        playlist_name, track = args.add
        if library.add_track_to_playlist(playlist_name, track):
            print(f"Added {track} to {playlist_name}.")
        else:
            print(f"Could not add {track} to {playlist_name}.", file=sys.stderr)
            status = 1

    if args.add_url is not None:
        try:
            added = library.add_track_from_url(args.add_url)
        except (MissingToolsError, DownloadError) as exc:
            print(str(exc), file=sys.stderr)
            added = False
        if added:
            print("Track was added successfully.")
        else:
            print("Failed to add track. It may already exist or be invalid.", file=sys.stderr)
            status = 1

    if args.list:
        for name in library.playlist_names():
            print(name)

    if args.tracks is not None:
        for track in library.tracks_in_playlist(args.tracks):
            print(track)

    if args.play is not None:
        return _play(library, args.play) or status
    return status


if __name__ == "__main__":
    sys.exit(main())