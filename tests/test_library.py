import json

import pytest

from fractalwave.library import (
    LibraryManager,
    MissingToolsError,
    Settings,
    sanitize_for_filename,
)


@pytest.fixture
def library(tmp_path):
    settings = Settings(tmp_path / "config" / "settings.json")
    return LibraryManager(tmp_path / "data", settings, app_dir=tmp_path / "app")


@pytest.fixture
def music_dir(tmp_path):
    folder = tmp_path / "music"
    folder.mkdir()
    return folder


def _write_playlists(library, root):
    library.playlists_file_path().write_text(json.dumps(root), encoding="utf-8")


def test_settings_round_trip_and_persistence(tmp_path):
    path = tmp_path / "s" / "settings.json"
    settings = Settings(path)
    assert settings.value("musicFolder", "") == ""
    settings.set_value("musicFolder", "/music")
    assert settings.value("musicFolder") == "/music"
    assert Settings(path).value("musicFolder") == "/music"


def test_settings_ignores_corrupt_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert Settings(path).value("key", "fallback") == "fallback"


def test_playlists_file_created_empty(library):
    path = library.playlists_file_path()
    assert path.name == "playlists.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"playlists": {}}
    assert library.ensure_playlists_file_exists() is True


def test_create_playlist_and_duplicate(library):
    assert library.create_playlist("Road") is True
    assert library.create_playlist("Road") is False
    assert library.playlist_names() == ["Road"]
    assert library.tracks_in_playlist("Road") == []


def test_playlist_names_sorted(library):
    for name in ["zeta", "alpha", "mid"]:
        library.create_playlist(name)
    names = library.playlist_names()
    assert names == sorted(names)
    assert set(names) == {"zeta", "alpha", "mid"}


def test_add_track_to_playlist(library):
    library.create_playlist("Road")
    assert library.add_track_to_playlist("Road", "a.mp3") is True
    assert library.add_track_to_playlist("Road", "b.mp3") is True
    assert library.add_track_to_playlist("Road", "a.mp3") is False
    assert library.add_track_to_playlist("Missing", "a.mp3") is False
    assert library.tracks_in_playlist("Road") == ["a.mp3", "b.mp3"]


def test_unknown_playlist_has_no_tracks(library):
    assert library.tracks_in_playlist("nothing") == []


def test_corrupt_playlists_file(library):
    library.playlists_file_path().write_text("[1, 2]", encoding="utf-8")
    assert library.create_playlist("Road") is False
    assert library.add_track_to_playlist("Road", "a.mp3") is False
    assert library.playlist_names() == []


def test_scan_without_configured_folder(library):
    assert library.scan_directory() is False


def test_scan_missing_folder(library, tmp_path):
    library.settings.set_value("musicFolder", str(tmp_path / "nowhere"))
    assert library.scan_directory() is False


def test_scan_empty_folder(library, music_dir):
    library.settings.set_value("musicFolder", str(music_dir))
    assert library.scan_directory() is False
    assert library.current_music_directory == str(music_dir)


def test_scan_builds_master_playlist(library, music_dir):
    for name in ["beta.wav", "alpha.mp3", "notes.txt", "gamma.FLAC"]:
        (music_dir / name).write_bytes(b"")
    library.settings.set_value("musicFolder", str(music_dir))

    assert library.scan_directory() is True
    master = library.master_playlist
    assert master.name == "All Songs"
    titles = [track.title for track in master]
    assert titles == ["alpha", "beta", "gamma"]
    for track in master:
        assert (music_dir / track.file_path).exists()


def test_scan_prunes_missing_tracks_and_reads_last_playlist(library, music_dir):
    (music_dir / "kept.mp3").write_bytes(b"")
    library.settings.set_value("musicFolder", str(music_dir))
    _write_playlists(
        library,
        {
            "playlists": {"Road": ["kept.mp3", "gone.mp3"], "Other": ["kept.mp3"]},
            "last_playlist_in_queue": ["Road"],
        },
    )

    assert library.scan_directory() is True
    assert library.tracks_in_playlist("Road") == ["kept.mp3"]
    assert library.tracks_in_playlist("Other") == ["kept.mp3"]
    assert library.last_playlist_played == "Road"


def test_scan_without_queue_entry(library, music_dir):
    (music_dir / "a.ogg").write_bytes(b"")
    library.settings.set_value("musicFolder", str(music_dir))
    assert library.scan_directory() is True
    assert library.last_playlist_played == ""


def test_set_last_playlist_played_persists(library):
    library.set_last_playlist_played("Road")
    assert library.last_playlist_played == "Road"
    assert Settings(library.settings.path).value("lastPlaylistPlayed") == "Road"


def test_sanitize_replaces_illegal_characters():
    assert sanitize_for_filename("a/b") == "a_b"
    assert sanitize_for_filename("x???y") == "x_y"


def test_sanitize_keeps_allowed_characters():
    name = "My Song - Live_2020.mp4"
    assert sanitize_for_filename(name) == name


def test_sanitize_trims_whitespace():
    assert sanitize_for_filename("  title.mp4  ") == "title.mp4"


def test_add_track_from_url_without_tools(library):
    with pytest.raises(MissingToolsError):
        library.add_track_from_url("https://example.com/watch")