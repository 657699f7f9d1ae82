# fractalwave

A console music player built around a music folder and named playlists.

- Scans a music folder for `.mp3`, `.wav`, `.flac` and `.ogg` files into an
  "All Songs" master playlist, and prunes saved playlist entries whose files
  are gone.
- Keeps playlists in a `playlists.json` file and settings (the music folder,
  the last playlist played) in a `settings.json` file.
- Plays a queue of tracks through `pygame`'s mixer, with next/previous that
  wrap around at both ends, pause/resume and seeking.
- Splits a stream of samples into seven frequency bands (sub-bass to
  brilliance) using a Hann-windowed FFT.
- Can download a track from a video URL with `yt-dlp` and convert it to Ogg
  Vorbis with `ffmpeg`.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
fractalwave --help
```

Options:

| option | what it does |
| --- | --- |
| `--data-dir DIR` | keep `playlists.json` and `settings.json` in `DIR` instead of the user data/config directories |
| `--music-folder DIR` | set the music folder that is scanned |
| `--list` | print the saved playlist names, sorted |
| `--tracks PLAYLIST` | print the track file names of a playlist |
| `--create PLAYLIST` | create an empty playlist |
| `--add PLAYLIST TRACK` | add a track file name to a playlist (duplicates are refused) |
| `--add-url URL` | download a track into the music folder |
| `--play [PLAYLIST]` | play a playlist, by default the last one played |

Every run scans the music folder first. Track names in playlists are file
names relative to the music folder.

With `--play`, the first track starts and commands are read from standard
input, one per line:

```
next (n), prev (p), toggle (t), play <number>, seek <percent>,
status (s), list (l), help (h), quit (q)
```

After each playback command the state is printed, for example
`playing: song 12.3/180.0s [6%]`. Playback stops when input ends or on `quit`.

Example:

```
fractalwave --music-folder ~/Music --create Evening
fractalwave --add Evening song.ogg
fractalwave --play Evening
```

## Downloading tracks

`--add-url` (and `LibraryManager.add_track_from_url`) looks for
`ffmpeg/bin/ffmpeg.exe` and `yt-dlp/yt-dlp.exe` under the application
directory (the directory of the running script, or the `app_dir` given to
`LibraryManager`), searching subdirectories if they are not found directly.
If either is missing, `MissingToolsError` is raised. The video is downloaded
as `<title>.mp4` into the music folder, converted to `<title>.ogg`, the
`.mp4` is deleted and the folder rescanned.

## Using the library

```python
from fractalwave.library import MUSIC_FOLDER_KEY, default_library
from fractalwave.playback import AudioPlayback
from fractalwave.controller import MediaController

library = default_library()
library.settings.set_value(MUSIC_FOLDER_KEY, "/home/me/Music")
library.scan_directory()
library.create_playlist("Evening")
library.add_track_to_playlist("Evening", "song.ogg")

controller = MediaController(library, AudioPlayback())
controller.initialize_playlist("Evening")
controller.load_and_play_track(0)   # calling again with the same index toggles pause
controller.next_track()
```

`TracklistManager.set_current_index` raises `IndexError` for an index outside
the playlist; `MediaController.load_and_play_track` returns `False` instead.

Frequency analysis on its own:

```python
from fractalwave.spectrum import SpectrumAnalyzer, FrequencyBand, format_band_levels

analyzer = SpectrumAnalyzer(13)          # 2**13 = 8192-sample window
analyzer.push_samples(samples)
if analyzer.ready():
    analyzer.perform_fft(44100.0)
    print(analyzer.band_level(FrequencyBand.BASS))
    print(format_band_levels(analyzer.bands()))
```

Other building blocks:

- `fractalwave.circular_buffer.CircularBuffer` – fixed-capacity sample ring.
- `fractalwave.tracks.Track`, `Playlist` – tracks and ordered playlists.
- `fractalwave.worker.Worker` – runs a sequence of steps (optionally on a
  thread); a step returning `False` aborts and is reported as an error.
- `fractalwave.helpers.find_executable_in_app_dir`, `read_stylesheet`.

## What it does not do

- There is no graphical window; the player is the command line above.
- `AudioPlayback` does not pass the audio it plays to `SpectrumAnalyzer`;
  band levels are only computed for samples you push yourself, and nothing
  draws them.
- Deleting playlists or removing tracks from them is not supported.