"""Console music player with saved playlists, a wrapping playback queue and frequency-band analysis."""

__version__ = "0.1.0"