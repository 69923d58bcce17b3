"""tunexport: turn an iTunes / Apple Music library export into a sorted graph of tracks and playlists."""

__version__ = "0.3.0"
