"""The parsed, read-only library graph."""

from tunexport.library.models import Library, Playlist, Track

__all__ = ["Library", "Playlist", "Track"]
