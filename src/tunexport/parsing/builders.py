"""Mutable builders for tracks, playlists and the library.

A builder accumulates the field values found in one dictionary of the
library document. ``build()`` turns it into the matching immutable model
exactly once; a builder cannot be reused afterwards.
"""

from dataclasses import fields
from typing import Any, Dict, List, Optional, Sequence

from tunexport.library.models import Library, Playlist, Track


def _init_field_names(model) -> frozenset:
    return frozenset(f.name for f in fields(model) if f.init)


class EntityBuilder:
    """Shared bookkeeping for the builders below."""

    model = None
    # fields that are computed during assembly rather than read from the document
    derived: frozenset = frozenset()

    def __init__(self):
        self.values: Dict[str, Any] = {}
        self._built = False

    @classmethod
    def settable(cls) -> frozenset:
        return _init_field_names(cls.model) - cls.derived

    def set(self, attribute: str, value: Any) -> None:
        """Set a model attribute; unknown attribute names are a programming error."""
        self._check_not_built()
        if attribute not in self.settable():
            raise AttributeError(f"{type(self).__name__} has no field {attribute!r}")
        self.values[attribute] = value

    def get(self, attribute: str) -> Any:
        return self.values.get(attribute)

    def _check_not_built(self) -> None:
        if self._built:
            raise RuntimeError(f"{type(self).__name__} has already been built")

    def _mark_built(self) -> None:
        self._check_not_built()
        self._built = True


class TrackBuilder(EntityBuilder):
    model = Track
    derived = frozenset({"in_playlists"})

    @property
    def track_id(self) -> Optional[int]:
        return self.values.get("track_id")

    def build(self) -> Track:
        if self.track_id is None:
            raise ValueError(f"Cannot build a track without a Track ID: {self}")
        self._mark_built()
        return Track(**self.values)

    def __str__(self):
        return (
            f"{self.values.get('artist')} - {self.values.get('name')} "
            f"{{trackId={self.track_id}, persistentId={self.values.get('persistent_id')}}}"
        )


class PlaylistBuilder(EntityBuilder):
    """Collects a playlist's fields and the raw ``Track ID`` references of its items."""

    model = Playlist
    derived = frozenset({"track_ids", "parent"})

    def __init__(self):
        super().__init__()
        self.track_ids: List[int] = []

    @property
    def persistent_id(self) -> Optional[str]:
        return self.values.get("persistent_id")

    @property
    def parent_persistent_id(self) -> Optional[str]:
        return self.values.get("parent_persistent_id")

    @property
    def name(self) -> Optional[str]:
        return self.values.get("name")

    def add_track_id(self, track_id: int) -> None:
        self._check_not_built()
        self.track_ids.append(track_id)

    def build(self, parent: Optional[Playlist] = None) -> Playlist:
        """Turn the builder into a :class:`Playlist` below ``parent`` (or at the top level)."""
        if self.persistent_id is None:
            raise ValueError(f"Cannot build a playlist without a Playlist Persistent ID: {self}")
        if parent is not None and parent.persistent_id != self.parent_persistent_id:
            raise ValueError(
                f"Playlist {self} declares parent {self.parent_persistent_id}, got {parent.persistent_id}"
            )
        self._mark_built()
        return Playlist(**self.values, track_ids=tuple(self.track_ids), parent=parent)

    def __str__(self):
        return (
            f"{self.name} {{persistentId={self.persistent_id}, "
            f"parentPersistentId={self.parent_persistent_id}, #trackIds={len(self.track_ids)}}}"
        )


class LibraryBuilder(EntityBuilder):
    """Collects the library metadata plus the tracks and playlist builders found so far."""

    model = Library
    derived = frozenset({"tracks", "playlists", "playlists_at_top_level"})

    def __init__(self):
        super().__init__()
        self.tracks: List[Track] = []
        self.tracks_by_id: Dict[int, Track] = {}
        self.playlist_builders: List[PlaylistBuilder] = []
        self.playlist_builders_by_id: Dict[str, PlaylistBuilder] = {}

    def add_track(self, track: Track) -> None:
        self._check_not_built()
        self.tracks.append(track)
        self.tracks_by_id[track.track_id] = track

    def add_playlist_builder(self, builder: PlaylistBuilder) -> None:
        self._check_not_built()
        self.playlist_builders.append(builder)
        self.playlist_builders_by_id[builder.persistent_id] = builder

    def build(
        self,
        tracks: Sequence[Track],
        playlists: Sequence[Playlist],
        playlists_at_top_level: Sequence[Playlist],
    ) -> Library:
        """Freeze the (already sorted) collections into a :class:`Library`."""
        self._mark_built()
        for playlist in playlists:
            playlist._seal()
        return Library(
            **self.values,
            tracks=tuple(tracks),
            playlists=tuple(playlists),
            playlists_at_top_level=tuple(playlists_at_top_level),
        )

    def __str__(self):
        return (
            f"Library {{persistentId={self.values.get('persistent_id')}, "
            f"#tracks={len(self.tracks)}, #playlists={len(self.playlist_builders)}}}"
        )
