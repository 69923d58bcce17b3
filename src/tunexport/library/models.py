"""Data models for the parsed library graph.

The graph is produced once by :class:`tunexport.parsing.parser.LibraryParser`
and is read-only afterwards. Tracks and playlists compare equal by their
persistent ids, which are stable across exports of the same library.
"""

import weakref
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

UNKNOWN_ARTIST = "UNKNOWN ARTIST"
UNKNOWN_TITLE = "UNKNOWN TITLE"


def first_non_empty(*values: Optional[str]) -> Optional[str]:
    """Return the first value that is neither ``None`` nor the empty string."""
    for value in values:
        if value:
            return value
    return None


@dataclass(frozen=True, eq=False)
class Track:
    """A single track of the library.

    Example from ``Library.xml``::

        <key>2177</key>
        <dict>
            <key>Track ID</key><integer>2177</integer>
            <key>Name</key><string>Intro</string>
            <key>Persistent ID</key><string>2A1D94C0E8A1C3F0</string>
            ...
        </dict>
    """
    track_id: int
    persistent_id: Optional[str] = None

    # numbers
    year: Optional[int] = None
    track_number: Optional[int] = None
    track_count: Optional[int] = None
    disc_number: Optional[int] = None
    disc_count: Optional[int] = None
    total_time: Optional[int] = None  # milliseconds
    bit_rate: Optional[int] = None
    sample_rate: Optional[int] = None
    size: Optional[int] = None  # bytes
    rating: Optional[int] = None  # 0-100
    album_rating: Optional[int] = None
    bpm: Optional[int] = None
    start_time: Optional[int] = None
    stop_time: Optional[int] = None
    volume_adjustment: Optional[int] = None
    play_count: Optional[int] = None
    skip_count: Optional[int] = None
    artwork_count: Optional[int] = None
    file_folder_count: Optional[int] = None
    library_folder_count: Optional[int] = None
    play_date: Optional[int] = None  # legacy HFS timestamp

    # text
    name: Optional[str] = None
    sort_name: Optional[str] = None
    artist: Optional[str] = None
    sort_artist: Optional[str] = None
    album: Optional[str] = None
    sort_album: Optional[str] = None
    album_artist: Optional[str] = None
    sort_album_artist: Optional[str] = None
    composer: Optional[str] = None
    sort_composer: Optional[str] = None
    genre: Optional[str] = None
    kind: Optional[str] = None
    comments: Optional[str] = None
    equalizer: Optional[str] = None
    work: Optional[str] = None
    grouping: Optional[str] = None
    track_type: Optional[str] = None
    location: Optional[str] = None  # URI, e.g. file://localhost/...

    # flags
    compilation: Optional[bool] = None
    disabled: Optional[bool] = None
    loved: Optional[bool] = None
    disliked: Optional[bool] = None
    rating_computed: Optional[bool] = None
    album_rating_computed: Optional[bool] = None

    # dates
    date_added: Optional[datetime] = None
    date_modified: Optional[datetime] = None
    release_date: Optional[datetime] = None
    play_date_utc: Optional[datetime] = None
    skip_date: Optional[datetime] = None

    # Filled by track attachment only. Weak so that tracks never keep playlists alive.
    in_playlists: "weakref.WeakSet[Playlist]" = field(
        default_factory=weakref.WeakSet, repr=False
    )

    @property
    def effective_artist(self) -> Optional[str]:
        return first_non_empty(self.sort_album_artist, self.album_artist, self.sort_artist, self.artist)

    @property
    def effective_album(self) -> Optional[str]:
        return first_non_empty(self.sort_album, self.album)

    @property
    def effective_name(self) -> Optional[str]:
        return first_non_empty(self.sort_name, self.name)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Track):
            return NotImplemented
        if self.persistent_id is None or other.persistent_id is None:
            return False
        return self.persistent_id == other.persistent_id

    def __hash__(self):
        if self.persistent_id is None:
            return id(self)
        return hash(self.persistent_id)

    def __str__(self):
        details = [f"trackId={self.track_id}"]
        if self.persistent_id is not None:
            details.append(f"persistentId={self.persistent_id}")
        if self.location is not None:
            details.append(self.location)
        return (
            f"{self.artist if self.artist is not None else UNKNOWN_ARTIST}"
            f" - {self.name if self.name is not None else UNKNOWN_TITLE}"
            f" {{{', '.join(details)}}}"
        )


@dataclass(frozen=True, eq=False)
class Playlist:
    """A playlist or playlist folder.

    ``depth`` and ``ancestry`` are derived from ``parent`` on construction:
    the first entry of ``ancestry`` is a top-level playlist, the last entry is
    the playlist itself. ``children`` and ``tracks`` are filled while the
    library is assembled and sealed into tuples afterwards.
    """
    persistent_id: str
    name: Optional[str] = None
    playlist_id: Optional[int] = None
    distinguished_kind: Optional[int] = None
    parent_persistent_id: Optional[str] = None

    visible: Optional[bool] = None
    all_items: Optional[bool] = None
    folder: Optional[bool] = None
    master: Optional[bool] = None
    music: Optional[bool] = None
    movies: Optional[bool] = None
    tv_shows: Optional[bool] = None
    audiobooks: Optional[bool] = None

    track_ids: Tuple[int, ...] = ()
    parent: Optional["Playlist"] = field(default=None, repr=False)

    depth: int = field(init=False)
    ancestry: Tuple["Playlist", ...] = field(init=False, repr=False)
    children: Sequence["Playlist"] = field(init=False, repr=False)
    tracks: Sequence[Track] = field(init=False, repr=False)

    def __post_init__(self):
        if self.parent is None:
            object.__setattr__(self, "depth", 0)
            object.__setattr__(self, "ancestry", (self,))
        else:
            object.__setattr__(self, "depth", self.parent.depth + 1)
            object.__setattr__(self, "ancestry", self.parent.ancestry + (self,))
        object.__setattr__(self, "children", [])
        object.__setattr__(self, "tracks", [])

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def is_folder(self) -> bool:
        return bool(self.folder) or self.has_children

    @property
    def number_of_tracks(self) -> int:
        return len(self.tracks)

    @property
    def path(self) -> List[Optional[str]]:
        """Names of the ancestry, from the top-level playlist down to this one."""
        return [playlist.name for playlist in self.ancestry]

    def walk(self) -> Iterator["Playlist"]:
        """Yield this playlist and all of its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def _add_child(self, playlist: "Playlist") -> None:
        self.children.append(playlist)

    def _add_track(self, track: Track) -> None:
        self.tracks.append(track)
        track.in_playlists.add(self)

    def _seal(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "tracks", tuple(self.tracks))

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Playlist):
            return NotImplemented
        return self.persistent_id == other.persistent_id

    def __hash__(self):
        return hash(self.persistent_id)

    def __str__(self):
        return (
            f"{self.name} {{depth={self.depth}, #tracks={self.number_of_tracks}, "
            f"#children={len(self.children)}, persistentId={self.persistent_id}"
            f"{', parent=' + str(self.parent.name) if self.parent is not None else ''}}}"
        )


@dataclass(frozen=True)
class Library:
    """A parsed library snapshot."""
    major_version: Optional[int] = None
    minor_version: Optional[int] = None
    features: Optional[int] = None
    persistent_id: Optional[str] = None
    application_version: Optional[str] = None
    music_folder: Optional[str] = None
    date: Optional[datetime] = None
    tracks: Tuple[Track, ...] = field(default=(), repr=False)
    playlists: Tuple[Playlist, ...] = field(default=(), repr=False)
    playlists_at_top_level: Tuple[Playlist, ...] = field(default=(), repr=False)

    @property
    def tracks_by_id(self) -> Dict[int, Track]:
        return {track.track_id: track for track in self.tracks}

    def playlist_by_persistent_id(self, persistent_id: str) -> Optional[Playlist]:
        for playlist in self.playlists:
            if playlist.persistent_id == persistent_id:
                return playlist
        return None

    def __str__(self):
        return (
            f"Library {{persistentId={self.persistent_id}, "
            f"applicationVersion={self.application_version}, date={self.date}, "
            f"#tracks={len(self.tracks)}, #playlists={len(self.playlists)}, "
            f"#playlistsAtTopLevel={len(self.playlists_at_top_level)}}}"
        )
