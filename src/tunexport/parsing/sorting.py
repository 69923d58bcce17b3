"""Deterministic orderings for tracks and playlists.

All comparators return a negative number if the first argument comes first,
a positive number if the second one does, and 0 if they are tied. Missing
values (``None``) always sort after present ones.

Tracks are ordered by artist, year, album, disc number, track number, name
and finally persistent id. Playlists are ordered by comparing their
ancestries element by element, so folders stay together with their
descendants and a folder comes right before its contents.
"""

from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence, TypeVar

from tunexport.library.models import Playlist, Track

T = TypeVar("T")

EQUAL = 0
FIRST_HAS_PRIORITY = -1
SECOND_HAS_PRIORITY = 1


def compare_nulls(first, second) -> int:
    """Put present values before missing ones, 0 if both or neither are missing."""
    if first is None and second is None:
        return EQUAL
    if first is None:
        return SECOND_HAS_PRIORITY
    if second is None:
        return FIRST_HAS_PRIORITY
    return EQUAL


def compare_integers(first: Optional[int], second: Optional[int]) -> int:
    if first == second:
        return EQUAL
    result = compare_nulls(first, second)
    if result != EQUAL:
        return result
    return FIRST_HAS_PRIORITY if first < second else SECOND_HAS_PRIORITY


def compare_strings(first: Optional[str], second: Optional[str]) -> int:
    """Compare case-insensitively, missing strings last."""
    if first == second:
        return EQUAL
    result = compare_nulls(first, second)
    if result != EQUAL:
        return result
    first, second = first.casefold(), second.casefold()
    if first == second:
        return EQUAL
    return FIRST_HAS_PRIORITY if first < second else SECOND_HAS_PRIORITY


def chain(*comparators: Callable[[T, T], int]) -> Callable[[T, T], int]:
    """Combine comparators; the first one with a non-zero result decides."""
    def compare(first: T, second: T) -> int:
        for comparator in comparators:
            result = comparator(first, second)
            if result != EQUAL:
                return result
        return EQUAL
    return compare


def lexicographic(comparator: Callable[[T, T], int]) -> Callable[[Sequence[T], Sequence[T]], int]:
    """Lift a comparator on elements to sequences; a proper prefix comes first."""
    def compare(first: Sequence[T], second: Sequence[T]) -> int:
        for a, b in zip(first, second):
            result = comparator(a, b)
            if result != EQUAL:
                return result
        if len(first) < len(second):
            return FIRST_HAS_PRIORITY
        if len(first) > len(second):
            return SECOND_HAS_PRIORITY
        return EQUAL
    return compare


# Tracks

def compare_artist(first: Track, second: Track) -> int:
    return compare_strings(first.effective_artist, second.effective_artist)


def compare_year(first: Track, second: Track) -> int:
    return compare_integers(first.year, second.year)


def compare_album(first: Track, second: Track) -> int:
    return compare_strings(first.effective_album, second.effective_album)


def compare_disc_number(first: Track, second: Track) -> int:
    return compare_integers(first.disc_number, second.disc_number)


def compare_track_number(first: Track, second: Track) -> int:
    return compare_integers(first.track_number, second.track_number)


def compare_name(first: Track, second: Track) -> int:
    return compare_strings(first.effective_name, second.effective_name)


def compare_track_persistent_id(first: Track, second: Track) -> int:
    return compare_strings(first.persistent_id, second.persistent_id)


compare_tracks = chain(
    compare_artist,
    compare_year,
    compare_album,
    compare_disc_number,
    compare_track_number,
    compare_name,
    compare_track_persistent_id,
)

# Used inside a playlist that is a single album: keep the running order
# even when the artists differ from track to track (compilations).
compare_album_tracks = chain(
    compare_disc_number,
    compare_track_number,
    compare_name,
    compare_track_persistent_id,
)


def has_album_context(tracks: Sequence[Track]) -> bool:
    """Whether all tracks share one non-empty album, compared case-insensitively."""
    albums = set()
    for track in tracks:
        album = track.effective_album
        if album is None:
            return False
        albums.add(album.casefold())
        if len(albums) > 1:
            return False
    return len(albums) == 1


# Playlists

def compare_children_existence(first: Playlist, second: Playlist) -> int:
    """Playlists without children come before folders with children."""
    if first.has_children == second.has_children:
        return EQUAL
    return SECOND_HAS_PRIORITY if first.has_children else FIRST_HAS_PRIORITY


def compare_playlist_name(first: Playlist, second: Playlist) -> int:
    return compare_strings(first.name, second.name)


def compare_playlist_persistent_id(first: Playlist, second: Playlist) -> int:
    return compare_strings(first.persistent_id, second.persistent_id)


compare_playlists_basic = chain(
    compare_children_existence,
    compare_playlist_name,
    compare_playlist_persistent_id,
)

_compare_ancestries = lexicographic(compare_playlists_basic)


def compare_playlists(first: Playlist, second: Playlist) -> int:
    if first is second:
        return EQUAL
    return _compare_ancestries(first.ancestry, second.ancestry)


track_key = cmp_to_key(compare_tracks)
album_track_key = cmp_to_key(compare_album_tracks)
playlist_key = cmp_to_key(compare_playlists)


def sort_tracks(tracks: Sequence[Track]) -> List[Track]:
    return sorted(tracks, key=track_key)


def sort_playlist_tracks(tracks: Sequence[Track]) -> List[Track]:
    """Sort the tracks of one playlist, as an album if the playlist is one."""
    if has_album_context(tracks):
        return sorted(tracks, key=album_track_key)
    return sorted(tracks, key=track_key)


def sort_playlists(playlists: Sequence[Playlist]) -> List[Playlist]:
    return sorted(playlists, key=playlist_key)


def sort_library_collections(
    tracks: List[Track],
    playlists: List[Playlist],
    playlists_at_top_level: List[Playlist],
) -> None:
    """Sort the collections of a library under construction, in place.

    Children and tracks of every playlist are sorted first, since the
    playlist order depends on whether a playlist has children.
    """
    for playlist in playlists:
        playlist.tracks[:] = sort_playlist_tracks(playlist.tracks)
        playlist.children[:] = sort_playlists(playlist.children)

    tracks[:] = sort_tracks(tracks)
    playlists[:] = sort_playlists(playlists)
    playlists_at_top_level[:] = sort_playlists(playlists_at_top_level)
