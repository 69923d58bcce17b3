"""Playlist selection and naming shared by the tasks."""

from typing import Iterable, List

from tunexport.library.models import Library, Playlist

HIERARCHY_SEPARATOR = " - "


def display_name(playlist: Playlist) -> str:
    """The playlist name, or its persistent id for unnamed playlists."""
    return playlist.name if playlist.name is not None else playlist.persistent_id


def hierarchical_name(playlist: Playlist, separator: str = HIERARCHY_SEPARATOR) -> str:
    """Names of the ancestry joined, e.g. ``Electronic - House - Deep``."""
    return separator.join(display_name(ancestor) for ancestor in playlist.ancestry)


def is_ignored(
    playlist: Playlist,
    only_actual_playlists: bool = False,
    ignore_distinguished_playlists: bool = False,
    ignore_playlists: Iterable[str] = (),
) -> bool:
    if ignore_distinguished_playlists and playlist.distinguished_kind is not None:
        return True
    if only_actual_playlists and playlist.is_folder:
        return True
    return playlist.name is not None and playlist.name in ignore_playlists


def select_playlists(
    library: Library,
    only_actual_playlists: bool = False,
    ignore_distinguished_playlists: bool = False,
    ignore_playlists: Iterable[str] = (),
) -> List[Playlist]:
    """Playlists of the library a task should process, in library order."""
    ignore_playlists = frozenset(ignore_playlists)
    return [
        playlist for playlist in library.playlists
        if not is_ignored(playlist, only_actual_playlists, ignore_distinguished_playlists, ignore_playlists)
    ]
