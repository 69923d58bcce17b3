"""Reports about a parsed library, printed with rich."""

import logging
from typing import Iterable, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from tunexport.config import PrintTracksSettings
from tunexport.library.models import Library, Playlist, Track
from tunexport.parsing.sorting import sort_playlists
from tunexport.tasks.common import display_name

logger = logging.getLogger(__name__)


def _is_system_playlist(playlist: Playlist, ignore_playlists: frozenset) -> bool:
    return (
        bool(playlist.master)
        or playlist.distinguished_kind is not None
        or (playlist.name is not None and playlist.name in ignore_playlists)
    )


def unlisted_tracks(library: Library, ignore_playlists: Iterable[str] = ()) -> List[Track]:
    """Tracks that are in no playlist except the master, distinguished or ignored ones."""
    ignore_playlists = frozenset(ignore_playlists)
    return [
        track for track in library.tracks
        if all(_is_system_playlist(playlist, ignore_playlists) for playlist in track.in_playlists)
    ]


def multiply_listed_tracks(
    library: Library, ignore_playlists: Iterable[str] = ()
) -> List[Tuple[Track, List[Playlist]]]:
    """Tracks that are in more than one actual playlist, with those playlists.

    Folders, the master playlist, distinguished playlists and the ignored
    playlists do not count.
    """
    ignore_playlists = frozenset(ignore_playlists)
    result = []
    for track in library.tracks:
        playlists = [
            playlist for playlist in track.in_playlists
            if not playlist.is_folder and not _is_system_playlist(playlist, ignore_playlists)
        ]
        if len(playlists) > 1:
            result.append((track, sort_playlists(playlists)))
    return result


def playlist_counts(library: Library) -> Tuple[int, int, int]:
    """Number of top-level playlists, folders and actual playlists."""
    folders = sum(1 for playlist in library.playlists if playlist.is_folder)
    return len(library.playlists_at_top_level), folders, len(library.playlists) - folders


def _track_table(title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Artist")
    table.add_column("Name")
    table.add_column("Album")
    return table


def _track_row(track: Track) -> List[str]:
    return [str(track.track_id), escape(track.artist or ""), escape(track.name or ""), escape(track.album or "")]


def print_library(library: Library, console: Optional[Console] = None):
    """Print the metadata of the library and the size of its collections."""
    console = console or Console()
    table = Table(title="Library")
    table.add_column("Field")
    table.add_column("Value")

    rows = [
        ("Persistent ID", library.persistent_id),
        ("Application Version", library.application_version),
        ("Version", f"{library.major_version}.{library.minor_version}"),
        ("Date", library.date),
        ("Music Folder", library.music_folder),
        ("Tracks", len(library.tracks)),
        ("Playlists", len(library.playlists)),
        ("Top-level playlists", len(library.playlists_at_top_level)),
    ]
    for field_name, value in rows:
        if value is not None:
            table.add_row(field_name, escape(str(value)))

    console.print(table)


def build_playlist_tree(library: Library) -> Tree:
    """All playlists as a tree, folders in bold."""
    tree = Tree("[bold]Playlists[/bold]")

    def add(node: Tree, playlist: Playlist):
        label = escape(display_name(playlist))
        if playlist.is_folder:
            branch = node.add(f"[bold]{label}[/bold]")
        else:
            branch = node.add(f"{label} ({playlist.number_of_tracks} tracks)")
        for child in playlist.children:
            add(branch, child)

    for playlist in library.playlists_at_top_level:
        add(tree, playlist)
    return tree


def print_playlists(library: Library, console: Optional[Console] = None):
    console = console or Console()
    top_level, folders, actual = playlist_counts(library)
    console.print(
        f"Library contains {len(library.playlists)} playlists: {top_level} at the top level, "
        f"{folders} folders, {actual} actual playlists"
    )
    console.print(build_playlist_tree(library))


def print_unlisted_tracks(
    library: Library,
    settings: Optional[PrintTracksSettings] = None,
    console: Optional[Console] = None,
) -> List[Track]:
    settings = settings or PrintTracksSettings()
    console = console or Console()
    tracks = unlisted_tracks(library, settings.ignore_playlists)

    console.print(f"{len(tracks)} of {len(library.tracks)} tracks are not in any playlist")
    if tracks:
        table = _track_table("Unlisted tracks")
        for track in tracks:
            table.add_row(*_track_row(track))
        console.print(table)
    return tracks


def print_multiply_listed_tracks(
    library: Library,
    settings: Optional[PrintTracksSettings] = None,
    console: Optional[Console] = None,
) -> List[Tuple[Track, List[Playlist]]]:
    settings = settings or PrintTracksSettings()
    console = console or Console()
    entries = multiply_listed_tracks(library, settings.ignore_playlists)

    console.print(f"{len(entries)} tracks are in more than one playlist")
    if entries:
        table = _track_table("Tracks in multiple playlists")
        table.add_column("Playlists")
        for track, playlists in entries:
            table.add_row(*_track_row(track), escape(", ".join(display_name(p) for p in playlists)))
        console.print(table)
    return entries
