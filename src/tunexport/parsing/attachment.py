"""Attach tracks to resolved playlists."""

import logging
from typing import Iterable, Mapping, Optional

from tunexport.library.models import Playlist, Track
from tunexport.parsing.diagnostics import DiagnosticCode, Diagnostics

logger = logging.getLogger(__name__)


def attach_tracks(
    playlists: Iterable[Playlist],
    tracks_by_id: Mapping[int, Track],
    diagnostics: Optional[Diagnostics] = None,
) -> int:
    """Resolve the ``track_ids`` of every playlist into tracks.

    Tracks are appended in document order and duplicates are kept. Each
    playlist is also recorded in the ``in_playlists`` set of its tracks.
    Ids without a matching track are reported and skipped.

    Args:
        playlists: Resolved playlists, not yet sealed
        tracks_by_id: All parsed tracks by ``Track ID``
        diagnostics: Where missing tracks are recorded

    Returns:
        Number of tracks attached over all playlists
    """
    if diagnostics is None:
        diagnostics = Diagnostics(logger)
    attached = 0

    for playlist in playlists:
        for track_id in playlist.track_ids:
            track = tracks_by_id.get(track_id)
            if track is None:
                diagnostics.warning(
                    DiagnosticCode.MISSING_TRACK,
                    f"references track {track_id}, which does not exist; skipping it",
                    entity=f"playlist {playlist.name} {{persistentId={playlist.persistent_id}}}",
                    track_id=track_id,
                )
                continue
            playlist._add_track(track)
            attached += 1

    return attached
