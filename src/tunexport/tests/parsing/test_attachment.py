"""Tests for attaching tracks to playlists."""

import gc

from tunexport.library.models import Playlist, Track
from tunexport.parsing.attachment import attach_tracks
from tunexport.parsing.diagnostics import DiagnosticCode, Diagnostics


def test_attach_tracks_in_document_order_with_duplicates():
    tracks = {i: Track(track_id=i, persistent_id=f"T{i}") for i in (1, 2, 3)}
    playlist = Playlist(persistent_id="P", name="Mix", track_ids=(3, 1, 3))
    other = Playlist(persistent_id="Q", name="Other", track_ids=(1,))

    attached = attach_tracks([playlist, other], tracks, Diagnostics())

    assert attached == 4
    assert [t.track_id for t in playlist.tracks] == [3, 1, 3]
    assert set(tracks[1].in_playlists) == {playlist, other}
    assert set(tracks[3].in_playlists) == {playlist}
    assert len(tracks[2].in_playlists) == 0


def test_missing_tracks_are_skipped():
    tracks = {1: Track(track_id=1, persistent_id="T1")}
    playlist = Playlist(persistent_id="P", name="Mix", track_ids=(1, 99))
    diagnostics = Diagnostics()

    attached = attach_tracks([playlist], tracks, diagnostics)

    assert attached == 1
    assert playlist.tracks == [tracks[1]]
    [record] = diagnostics.with_code(DiagnosticCode.MISSING_TRACK)
    assert record.context["track_id"] == 99
    assert "Mix" in record.entity


def test_in_playlists_does_not_keep_playlists_alive():
    track = Track(track_id=1, persistent_id="T1")
    playlist = Playlist(persistent_id="P", track_ids=(1,))
    attach_tracks([playlist], {1: track})
    assert len(track.in_playlists) == 1

    del playlist
    gc.collect()
    assert len(track.in_playlists) == 0
