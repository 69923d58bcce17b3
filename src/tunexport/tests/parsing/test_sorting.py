"""Tests for the track and playlist orderings."""

import random

import pytest

from tunexport.library.models import Playlist, Track
from tunexport.parsing.sorting import (
    EQUAL,
    compare_integers,
    compare_playlists,
    compare_strings,
    compare_tracks,
    has_album_context,
    lexicographic,
    sort_library_collections,
    sort_playlist_tracks,
    sort_playlists,
    sort_tracks,
)


def track(persistent_id, **values):
    return Track(track_id=len(persistent_id), persistent_id=persistent_id, **values)


def playlist(persistent_id, name=None, parent=None):
    result = Playlist(persistent_id=persistent_id, name=name, parent=parent)
    if parent is not None:
        parent._add_child(result)
    return result


def ids(items):
    return [item.persistent_id for item in items]


def test_compare_strings():
    assert compare_strings("a", "b") < 0
    assert compare_strings("b", "a") > 0
    assert compare_strings("Abba", "abba") == EQUAL
    assert compare_strings("beatles", "Blur") < 0
    assert compare_strings(None, None) == EQUAL
    assert compare_strings("z", None) < 0
    assert compare_strings(None, "a") > 0


def test_compare_integers():
    assert compare_integers(1, 2) < 0
    assert compare_integers(10, 2) > 0
    assert compare_integers(3, 3) == EQUAL
    assert compare_integers(None, 1) > 0
    assert compare_integers(1, None) < 0


def test_lexicographic_prefix_comes_first():
    compare = lexicographic(compare_integers)
    assert compare([1, 2], [1, 2, 0]) < 0
    assert compare([1, 3], [1, 2, 0]) > 0
    assert compare([], []) == EQUAL


@pytest.fixture
def tracks():
    return [
        track("A1", artist="Daft Punk", album="Homework", year=1997, track_number=7, name="Around the World"),
        track("A2", artist="Daft Punk", album="Discovery", year=2001, disc_number=1, track_number=1, name="One More Time"),
        track("A3", artist="Daft Punk", album="Discovery", year=2001, disc_number=1, track_number=2, name="Aerodynamic"),
        track("A4", artist="daft punk", album="Discovery", year=2001, disc_number=2, track_number=1, name="Bonus"),
        track("B1", artist="Air", album="Moon Safari", year=1998, track_number=1, name="La femme d'argent"),
        track("B2", artist="The Beatles", sort_artist="Beatles", name="Help!"),
        track("C1", name="No Artist"),
        track("C2", name="No Artist"),
        track("C3"),
    ]


def test_sort_tracks_order(tracks):
    assert ids(sort_tracks(tracks)) == ["B1", "B2", "A1", "A2", "A3", "A4", "C1", "C2", "C3"]


def test_sort_tracks_is_independent_of_input_order(tracks):
    expected = ids(sort_tracks(tracks))
    rng = random.Random(42)
    for _ in range(20):
        shuffled = list(tracks)
        rng.shuffle(shuffled)
        assert ids(sort_tracks(shuffled)) == expected
    assert ids(sort_tracks(sort_tracks(tracks))) == expected


def test_effective_fields_are_used():
    # the album artist wins over the track artist
    first = track("X", artist="Zed", album_artist="Various", album="Mix")
    second = track("Y", artist="Abe", album_artist="Various", album="Mix", track_number=1)
    assert compare_tracks(second, first) < 0
    assert ids(sort_tracks([first, second])) == ["Y", "X"]


def test_album_context():
    compilation = [
        track("K3", artist="Alpha", album="Hits", track_number=3),
        track("K1", artist="Zulu", album="Hits", track_number=1),
        track("K2", artist="Mike", album="hits", track_number=2),
    ]
    assert has_album_context(compilation)
    assert ids(sort_playlist_tracks(compilation)) == ["K1", "K2", "K3"]
    # without album context the artist decides
    assert ids(sort_tracks(compilation)) == ["K3", "K2", "K1"]


@pytest.mark.parametrize("albums", [
    [],
    ["Hits", "Other"],
    ["Hits", None],
    [None, None],
    ["", ""],
])
def test_no_album_context(albums):
    assert not has_album_context([track(f"T{i}", album=album) for i, album in enumerate(albums)])


def test_sort_playlist_tracks_keeps_duplicates():
    one = track("A", artist="A", album="X")
    two = track("B", artist="B", album="Y")
    assert ids(sort_playlist_tracks([two, one, two])) == ["A", "B", "B"]


def test_playlists_sorted_by_ancestry():
    electronic = playlist("F1", "Electronic")
    house = playlist("P1", "House", parent=electronic)
    ambient = playlist("P2", "Ambient", parent=electronic)
    rock = playlist("P3", "rock")
    jazz = playlist("P4", "Jazz")

    ordered = sort_playlists([house, rock, electronic, jazz, ambient])

    # leaves before folders, a folder right before its contents
    assert ids(ordered) == ["P4", "P3", "F1", "P2", "P1"]


def test_playlists_without_names_sort_last():
    named = playlist("B", "Name")
    nameless = playlist("A")
    assert compare_playlists(named, nameless) < 0
    assert ids(sort_playlists([nameless, named])) == ["B", "A"]


def test_sort_library_collections_in_place(tracks):
    folder = playlist("F", "Folder")
    child_b = playlist("CB", "B", parent=folder)
    child_a = playlist("CA", "A", parent=folder)
    for t in reversed(tracks):
        child_a._add_track(t)

    all_tracks = list(reversed(tracks))
    playlists = [child_b, child_a, folder]
    top_level = [folder]
    sort_library_collections(all_tracks, playlists, top_level)

    assert ids(all_tracks) == ids(sort_tracks(tracks))
    assert ids(playlists) == ["F", "CA", "CB"]
    assert ids(folder.children) == ["CA", "CB"]
    assert ids(child_a.tracks) == ids(sort_tracks(tracks))


@pytest.fixture
def forest():
    """Three levels, with siblings of the same name and playlists without names."""
    music = playlist("F1", "Music")
    house = playlist("F2", "House", parent=music)
    deep = playlist("P1", "Deep", parent=house)
    deep_again = playlist("P2", "Deep", parent=house)
    nameless_child = playlist("P3", parent=house)
    house_again = playlist("P4", "House", parent=music)
    techno = playlist("P5", "techno", parent=music)
    archive = playlist("F3", parent=None)
    old = playlist("P6", "Old", parent=archive)
    unnamed = playlist("P7")
    jazz = playlist("P8", "Jazz")
    return [music, house, deep, deep_again, nameless_child, house_again, techno, archive, old, unnamed, jazz]


def test_sort_playlists_order(forest):
    assert ids(sort_playlists(forest)) == [
        "P8", "P7", "F1", "P4", "P5", "F2", "P1", "P2", "P3", "F3", "P6",
    ]


def test_sort_playlists_is_independent_of_input_order(forest):
    expected = ids(sort_playlists(forest))
    rng = random.Random(7)
    for _ in range(20):
        shuffled = list(forest)
        rng.shuffle(shuffled)
        assert ids(sort_playlists(shuffled)) == expected
    assert ids(sort_playlists(sort_playlists(forest))) == expected
