"""Test fixtures shared by all tunexport tests."""

import io
import plistlib
from datetime import datetime
from pathlib import Path
from typing import Dict
from urllib.parse import quote

import pytest
from rich.console import Console

from tunexport.config import ParsingSettings
from tunexport.library.models import Library
from tunexport.parsing.parser import LibraryParser

AUDIO_FILES = {
    1: "intro.mp3",
    2: "one more time.mp3",
    3: "Around the World.mp3",
    4: "teardrop.m4a",
}


def file_location(path: Path) -> str:
    """The ``Location`` iTunes writes for a local file."""
    return "file://localhost" + quote(str(path))


def items(*track_ids: int):
    return [{"Track ID": track_id} for track_id in track_ids]


@pytest.fixture
def music_dir(tmp_path) -> Path:
    """A folder with a (dummy) audio file for each located track."""
    folder = tmp_path / "music"
    folder.mkdir()
    for track_id, name in AUDIO_FILES.items():
        (folder / name).write_text(f"audio data of track {track_id}")
    return folder


@pytest.fixture
def library_document(music_dir) -> Dict:
    """A small decoded library.

    Playlists (with the default parsing settings):

        Music                      distinguished, all tracks
        Trip Hop                   teardrop, intro
        Electronic/                folder
            Classics               around the world
            French House           one more time, intro

    The master playlist is ignored. Track 5 has no file and is only in the
    master and the Music playlist. "French House" is listed before its folder.
    """
    def location(track_id):
        return file_location(music_dir / AUDIO_FILES[track_id])

    return {
        "Major Version": 1,
        "Minor Version": 1,
        "Application Version": "12.9.3.3",
        "Date": datetime(2023, 5, 1, 10, 30),
        "Features": 5,
        "Show Content Ratings": True,
        "Music Folder": "file://localhost/Users/test/Music/",
        "Library Persistent ID": "ABCDEF0123456789",
        "Tracks": {
            "1": {
                "Track ID": 1,
                "Persistent ID": "T1",
                "Name": "Intro",
                "Artist": "Daft Punk",
                "Album": "Discovery",
                "Year": 2001,
                "Disc Number": 1,
                "Track Number": 1,
                "Total Time": 54000,
                "Date Added": datetime(2020, 1, 1, 12, 0),
                "Location": location(1),
            },
            "2": {
                "Track ID": 2,
                "Persistent ID": "T2",
                "Name": "One More Time",
                "Artist": "Daft Punk",
                "Album": "Discovery",
                "Year": 2001,
                "Disc Number": 1,
                "Track Number": 2,
                "Loved": True,
                "Location": location(2),
            },
            "3": {
                "Track ID": 3,
                "Persistent ID": "T3",
                "Name": "Around the World",
                "Artist": "Daft Punk",
                "Album": "Homework",
                "Year": 1997,
                "Track Number": 7,
                "Location": location(3),
            },
            "4": {
                "Track ID": 4,
                "Persistent ID": "T4",
                "Name": "Teardrop",
                "Artist": "Massive Attack",
                "Album": "Mezzanine",
                "Year": 1998,
                "Track Number": 3,
                "Kind": "AAC audio file",
                "Location": location(4),
            },
            "5": {
                "Track ID": 5,
                "Persistent ID": "T5",
                "Name": "Untitled",
            },
        },
        "Playlists": [
            {
                "Name": "Library",
                "Master": True,
                "Playlist ID": 100,
                "Playlist Persistent ID": "MASTER",
                "Visible": False,
                "All Items": True,
                "Playlist Items": items(1, 2, 3, 4, 5),
            },
            {
                "Name": "Music",
                "Playlist ID": 101,
                "Playlist Persistent ID": "MUSIC",
                "Distinguished Kind": 4,
                "Music": True,
                "All Items": True,
                "Playlist Items": items(1, 2, 3, 4, 5),
            },
            {
                "Name": "French House",
                "Playlist ID": 104,
                "Playlist Persistent ID": "P1",
                "Parent Persistent ID": "F1",
                "All Items": True,
                "Playlist Items": items(2, 1),
            },
            {
                "Name": "Electronic",
                "Playlist ID": 102,
                "Playlist Persistent ID": "F1",
                "Folder": True,
                "All Items": True,
                "Playlist Items": items(1, 2, 3),
            },
            {
                "Name": "Classics",
                "Playlist ID": 105,
                "Playlist Persistent ID": "P2",
                "Parent Persistent ID": "F1",
                "All Items": True,
                "Smart Info": b"\x01\x00",
                "Smart Criteria": b"\x02\x00",
                "Playlist Items": items(3),
            },
            {
                "Name": "Trip Hop",
                "Playlist ID": 103,
                "Playlist Persistent ID": "P3",
                "All Items": True,
                "Playlist Items": items(4, 1),
            },
        ],
    }


@pytest.fixture
def library_file(tmp_path, library_document) -> Path:
    """The library document written as an XML property list."""
    path = tmp_path / "Library.xml"
    with open(path, "wb") as f:
        plistlib.dump(library_document, f)
    return path


@pytest.fixture
def parser() -> LibraryParser:
    return LibraryParser(ParsingSettings())


@pytest.fixture
def library(parser, library_document) -> Library:
    return parser.parse(library_document)


@pytest.fixture
def console() -> Console:
    """A console that records its output instead of printing it."""
    return Console(file=io.StringIO(), record=True, width=120)
