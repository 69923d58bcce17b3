"""Turn a decoded ``Library.xml`` property list into a :class:`Library`.

The parser proceeds as follows:

1. Read the metadata of the library (all root keys except ``Tracks`` and
   ``Playlists``) into a :class:`LibraryBuilder`.
2. Build one :class:`Track` per entry of the ``Tracks`` dictionary.
3. Collect one :class:`PlaylistBuilder` per entry of the ``Playlists``
   array, including the ``Track ID`` references of its items.
4. Resolve the parent/child relations among the playlists, building each
   playlist after its parent.
5. Attach the referenced tracks to the playlists.
6. Sort tracks and playlists, then freeze everything into the library.

Only a document that is not a library at all raises
:class:`LibraryParsingError`; problems with single entries are recorded in
:attr:`LibraryParser.diagnostics` and the entry is skipped.
"""

import logging
import plistlib
from pathlib import Path
from typing import Any, Mapping, Optional, Union
from xml.parsers.expat import ExpatError

from tunexport.config import ParsingSettings
from tunexport.exceptions import LibraryParsingError
from tunexport.library.models import Library
from tunexport.parsing.attachment import attach_tracks
from tunexport.parsing.builders import LibraryBuilder, PlaylistBuilder, TrackBuilder
from tunexport.parsing.diagnostics import DiagnosticCode, Diagnostics
from tunexport.parsing.keys import LIBRARY_FIELDS, PLAYLIST_FIELDS, TRACK_FIELDS, apply_fields
from tunexport.parsing.resolver import IgnorePolicy, PlaylistResolver, ResolutionResult
from tunexport.parsing.sorting import sort_library_collections
from tunexport.parsing.values import ValueKind, kind_of, short_repr

logger = logging.getLogger(__name__)

TRACKS_KEY = "Tracks"
PLAYLISTS_KEY = "Playlists"
PLAYLIST_ITEMS_KEY = "Playlist Items"
TRACK_ID_KEY = "Track ID"


class LibraryParser:
    """Parses library documents into :class:`Library` graphs.

    A parser can be used for several documents; the diagnostics of the
    previous run are cleared at the start of every :meth:`parse`.
    """

    def __init__(self, settings: Optional[ParsingSettings] = None, logger: Optional[logging.Logger] = None):
        self.settings = settings or ParsingSettings()
        self.logger = logger or logging.getLogger(__name__)
        self.diagnostics = Diagnostics(self.logger)
        self.resolution: Optional[ResolutionResult] = None

    def parse_file(self, path: Union[str, Path]) -> Library:
        """Decode an XML or binary property list file and parse it.

        Args:
            path: Path of the library file, e.g. ``iTunes Music Library.xml``

        Returns:
            The parsed library

        Raises:
            LibraryParsingError: If the file cannot be read or decoded
        """
        path = Path(path)
        self.logger.info(f"Reading library file {path}")
        try:
            with open(path, "rb") as f:
                document = plistlib.load(f)
        except OSError as e:
            raise LibraryParsingError(f"Cannot read library file {path}: {e}") from e
        except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
            raise LibraryParsingError(f"Parsing {path} as a property list has failed: {e}") from e
        return self.parse(document)

    def parse(self, document: Any) -> Library:
        """Parse an already decoded property list.

        Args:
            document: The root object as returned by ``plistlib``

        Returns:
            The parsed, sorted and sealed library

        Raises:
            LibraryParsingError: If the document does not have the shape of a library
        """
        self.diagnostics.clear()
        if not isinstance(document, Mapping):
            raise LibraryParsingError(
                f"Expected a dictionary at the root of the library, got {kind_of(document).value} instead"
            )

        library_builder = LibraryBuilder()
        apply_fields(library_builder, document, self.diagnostics, entity="library", table=LIBRARY_FIELDS)

        self._parse_tracks(library_builder, document)
        self._parse_playlists(library_builder, document)

        resolver = PlaylistResolver(IgnorePolicy.from_settings(self.settings), self.diagnostics)
        self.resolution = resolver.resolve(library_builder.playlist_builders)

        attach_tracks(self.resolution.playlists, library_builder.tracks_by_id, self.diagnostics)

        tracks = list(library_builder.tracks)
        playlists = list(self.resolution.playlists)
        top_level = list(self.resolution.top_level)
        sort_library_collections(tracks, playlists, top_level)

        library = library_builder.build(tracks, playlists, top_level)
        self.logger.info(f"Parsed {library}")
        return library

    def _parse_tracks(self, library_builder: LibraryBuilder, document: Mapping[str, Any]) -> None:
        """Parse the ``Tracks`` dictionary.

        Each entry has the shape::

            <key>2177</key>
            <dict>
                <key>Track ID</key><integer>2177</integer>
                ...
            </dict>
        """
        tracks = document.get(TRACKS_KEY)
        if tracks is None:
            self.diagnostics.debug(DiagnosticCode.MISSING_SECTION, "library has no Tracks dictionary",
                                   entity="library", section=TRACKS_KEY)
            return
        if not isinstance(tracks, Mapping):
            raise LibraryParsingError(
                f"Tracks must be a dictionary, got {kind_of(tracks).value} instead"
            )

        for key, entry in tracks.items():
            if not (isinstance(key, str) and key.isascii() and key.isdigit()):
                self.diagnostics.warning(
                    DiagnosticCode.INVALID_TRACK_KEY,
                    f"key {key!r} of the Tracks dictionary is not an integer; skipping its track",
                    entity="library",
                    key=key,
                )
                continue
            outer_id = int(key)

            entity = f"track {outer_id}"
            if not isinstance(entry, Mapping):
                self.diagnostics.warning(
                    DiagnosticCode.INVALID_ENTRY,
                    f"entry is of unexpected type {kind_of(entry).value}, expected a dictionary; skipping it",
                    entity=entity,
                )
                continue

            builder = TrackBuilder()
            apply_fields(builder, entry, self.diagnostics, entity=entity, table=TRACK_FIELDS)

            if builder.track_id != outer_id:
                self.diagnostics.warning(
                    DiagnosticCode.TRACK_ID_MISMATCH,
                    f"is stored under key {outer_id} but has Track ID {builder.track_id}; skipping it",
                    entity=entity,
                    key=outer_id,
                    track_id=builder.track_id,
                )
                continue

            existing = library_builder.tracks_by_id.get(outer_id)
            if existing is not None:
                self.diagnostics.warning(
                    DiagnosticCode.DUPLICATE_TRACK,
                    f"library already contains a track with this id ({existing}); skipping {builder}",
                    entity=entity,
                )
                continue

            library_builder.add_track(builder.build())

        self.logger.debug(f"Parsed {len(library_builder.tracks)} tracks")

    def _parse_playlists(self, library_builder: LibraryBuilder, document: Mapping[str, Any]) -> None:
        playlists = document.get(PLAYLISTS_KEY)
        if playlists is None:
            self.diagnostics.debug(DiagnosticCode.MISSING_SECTION, "library has no Playlists array",
                                   entity="library", section=PLAYLISTS_KEY)
            return
        if not isinstance(playlists, (list, tuple)):
            raise LibraryParsingError(
                f"Playlists must be an array, got {kind_of(playlists).value} instead"
            )

        for index, entry in enumerate(playlists):
            if not isinstance(entry, Mapping):
                self.diagnostics.warning(
                    DiagnosticCode.INVALID_ENTRY,
                    f"entry is of unexpected type {kind_of(entry).value}, expected a dictionary; skipping it",
                    entity=f"playlist #{index}",
                )
                continue

            builder = PlaylistBuilder()
            entity = f"playlist #{index}"
            apply_fields(builder, entry, self.diagnostics, entity=entity, table=PLAYLIST_FIELDS)
            if builder.name is not None:
                entity = f"playlist #{index} ({builder.name})"
            self._parse_playlist_items(builder, entry.get(PLAYLIST_ITEMS_KEY), entity)

            if builder.persistent_id is None:
                self.diagnostics.warning(
                    DiagnosticCode.MISSING_PERSISTENT_ID,
                    "has no Playlist Persistent ID; skipping it",
                    entity=entity,
                )
                continue

            existing = library_builder.playlist_builders_by_id.get(builder.persistent_id)
            if existing is not None:
                self.diagnostics.warning(
                    DiagnosticCode.DUPLICATE_PLAYLIST,
                    f"library already contains a playlist with Persistent ID {builder.persistent_id} "
                    f"({existing}); skipping it",
                    entity=entity,
                    persistent_id=builder.persistent_id,
                )
                continue

            library_builder.add_playlist_builder(builder)

        self.logger.debug(f"Parsed {len(library_builder.playlist_builders)} playlists")

    def _parse_playlist_items(self, builder: PlaylistBuilder, items: Any, entity: str) -> None:
        """Collect the track ids of ``Playlist Items``.

        Every item is a dictionary with the single key ``Track ID``::

            <dict><key>Track ID</key><integer>9171</integer></dict>
        """
        if items is None:
            return
        if not isinstance(items, (list, tuple)):
            self.diagnostics.warning(
                DiagnosticCode.MALFORMED_PLAYLIST_ITEM,
                f"Playlist Items is of unexpected type {kind_of(items).value}, expected an array; skipping it",
                entity=entity,
            )
            return

        for item in items:
            track_id = item.get(TRACK_ID_KEY) if isinstance(item, Mapping) and len(item) == 1 else None
            if kind_of(track_id) is ValueKind.INTEGER:
                builder.add_track_id(track_id)
                continue
            self.diagnostics.warning(
                DiagnosticCode.MALFORMED_PLAYLIST_ITEM,
                f"item {short_repr(item)} is not of the form {{Track ID: <integer>}}; skipping it",
                entity=entity,
            )
