"""Field tables mapping the keys of the library document to builder attributes.

Each entry names the value kind the key must carry and the builder attribute
it fills. Entries without an attribute are known keys that are handled by a
dedicated sub-parser (or deliberately dropped), so they are neither applied
nor reported as unknown.

Example of a playlist dictionary in ``Library.xml``::

    <dict>
        <key>Playlist ID</key><integer>53074</integer>
        <key>Playlist Persistent ID</key><string>1CBCD3C1D85440D2</string>
        <key>All Items</key><true/>
        <key>Name</key><string>VOICE</string>
        <key>Playlist Items</key>
        <array>
            <dict><key>Track ID</key><integer>15197</integer></dict>
        </array>
    </dict>
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from tunexport.parsing.builders import EntityBuilder, LibraryBuilder, PlaylistBuilder, TrackBuilder
from tunexport.parsing.diagnostics import DiagnosticCode, Diagnostics
from tunexport.parsing.values import ValueKind, kind_of, short_repr


@dataclass(frozen=True)
class FieldHandler:
    """How to apply one document key to a builder."""
    expected: Optional[ValueKind]
    attribute: Optional[str] = None

    @property
    def is_noop(self) -> bool:
        return self.attribute is None

    def apply(self, builder: EntityBuilder, value: Any) -> bool:
        """Set the value on the builder if its kind matches; return whether it was set."""
        if self.is_noop:
            return True
        if kind_of(value) != self.expected:
            return False
        builder.set(self.attribute, value)
        return True


def _string(attribute: str) -> FieldHandler:
    return FieldHandler(ValueKind.STRING, attribute)


def _integer(attribute: str) -> FieldHandler:
    return FieldHandler(ValueKind.INTEGER, attribute)


def _boolean(attribute: str) -> FieldHandler:
    return FieldHandler(ValueKind.BOOLEAN, attribute)


def _date(attribute: str) -> FieldHandler:
    return FieldHandler(ValueKind.DATE, attribute)


NOOP = FieldHandler(None)


TRACK_FIELDS: Dict[str, FieldHandler] = {
    "Track ID": _integer("track_id"),
    "Persistent ID": _string("persistent_id"),

    "Year": _integer("year"),
    "Track Number": _integer("track_number"),
    "Track Count": _integer("track_count"),
    "Disc Number": _integer("disc_number"),
    "Disc Count": _integer("disc_count"),
    "Total Time": _integer("total_time"),
    "Bit Rate": _integer("bit_rate"),
    "Sample Rate": _integer("sample_rate"),
    "Size": _integer("size"),
    "Rating": _integer("rating"),
    "Album Rating": _integer("album_rating"),
    "BPM": _integer("bpm"),
    "Start Time": _integer("start_time"),
    "Stop Time": _integer("stop_time"),
    "Volume Adjustment": _integer("volume_adjustment"),
    "Play Count": _integer("play_count"),
    "Skip Count": _integer("skip_count"),
    "Artwork Count": _integer("artwork_count"),
    "File Folder Count": _integer("file_folder_count"),
    "Library Folder Count": _integer("library_folder_count"),
    "Play Date": _integer("play_date"),

    "Name": _string("name"),
    "Sort Name": _string("sort_name"),
    "Artist": _string("artist"),
    "Sort Artist": _string("sort_artist"),
    "Album": _string("album"),
    "Sort Album": _string("sort_album"),
    "Album Artist": _string("album_artist"),
    "Sort Album Artist": _string("sort_album_artist"),
    "Composer": _string("composer"),
    "Sort Composer": _string("sort_composer"),
    "Genre": _string("genre"),
    "Kind": _string("kind"),
    "Comments": _string("comments"),
    "Equalizer": _string("equalizer"),
    "Work": _string("work"),
    "Grouping": _string("grouping"),
    "Track Type": _string("track_type"),
    "Location": _string("location"),

    "Compilation": _boolean("compilation"),
    "Disabled": _boolean("disabled"),
    "Loved": _boolean("loved"),
    "Disliked": _boolean("disliked"),
    "Rating Computed": _boolean("rating_computed"),
    "Album Rating Computed": _boolean("album_rating_computed"),

    "Date Added": _date("date_added"),
    "Date Modified": _date("date_modified"),
    "Release Date": _date("release_date"),
    "Play Date UTC": _date("play_date_utc"),
    "Skip Date": _date("skip_date"),
}

PLAYLIST_FIELDS: Dict[str, FieldHandler] = {
    "Playlist ID": _integer("playlist_id"),
    "Playlist Persistent ID": _string("persistent_id"),
    "Parent Persistent ID": _string("parent_persistent_id"),
    "Name": _string("name"),
    "Distinguished Kind": _integer("distinguished_kind"),

    "Visible": _boolean("visible"),
    "All Items": _boolean("all_items"),
    "Folder": _boolean("folder"),
    "Master": _boolean("master"),
    "Music": _boolean("music"),
    "Movies": _boolean("movies"),
    "TV Shows": _boolean("tv_shows"),
    "Audiobooks": _boolean("audiobooks"),

    # raw smart playlist rules, we cannot interpret them
    "Smart Info": NOOP,
    "Smart Criteria": NOOP,
    # parsed by LibraryParser._parse_playlist_items
    "Playlist Items": NOOP,
}

LIBRARY_FIELDS: Dict[str, FieldHandler] = {
    "Major Version": _integer("major_version"),
    "Minor Version": _integer("minor_version"),
    "Features": _integer("features"),
    "Application Version": _string("application_version"),
    "Library Persistent ID": _string("persistent_id"),
    "Music Folder": _string("music_folder"),
    "Date": _date("date"),

    # parsed by LibraryParser._parse_tracks / _parse_playlists
    "Tracks": NOOP,
    "Playlists": NOOP,
}

FIELD_TABLES: Dict[type, Dict[str, FieldHandler]] = {
    TrackBuilder: TRACK_FIELDS,
    PlaylistBuilder: PLAYLIST_FIELDS,
    LibraryBuilder: LIBRARY_FIELDS,
}


def dispatch(table: Mapping[str, FieldHandler], field_name: str) -> Optional[FieldHandler]:
    """Look up the handler for a document key, ``None`` if the key is unknown."""
    return table.get(field_name)


def apply_fields(
    builder: EntityBuilder,
    dictionary: Mapping[str, Any],
    diagnostics: Diagnostics,
    entity: Optional[str] = None,
    table: Optional[Mapping[str, FieldHandler]] = None,
) -> int:
    """Apply every key of ``dictionary`` to ``builder`` through its field table.

    Unknown keys and values of the wrong kind are reported and skipped.

    Args:
        builder: The builder to fill
        dictionary: One decoded dictionary of the library document
        diagnostics: Where problems are recorded
        entity: Label of the entity for diagnostics, e.g. ``"track 2177"``
        table: Field table to use, defaults to the table for the builder's type

    Returns:
        Number of fields that were set
    """
    if table is None:
        table = FIELD_TABLES[type(builder)]
    label = entity or type(builder).__name__
    applied = 0

    for key, value in dictionary.items():
        handler = dispatch(table, key)
        if handler is None:
            diagnostics.debug(
                DiagnosticCode.UNKNOWN_FIELD,
                f"no handler for key \"{key}\" with value {short_repr(value)}",
                entity=label,
                field=key,
            )
            continue

        if handler.apply(builder, value):
            if not handler.is_noop:
                applied += 1
            continue

        actual = kind_of(value)
        diagnostics.warning(
            DiagnosticCode.UNEXPECTED_TYPE,
            f"key \"{key}\" with value {short_repr(value)} is of unexpected type "
            f"{actual.value}, expected {handler.expected.value}; ignoring it",
            entity=label,
            field=key,
            expected=handler.expected,
            actual=actual,
        )

    return applied
