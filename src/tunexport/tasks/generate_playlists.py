"""Write one playlist file per playlist of the library.

Each line of a generated file is the path of one track, in the order of the
playlist. With ``organize_in_folders`` the files are placed in folders named
after the ancestors of the playlist, e.g.::

    output/
        Electronic/
            House/
                Electronic - House - Deep.m3u8
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from tunexport.config import GeneratePlaylistsSettings
from tunexport.exceptions import ExportError
from tunexport.library.models import Library, Playlist, Track
from tunexport.tasks.common import display_name, hierarchical_name, select_playlists
from tunexport.utils import file_name_component, location_to_path, prepare_output_folder

logger = logging.getLogger(__name__)

SETTINGS_PREFIX = "tasks.generate_playlists"


def windows_to_slashes(path: str) -> str:
    r"""Turn backslashes into slashes, except the one after a drive letter (``C:\``)."""
    if len(path) > 2 and path[1] == ":" and path[2] == "\\":
        return path[:3] + path[3:].replace("\\", "/")
    return path.replace("\\", "/")


class PlaylistFileGenerator:
    """Generates ``.m3u8`` (or other extension) files for the playlists of a library."""

    def __init__(self, library: Library, settings: GeneratePlaylistsSettings, console: Optional[Console] = None):
        self.library = library
        self.settings = settings
        self.console = console or Console()

    @property
    def output_folder(self) -> Path:
        if self.settings.output_folder is None:
            raise ExportError(f"No output folder specified, set {SETTINGS_PREFIX}.output_folder")
        return Path(self.settings.output_folder)

    def playlists_to_process(self) -> List[Playlist]:
        return select_playlists(
            self.library,
            only_actual_playlists=self.settings.only_actual_playlists,
            ignore_distinguished_playlists=self.settings.ignore_distinguished_playlists,
            ignore_playlists=self.settings.ignore_playlists,
        )

    def run(self) -> List[Path]:
        """Generate all playlist files.

        Returns:
            Paths of the files that were written
        """
        output_folder = prepare_output_folder(
            self.output_folder, self.settings.delete_folder, f"{SETTINGS_PREFIX}.delete_folder"
        )
        playlists = self.playlists_to_process()
        logger.info(f"Generating files for {len(playlists)} playlists in {output_folder}")

        written = []
        for playlist in playlists:
            destination = self.destination(playlist, output_folder)
            if self.write_playlist(playlist, destination):
                written.append(destination)

        self.console.print(f"Generated {len(written)} playlist files in {output_folder}")
        return written

    def destination(self, playlist: Playlist, output_folder: Path) -> Path:
        """Where the file for ``playlist`` goes."""
        folder = output_folder
        if self.settings.organize_in_folders:
            for ancestor in playlist.ancestry[:-1]:
                folder = folder / file_name_component(display_name(ancestor))

        if self.settings.hierarchical_names:
            name = hierarchical_name(playlist)
        else:
            name = display_name(playlist)
        return folder / (file_name_component(name) + self.settings.playlist_extension)

    def convert_track(self, track: Track, destination: Path) -> Optional[str]:
        """The line for ``track`` in the file at ``destination``, ``None`` to skip it."""
        path = location_to_path(track.location)
        if path is None:
            logger.warning(f"Track {track} has no local file location; skipping it")
            return None

        if self.settings.track_verification and not path.exists():
            logger.warning(f"File for track {track} at {path} does not exist; skipping it")
            return None

        line = str(path)
        if self.settings.use_relative_paths:
            try:
                line = os.path.relpath(path, destination.parent)
            except ValueError:
                # different drives, keep the absolute path
                pass

        if self.settings.warn_square_brackets and ("[" in line or "]" in line):
            logger.warning(f"Path {line} for track {track} contains '[' or ']'")

        if self.settings.slash_as_separator:
            line = windows_to_slashes(line)
        return line

    def write_playlist(self, playlist: Playlist, destination: Path) -> bool:
        """Write the file for one playlist; playlists without valid tracks are skipped."""
        lines = [line for line in (self.convert_track(track, destination) for track in playlist.tracks) if line]
        if not lines:
            logger.debug(f"Skipping playlist {playlist} with no valid tracks")
            return False

        logger.debug(f"Writing {destination}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as e:
            logger.error(f"Writing file {destination} failed: {e}")
            return False
        return True
