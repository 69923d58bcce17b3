"""Copy the audio files of every playlist into a folder of its own.

Folders are numbered in playlist order (``01 - Electronic - House``) and the
files inside them in track order (``001 - track.mp3``), so that devices that
sort by name play them in the order of the library.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from tunexport.config import ExportFilesSettings
from tunexport.exceptions import ExportError
from tunexport.library.models import Library, Playlist, Track
from tunexport.parsing.sorting import sort_tracks
from tunexport.tasks.common import display_name, hierarchical_name, select_playlists
from tunexport.utils import (
    file_name_component,
    location_to_path,
    normalize_ascii,
    pad_number,
    prepare_output_folder,
)

logger = logging.getLogger(__name__)

SETTINGS_PREFIX = "tasks.export_files"


@dataclass
class ExportResult:
    copied: List[Path] = field(default_factory=list)
    skipped: List[Track] = field(default_factory=list)
    folders: List[Path] = field(default_factory=list)


class FileExporter:
    """Exports playlists as folders containing their tracks as files."""

    def __init__(self, library: Library, settings: ExportFilesSettings, console: Optional[Console] = None):
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

    def run(self) -> ExportResult:
        """Export all playlists.

        Returns:
            The copied files, the skipped tracks and the created folders

        Raises:
            ExportError: If the output folder is in the way or copying fails
        """
        output_folder = prepare_output_folder(
            self.output_folder, self.settings.delete_folder, f"{SETTINGS_PREFIX}.delete_folder"
        )
        playlists = self.playlists_to_process()
        to_root = set(self.settings.to_root_folder)
        folder_playlists = [p for p in playlists if p.name not in to_root]

        # tracks of several playlists end up in one folder, keep each only once
        root_tracks = list(dict.fromkeys(
            track for p in playlists if p.name in to_root for track in p.tracks
        ))
        root_tracks = sort_tracks(root_tracks)

        total_tracks = sum(p.number_of_tracks for p in folder_playlists) + len(root_tracks)
        logger.info(f"Exporting {len(folder_playlists)} playlists with {total_tracks} tracks to {output_folder}")

        result = ExportResult()
        last_number = self.settings.initial_number + len(folder_playlists) - 1
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("({task.completed}/{task.total})"),
            console=self.console,
            disable=not self.settings.show_progress,
        ) as progress:
            task = progress.add_task("Exporting files...", total=total_tracks)

            for offset, playlist in enumerate(folder_playlists):
                name = self.folder_name(playlist, self.settings.initial_number + offset, last_number)
                destination = output_folder / name
                destination.mkdir(parents=True, exist_ok=True)
                result.folders.append(destination)
                progress.update(task, description=f"Exporting to {name}")
                self.copy_tracks(playlist.tracks, destination, result, progress, task)

            if root_tracks:
                progress.update(task, description=f"Exporting to {output_folder.name}")
                self.copy_tracks(root_tracks, output_folder, result, progress, task)

        self.console.print(
            f"Copied {len(result.copied)} files into {len(result.folders)} folders, "
            f"skipped {len(result.skipped)} tracks"
        )
        return result

    def folder_name(self, playlist: Playlist, number: int, last_number: int) -> str:
        name = ""
        if self.settings.folder_numbering:
            if self.settings.pad_folder_numbers:
                name += pad_number(number, last_number)
            else:
                name += str(number)
            name += " - "

        if self.settings.hierarchical_names:
            name += hierarchical_name(playlist)
        else:
            name += display_name(playlist)
        return self._clean(name)

    def file_name(self, source: Path, number: int, total: int) -> str:
        name = ""
        if self.settings.track_numbering:
            if self.settings.pad_track_numbers:
                name += pad_number(number, total)
            else:
                name += str(number)
            name += " - "
        name += source.name
        return self._clean(name)

    def _clean(self, name: str) -> str:
        if self.settings.normalize:
            name = normalize_ascii(name)
        return file_name_component(name)

    def copy_tracks(
        self,
        tracks: Sequence[Track],
        destination: Path,
        result: ExportResult,
        progress: Progress,
        task,
    ) -> None:
        for number, track in enumerate(tracks, start=1):
            progress.advance(task)
            source = location_to_path(track.location)
            if source is None:
                logger.warning(f"Track {track} has no local file location; skipping it")
                result.skipped.append(track)
                continue
            if not source.is_file():
                logger.warning(f"File for track {track} at {source} does not exist; skipping it")
                result.skipped.append(track)
                continue

            target = destination / self.file_name(source, number, len(tracks))
            try:
                shutil.copy2(source, target)
            except OSError as e:
                raise ExportError(f"Copying {source} to {target} failed: {e}") from e
            logger.debug(f"Copied {source} to {target}")
            result.copied.append(target)
