"""Settings for parsing and for the tasks, loaded from a YAML file.

Example ``tunexport.yaml``::

    log_level: INFO
    parsing:
      library_file: ~/Music/iTunes/iTunes Music Library.xml
      ignore_playlists_by_name: [Voice Memos]
    tasks:
      generate_playlists:
        output_folder: ~/Playlists
        delete_folder: true
      export_files:
        output_folder: $HOME/Export
        to_root_folder: [Favourites]

Every key is optional and falls back to the default below.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from tunexport.exceptions import ConfigError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def expand_path(value: str) -> Path:
    """Expand ``~`` and environment variables in a path from the settings file."""
    return Path(os.path.expandvars(os.path.expanduser(value)))


@dataclass
class ParsingSettings:
    """Which parts of the library are read at all."""
    library_file: Optional[Path] = None
    ignore_empty_playlists: bool = True
    ignore_non_music_playlists: bool = True
    ignore_distinguished_playlists: bool = False
    ignore_master: bool = True
    ignore_playlists_by_name: List[str] = field(default_factory=list)


@dataclass
class ExportFilesSettings:
    output_folder: Optional[Path] = None
    delete_folder: bool = False
    hierarchical_names: bool = True
    only_actual_playlists: bool = True
    ignore_distinguished_playlists: bool = True
    ignore_playlists: List[str] = field(default_factory=list)
    # tracks of these playlists are copied into the output folder itself
    to_root_folder: List[str] = field(default_factory=list)
    folder_numbering: bool = True
    initial_number: int = 1
    pad_folder_numbers: bool = True
    track_numbering: bool = True
    pad_track_numbers: bool = True
    normalize: bool = True
    show_progress: bool = True


@dataclass
class GeneratePlaylistsSettings:
    output_folder: Optional[Path] = None
    delete_folder: bool = False
    organize_in_folders: bool = True
    hierarchical_names: bool = True
    only_actual_playlists: bool = False
    ignore_distinguished_playlists: bool = False
    ignore_playlists: List[str] = field(default_factory=list)
    playlist_extension: str = ".m3u8"
    use_relative_paths: bool = False
    warn_square_brackets: bool = True
    slash_as_separator: bool = False
    track_verification: bool = True


@dataclass
class PrintTracksSettings:
    ignore_playlists: List[str] = field(default_factory=list)


TASK_SECTIONS = {
    "export_files": ExportFilesSettings,
    "generate_playlists": GeneratePlaylistsSettings,
    "print_unlisted_tracks": PrintTracksSettings,
    "print_multiply_listed_tracks": PrintTracksSettings,
}


def _coerce(section: str, name: str, value: Any, annotation: Any) -> Any:
    where = f"{section}.{name}"
    if annotation is bool:
        if not isinstance(value, bool):
            raise ConfigError(f"{where} must be true or false, got {value!r}")
        return value
    if annotation is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{where} must be an integer, got {value!r}")
        return value
    if annotation is str:
        if not isinstance(value, str):
            raise ConfigError(f"{where} must be a string, got {value!r}")
        return value
    if annotation == Optional[Path]:
        if value is None:
            return None
        if not isinstance(value, (str, Path)):
            raise ConfigError(f"{where} must be a path, got {value!r}")
        return expand_path(str(value))
    if annotation == List[str]:
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ConfigError(f"{where} must be a list of strings, got {value!r}")
        return list(value)
    raise ConfigError(f"{where} has an unsupported type")


def _load_section(cls, section: str, data: Any):
    """Build a settings dataclass from one mapping of the YAML document."""
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ConfigError(f"Section {section} must be a mapping, got {type(data).__name__}")

    known = {f.name: f for f in fields(cls)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting {section}.{key}")
            continue
        values[key] = _coerce(section, key, value, known[key].type)
    return cls(**values)


def _dump_section(settings) -> Dict[str, Any]:
    data = {}
    for f in fields(settings):
        value = getattr(settings, f.name)
        if isinstance(value, Path):
            value = str(value)
        elif isinstance(value, list):
            value = list(value)
        data[f.name] = value
    return data


@dataclass
class Config:
    parsing: ParsingSettings = field(default_factory=ParsingSettings)
    export_files: ExportFilesSettings = field(default_factory=ExportFilesSettings)
    generate_playlists: GeneratePlaylistsSettings = field(default_factory=GeneratePlaylistsSettings)
    print_unlisted_tracks: PrintTracksSettings = field(default_factory=PrintTracksSettings)
    print_multiply_listed_tracks: PrintTracksSettings = field(default_factory=PrintTracksSettings)
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'Config':
        """Build a configuration from an already decoded YAML document."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(f"Expected a mapping at the root of the settings, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "parsing":
                values["parsing"] = _load_section(ParsingSettings, "parsing", value)
            elif key == "tasks":
                values.update(cls._load_tasks(value))
            elif key == "log_level":
                level = _coerce("config", "log_level", value, str).upper()
                if level not in LOG_LEVELS:
                    raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
                values["log_level"] = level
            else:
                logger.warning(f"Ignoring unknown setting {key}")
        return cls(**values)

    @staticmethod
    def _load_tasks(data: Any) -> Dict[str, Any]:
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"Section tasks must be a mapping, got {type(data).__name__}")
        tasks = {}
        for key, value in data.items():
            settings_class = TASK_SECTIONS.get(key)
            if settings_class is None:
                logger.warning(f"Ignoring settings for unknown task {key}")
                continue
            tasks[key] = _load_section(settings_class, f"tasks.{key}", value)
        return tasks

    @classmethod
    def load_config(cls, config_path: Path) -> 'Config':
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found at {config_path}")

        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file {config_path} is not valid YAML: {e}") from e

        logger.debug(f"Loaded config data from {config_path}: {config_data}")
        return cls.from_dict(config_data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "log_level": self.log_level,
            "parsing": _dump_section(self.parsing),
            "tasks": {name: _dump_section(getattr(self, name)) for name in TASK_SECTIONS},
        }

    def save_config(self, config_path: Path):
        """Save configuration to YAML file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False, allow_unicode=True)
        logger.info(f"Saved configuration to {config_path}")
