"""Tests for loading and saving settings."""

import logging
from pathlib import Path

import pytest
import yaml

from tunexport.config import (
    Config,
    ExportFilesSettings,
    GeneratePlaylistsSettings,
    ParsingSettings,
    expand_path,
)
from tunexport.exceptions import ConfigError


@pytest.fixture
def config_file(tmp_path):
    def write(content: str) -> Path:
        path = tmp_path / "tunexport.yaml"
        path.write_text(content)
        return path
    return write


def test_defaults():
    config = Config()

    assert config.log_level == "WARNING"
    assert config.parsing == ParsingSettings()
    assert config.parsing.ignore_empty_playlists
    assert config.parsing.ignore_non_music_playlists
    assert not config.parsing.ignore_distinguished_playlists
    assert config.parsing.ignore_master
    assert config.generate_playlists.playlist_extension == ".m3u8"
    assert config.export_files.initial_number == 1
    assert config.print_unlisted_tracks.ignore_playlists == []


def test_load_config(config_file, tmp_path):
    path = config_file(f"""
log_level: info
parsing:
  library_file: {tmp_path}/Library.xml
  ignore_master: false
  ignore_playlists_by_name:
    - Voice Memos
tasks:
  generate_playlists:
    output_folder: {tmp_path}/playlists
    use_relative_paths: true
  export_files:
    to_root_folder: [Favourites]
    initial_number: 10
  print_unlisted_tracks:
    ignore_playlists: [Downloaded]
""")
    config = Config.load_config(path)

    assert config.log_level == "INFO"
    assert config.parsing.library_file == tmp_path / "Library.xml"
    assert not config.parsing.ignore_master
    assert config.parsing.ignore_empty_playlists
    assert config.parsing.ignore_playlists_by_name == ["Voice Memos"]
    assert config.generate_playlists.output_folder == tmp_path / "playlists"
    assert config.generate_playlists.use_relative_paths
    assert config.export_files.to_root_folder == ["Favourites"]
    assert config.export_files.initial_number == 10
    assert config.print_unlisted_tracks.ignore_playlists == ["Downloaded"]
    assert config.print_multiply_listed_tracks.ignore_playlists == []


def test_paths_are_expanded(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("EXPORT_ROOT", "/data/export")

    assert expand_path("~/Music/Library.xml") == tmp_path / "Music" / "Library.xml"
    assert expand_path("$EXPORT_ROOT/files") == Path("/data/export/files")

    config = Config.from_dict({"tasks": {"export_files": {"output_folder": "$EXPORT_ROOT/files"}}})
    assert config.export_files.output_folder == Path("/data/export/files")


def test_empty_file_gives_defaults(config_file):
    assert Config.load_config(config_file("")) == Config()


def test_unknown_keys_are_reported(config_file, caplog):
    path = config_file("""
colour: blue
parsing:
  ignore_everything: true
tasks:
  burn_cd: {}
""")
    with caplog.at_level(logging.WARNING, logger="tunexport.config"):
        config = Config.load_config(path)

    assert config == Config()
    text = caplog.text
    assert "colour" in text
    assert "parsing.ignore_everything" in text
    assert "burn_cd" in text


@pytest.mark.parametrize("content", [
    "parsing: [1, 2]",
    "parsing:\n  ignore_master: 'yes please'",
    "parsing:\n  ignore_playlists_by_name: Voice Memos",
    "tasks:\n  export_files:\n    initial_number: true",
    "tasks:\n  generate_playlists:\n    playlist_extension: 3",
    "log_level: LOUD",
    "- just\n- a list",
])
def test_invalid_values(config_file, content):
    with pytest.raises(ConfigError):
        Config.load_config(config_file(content))


def test_invalid_yaml(config_file):
    with pytest.raises(ConfigError):
        Config.load_config(config_file("parsing: [unclosed"))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        Config.load_config(tmp_path / "missing.yaml")


def test_save_and_load(tmp_path):
    config = Config(
        parsing=ParsingSettings(library_file=tmp_path / "Library.xml", ignore_playlists_by_name=["Podcasts"]),
        export_files=ExportFilesSettings(output_folder=tmp_path / "export", normalize=False),
        generate_playlists=GeneratePlaylistsSettings(slash_as_separator=True),
        log_level="DEBUG",
    )
    path = tmp_path / "settings" / "tunexport.yaml"
    config.save_config(path)

    data = yaml.safe_load(path.read_text())
    assert data["parsing"]["library_file"] == str(tmp_path / "Library.xml")
    assert data["tasks"]["export_files"]["normalize"] is False
    assert Config.load_config(path) == config
