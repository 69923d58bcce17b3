"""File locations of tracks and output folders of the tasks."""

import logging
import re
import shutil
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from tunexport.exceptions import ExportError

logger = logging.getLogger(__name__)

LOCAL_HOSTS = ("localhost", "")

# /C:/Users/... on Windows
_DRIVE_PREFIX = re.compile(r"^/[A-Za-z]:")


def location_to_path(location: Optional[str]) -> Optional[Path]:
    """Convert the ``Location`` URI of a track into a local path.

    Args:
        location: A URI such as ``file://localhost/Users/x/Music/a%20b.mp3``

    Returns:
        The decoded path, or ``None`` if the location is missing, malformed
        or not on this machine
    """
    if not location:
        return None
    try:
        uri = urlparse(location)
    except ValueError as e:
        logger.debug(f"Malformed location {location}: {e}")
        return None

    if uri.scheme != "file":
        logger.debug(f"Location {location} is not a file URI")
        return None
    if uri.netloc not in LOCAL_HOSTS:
        logger.debug(f"Location {location} is on remote host {uri.netloc}")
        return None
    if not uri.path:
        return None

    path = unquote(uri.path)
    if _DRIVE_PREFIX.match(path):
        path = path[1:]
    return Path(path)


def prepare_output_folder(folder: Path, delete: bool, setting: str = "delete_folder") -> Path:
    """Make sure ``folder`` exists and is empty.

    Args:
        folder: The output folder of a task
        delete: Whether an existing folder may be deleted
        setting: Name of the setting to mention in the error message

    Returns:
        The (new, empty) folder

    Raises:
        ExportError: If the folder exists and may not be deleted, or if
            deleting or creating it fails
    """
    folder = Path(folder)
    if folder.exists():
        if not delete:
            raise ExportError(
                f"The output folder {folder} already exists. Delete it or set {setting} to true."
            )
        logger.info(f"Folder {folder} exists and {setting} is set, deleting it")
        try:
            if folder.is_dir():
                shutil.rmtree(folder)
            else:
                folder.unlink()
        except OSError as e:
            raise ExportError(f"Deleting the folder {folder} failed: {e}") from e

    try:
        folder.mkdir(parents=True)
    except OSError as e:
        raise ExportError(f"Creating the folder {folder} failed: {e}") from e
    logger.debug(f"Created empty folder {folder}")
    return folder
