"""Helpers shared by the tasks."""

from tunexport.utils.paths import location_to_path, prepare_output_folder
from tunexport.utils.text import digits, file_name_component, normalize_ascii, pad_number

__all__ = [
    "digits",
    "file_name_component",
    "location_to_path",
    "normalize_ascii",
    "pad_number",
    "prepare_output_folder",
]
