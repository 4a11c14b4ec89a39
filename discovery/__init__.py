"""Discovery module: which workspace directories are buildable sub-projects."""

from .descriptor import extract_base_path, find_config_file, read_project_descriptor
from .scanner import discover_projects, project_sort_key

__all__ = [
    "extract_base_path",
    "find_config_file",
    "read_project_descriptor",
    "discover_projects",
    "project_sort_key",
]
