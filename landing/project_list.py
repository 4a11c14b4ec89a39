"""Project list: the machine-readable index of merged projects."""

import json
from pathlib import Path
from typing import List, Sequence

from contracts import ConfigWriteError, Project, ProjectListEntry


def build_project_list(projects: Sequence[Project]) -> List[ProjectListEntry]:
    """One entry per project, in the given order."""
    return [
        ProjectListEntry(
            id=project.name,
            display_name=project.display_name,
            route=project.base_path_no_slash or "/",
        )
        for project in projects
    ]


def write_project_list(projects: Sequence[Project], path: Path) -> Path:
    """Write ``projects.json``.

    Raises:
        ConfigWriteError: The file could not be written
    """
    path = Path(path)
    entries = [entry.model_dump(by_alias=True) for entry in build_project_list(projects)]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(entries, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigWriteError(path, str(e)) from e
    return path
