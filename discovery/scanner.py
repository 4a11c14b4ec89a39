"""Project Discovery: scan the workspace root for sub-projects."""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from contracts import Project
from contracts.project_contracts import NUMERIC_PREFIX
from discovery.descriptor import read_project_descriptor
from config import settings

logger = logging.getLogger(__name__)


def project_sort_key(name: str) -> Tuple[int, int, str]:
    """Numbered names first by number, then the rest by name; ties by name."""
    match = NUMERIC_PREFIX.match(name)
    if match:
        return (0, int(match.group(1)), name)
    return (1, 0, name)


def _candidate_dirs(root: Path, ignored: Iterable[str]) -> List[Path]:
    ignored_names = set(ignored)
    candidates = []
    for entry in root.iterdir():
        if not entry.is_dir():
            continue
        if entry.name.startswith(".") or entry.name in ignored_names:
            continue
        candidates.append(entry)
    return candidates


def discover_projects(
    root: Optional[Path] = None,
    ignored_dirs: Optional[Iterable[str]] = None,
    config_filenames: Optional[Iterable[str]] = None,
    manifest_filename: Optional[str] = None,
) -> Tuple[Project, ...]:
    """Find every sub-project directly under ``root``.

    Args:
        root: Workspace root (defaults to settings)
        ignored_dirs: Child directory names never considered (defaults to settings,
            plus the configured shared output directory)
        config_filenames: Build-tool config names (defaults to settings)
        manifest_filename: Dependency manifest name (defaults to settings)

    Returns:
        Projects in deterministic order. Empty when nothing was recognized;
        the caller decides whether that is fatal.
    """
    root = Path(root or settings.get_workspace_path())
    if ignored_dirs is None:
        ignored_dirs = list(settings.ignored_dirs) + [Path(settings.output_dir).name]
    config_filenames = list(config_filenames or settings.config_filenames)

    found: List[Project] = []
    for directory in _candidate_dirs(root, ignored_dirs):
        project = read_project_descriptor(directory, config_filenames, manifest_filename)
        if project is not None:
            found.append(project)

    found.sort(key=lambda project: project_sort_key(project.name))

    owners: Dict[str, Project] = {}
    projects: List[Project] = []
    for project in found:
        owner = owners.get(project.base_path)
        if owner is not None:
            logger.warning("%s declares base path %s already owned by %s, skipping it",
                           project.name, project.base_path, owner.name)
            continue
        owners[project.base_path] = project
        projects.append(project)

    return tuple(projects)
