"""Artifact Merger: move one project's build output into the shared tree.

The destination subtree is derived from the project's base path
(``/course/lesson-3/`` -> ``<output>/course/lesson-3``). Whatever was there
before is replaced as a whole: the new output is staged next to the
destination first and then renamed into place, so a reader of the shared
tree sees either the old subtree or the new one.
"""

import logging
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Optional

from contracts import ConfigWriteError, MergeError, MissingBuildOutputError, Project
from config import settings

logger = logging.getLogger(__name__)

# One merge at a time across the process
_merge_lock = threading.Lock()


def destination_for(output_root: Path, base_path: str) -> Path:
    """Location of a base path's subtree inside the shared output tree."""
    segments = [segment for segment in base_path.split("/") if segment]
    return Path(output_root).joinpath(*segments)


def has_build_output(build_output: Path) -> bool:
    """True when ``build_output`` is a directory with at least one entry."""
    return build_output.is_dir() and any(build_output.iterdir())


def merge_project(
    project: Project,
    output_root: Path,
    build_dir: Optional[str] = None,
) -> Path:
    """Replace the project's subtree in ``output_root`` with its build output.

    Args:
        project: A successfully built project
        output_root: Root of the shared output tree
        build_dir: Build output directory inside the project (defaults to settings)

    Returns:
        The destination directory

    Raises:
        MissingBuildOutputError: The build output is absent or empty
        MergeError: The destination could not be replaced
    """
    source = project.build_output_path(build_dir or settings.build_output_dir)
    if not has_build_output(source):
        raise MissingBuildOutputError(project.name, source)

    if not project.base_path_segments:
        raise MergeError(project.name, f"{project.name} has base path '/', which would replace the whole output tree")

    output_root = Path(output_root)
    destination = destination_for(output_root, project.base_path)

    with _merge_lock:
        staging: Optional[Path] = None
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{destination.name}-", dir=destination.parent))
            staged_copy = staging / destination.name
            shutil.copytree(source, staged_copy)

            if destination.exists():
                logger.debug("Removing stale %s", destination)
                if destination.is_dir() and not destination.is_symlink():
                    shutil.rmtree(destination)
                else:
                    destination.unlink()
            staged_copy.rename(destination)
        except (OSError, shutil.Error) as e:
            raise MergeError(project.name, f"could not merge {project.name} into {destination}: {e}") from e
        finally:
            if staging is not None and staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

    logger.debug("Merged %s into %s", project.name, destination)
    return destination


def mirror_output_tree(output_root: Path, mirror_root: Path) -> Path:
    """Replace ``mirror_root`` with a copy of the finished output tree.

    Raises:
        ConfigWriteError: The mirror could not be written
    """
    output_root = Path(output_root)
    mirror_root = Path(mirror_root)
    try:
        if mirror_root.exists():
            shutil.rmtree(mirror_root)
        shutil.copytree(output_root, mirror_root)
    except (OSError, shutil.Error) as e:
        raise ConfigWriteError(mirror_root, str(e)) from e
    logger.info("Mirrored %s to %s", output_root, mirror_root)
    return mirror_root
