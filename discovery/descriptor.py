"""Project Descriptor Reader.

Decides whether a directory is a buildable sub-project and which URL prefix
it owns. The build-tool configuration is not parsed: comments are stripped
and the ``base`` key is picked out with a single-line pattern, so a base
path has to be written as one quoted literal (``base: '/lesson-3/'``).
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from contracts import Project
from config import settings

logger = logging.getLogger(__name__)


# `base` key followed by a value in matching single, double or back quotes, on one line
BASE_PATTERN = re.compile(r"""\bbase\s*:\s*(['"`])([^'"`\r\n]+)\1""")
BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
# `//` at line start or after whitespace, so `https://` survives
LINE_COMMENT = re.compile(r"(^|\s)//[^\r\n]*", re.MULTILINE)


def strip_comments(config_text: str) -> str:
    """Drop JavaScript block and line comments from a config text."""
    without_blocks = BLOCK_COMMENT.sub(" ", config_text)
    return LINE_COMMENT.sub(r"\1", without_blocks)


def extract_base_path(config_text: str) -> Optional[str]:
    """Return the raw ``base`` value declared in a config text, if any.

    Commented-out declarations are ignored.
    """
    match = BASE_PATTERN.search(strip_comments(config_text))
    if not match:
        return None
    value = match.group(2).strip()
    return value or None


def is_relative_base(value: str) -> bool:
    """True for relative bases such as ``./`` or ``.``, which carry no URL prefix."""
    return value.startswith(".")


def find_config_file(directory: Path, config_filenames: Iterable[str]) -> Optional[Path]:
    """First build-tool configuration file present in ``directory``."""
    for filename in config_filenames:
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def read_project_descriptor(
    directory: Path,
    config_filenames: Optional[Iterable[str]] = None,
    manifest_filename: Optional[str] = None,
) -> Optional[Project]:
    """Read ``directory`` as a sub-project.

    Args:
        directory: Candidate project directory
        config_filenames: Build-tool config names to look for (defaults to settings)
        manifest_filename: Dependency manifest name (defaults to settings)

    Returns:
        The Project, or None when the directory is not a (readable) project.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return None

    manifest = directory / (manifest_filename or settings.manifest_filename)
    config_file = find_config_file(directory, config_filenames or settings.config_filenames)
    if config_file is None or not manifest.is_file():
        return None

    try:
        config_text = config_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s, skipping %s: %s", config_file.name, directory.name, e)
        return None

    declared = extract_base_path(config_text)
    if declared is not None and is_relative_base(declared):
        logger.debug("%s declares relative base %r, using its directory name", directory.name, declared)
        declared = None
    base_path = declared if declared is not None else f"/{directory.name}/"

    try:
        return Project(
            name=directory.name,
            path=directory.resolve(),
            base_path=base_path,
            config_file=config_file.resolve(),
        )
    except ValidationError as e:
        logger.warning("Invalid base path %r in %s, skipping %s: %s",
                       base_path, config_file.name, directory.name, e.errors()[0]["msg"])
        return None
