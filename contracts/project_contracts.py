"""Project contracts: what a discovered sub-project looks like.

A Project is built once per discovery pass and never mutated afterwards;
every later stage receives it as a parameter.
"""

import re
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


NUMERIC_PREFIX = re.compile(r"^(\d+)")
NUMERIC_DASH_PREFIX = re.compile(r"^\d+-")
_FORBIDDEN_PATH_CHARS = re.compile(r"[\s?#\\]")


def normalize_base_path(value: str) -> str:
    """Return ``value`` with exactly one leading and one trailing slash.

    Runs of slashes are collapsed, so normalizing an already normalized
    value is a fixed point.
    """
    cleaned = value.strip()
    cleaned = re.sub(r"/{2,}", "/", cleaned)
    if not cleaned.startswith("/"):
        cleaned = "/" + cleaned
    if not cleaned.endswith("/"):
        cleaned = cleaned + "/"
    return cleaned


def display_name_for(project_id: str) -> str:
    """Human-readable name: drop a leading ``NN-`` and title-case each word."""
    name = NUMERIC_DASH_PREFIX.sub("", project_id)
    name = re.sub(r"[-_]+", " ", name).strip()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name)


class Project(BaseModel):
    """A buildable sub-project found under the workspace root."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Directory name, unique within the workspace")
    path: Path = Field(..., description="Absolute path of the project directory")
    base_path: str = Field(..., description="URL prefix the project is served from, e.g. /01-basics/")
    config_file: Optional[Path] = Field(
        default=None,
        description="Build-tool configuration file that identified the project"
    )

    @field_validator("base_path", mode="before")
    @classmethod
    def _normalize_base_path(cls, value: str) -> str:
        if not isinstance(value, str):
            raise TypeError("base_path must be a string")
        normalized = normalize_base_path(value)
        if _FORBIDDEN_PATH_CHARS.search(normalized):
            raise ValueError(f"base path contains characters not allowed in a URL prefix: {value!r}")
        segments = [s for s in normalized.split("/") if s]
        if any(s in (".", "..") for s in segments):
            raise ValueError(f"base path must not contain relative segments: {value!r}")
        return normalized

    @property
    def base_path_segments(self) -> List[str]:
        """Non-empty segments of the base path, in order."""
        return [segment for segment in self.base_path.split("/") if segment]

    @property
    def base_path_no_slash(self) -> str:
        """Base path without its trailing slash ('' for the site root)."""
        return self.base_path.rstrip("/")

    @property
    def display_name(self) -> str:
        return display_name_for(self.name)

    @property
    def numeric_prefix(self) -> Optional[int]:
        """Leading number of the directory name, if any (``01-basics`` -> 1)."""
        match = NUMERIC_PREFIX.match(self.name)
        return int(match.group(1)) if match else None

    def build_output_path(self, build_dir: str) -> Path:
        """Where the build step leaves its output for this project."""
        return self.path / build_dir


class ProjectListEntry(BaseModel):
    """Record in the project list consumed by the landing page."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str = Field(..., alias="displayName")
    route: str
