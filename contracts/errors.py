"""Error hierarchy for Bundle Forge.

Project-level errors (install, build, missing output, merge) are caught by
the orchestrator and recorded as failed outcomes. Run-level errors
(no projects, config write) end the run with a non-zero exit.
"""

from pathlib import Path
from typing import Optional, Sequence


class BundleForgeError(RuntimeError):
    """Base error for the whole pipeline."""


class NoProjectsFoundError(BundleForgeError):
    """Raised when discovery recognizes no sub-project in the workspace."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(f"No buildable project found under {root}")


class ProjectError(BundleForgeError):
    """An error confined to a single project; the batch continues."""

    def __init__(self, project_name: str, message: str):
        self.project_name = project_name
        super().__init__(message)


class CommandError(ProjectError):
    """An external install or build command failed."""

    step = "command"

    def __init__(
        self,
        project_name: str,
        command: Sequence[str],
        returncode: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        shown = " ".join(self.command)
        if reason is None:
            reason = f"exited with status {returncode}"
        super().__init__(project_name, f"{self.step} failed for {project_name}: `{shown}` {reason}")


class InstallError(CommandError):
    """Dependency installation failed."""

    step = "install"


class BuildError(CommandError):
    """The build command failed."""

    step = "build"


class MissingBuildOutputError(ProjectError):
    """The build reported success but left no (or an empty) output directory."""

    def __init__(self, project_name: str, output_dir: Path):
        self.output_dir = output_dir
        super().__init__(project_name, f"no build output for {project_name} at {output_dir}")


class MergeError(ProjectError):
    """The project's output could not be moved into the shared tree."""


class ConfigWriteError(BundleForgeError):
    """The routing descriptor, landing page or project list could not be written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Could not write {path}: {reason}")
