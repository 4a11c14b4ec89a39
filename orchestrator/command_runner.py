"""External command execution for the install and build steps."""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Type

from contracts import BuildError, CommandError, InstallError, Project
from config import settings

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs a project's install and build commands in its directory.

    Output is inherited from the parent process so the user sees the tool's
    own progress. Success is decided by the exit status only.
    """

    def __init__(
        self,
        install_command: Optional[str] = None,
        build_command: Optional[str] = None,
    ):
        self.install_command = install_command or settings.install_command
        self.build_command = build_command or settings.build_command

    def install(self, project: Project) -> None:
        """Install the project's dependencies.

        Raises:
            InstallError: The command is missing or exited non-zero
        """
        self._run(project, self.install_command, InstallError)

    def build(self, project: Project) -> None:
        """Build the project.

        Raises:
            BuildError: The command is missing or exited non-zero
        """
        self._run(project, self.build_command, BuildError)

    def _resolve(self, command: List[str]) -> Optional[List[str]]:
        executable = shutil.which(command[0])
        if not executable:
            return None
        return [executable, *command[1:]]

    def _run(self, project: Project, command_line: str, error: Type[CommandError]) -> None:
        command = shlex.split(command_line)
        if not command:
            raise error(project.name, command, reason="is empty")

        resolved = self._resolve(command)
        if resolved is None:
            raise error(project.name, command, reason=f"({command[0]} not found on PATH)")

        logger.info("[%s] %s: %s", project.name, error.step, command_line)
        try:
            subprocess.run(resolved, cwd=Path(project.path), check=True)
        except subprocess.CalledProcessError as exc:
            raise error(project.name, command, returncode=exc.returncode) from exc
        except OSError as exc:
            raise error(project.name, command, reason=f"could not start: {exc}") from exc
