"""Shared fixtures: throwaway workspaces and a runner that fakes npm."""

from pathlib import Path
from typing import Iterable, Optional

import pytest

from contracts import BuildError, InstallError, Project
from orchestrator import CommandRunner


INDEX_HTML = (
    "<!DOCTYPE html>\n<html>\n<head>\n"
    '<script type="module" src="/assets/index.js"></script>\n'
    "</head>\n<body></body>\n</html>\n"
)
INDEX_JS = "const texture = loader.load('/textures/wood.jpg');\n"
PLAIN_JS = "console.log('ready');\n"


def write_project(
    root: Path,
    name: str,
    base: Optional[str] = None,
    config_name: str = "vite.config.js",
    manifest: bool = True,
) -> Path:
    """Create a minimal Vite project directory under ``root``."""
    directory = root / name
    directory.mkdir(parents=True)
    body = "import { defineConfig } from 'vite'\n\nexport default defineConfig({\n"
    if base is not None:
        body += f"    base: '{base}',\n"
    body += "    build: { outDir: 'dist' }\n})\n"
    (directory / config_name).write_text(body, encoding="utf-8")
    if manifest:
        (directory / "package.json").write_text(f'{{"name": "{name}"}}\n', encoding="utf-8")
    return directory


def make_project(path: Path, base_path: Optional[str] = None) -> Project:
    return Project(name=path.name, path=path, base_path=base_path or f"/{path.name}/")


class FakeRunner(CommandRunner):
    """Stands in for npm: records calls and writes a small build output."""

    def __init__(
        self,
        failing_installs: Iterable[str] = (),
        failing_builds: Iterable[str] = (),
        empty_outputs: Iterable[str] = (),
        plain_outputs: Iterable[str] = (),
    ):
        super().__init__(install_command="npm install", build_command="npm run build")
        self.failing_installs = set(failing_installs)
        self.failing_builds = set(failing_builds)
        self.empty_outputs = set(empty_outputs)
        self.plain_outputs = set(plain_outputs)
        self.calls = []

    def install(self, project: Project) -> None:
        self.calls.append(("install", project.name))
        if project.name in self.failing_installs:
            raise InstallError(project.name, ["npm", "install"], returncode=1)
        (project.path / "node_modules").mkdir(exist_ok=True)

    def build(self, project: Project) -> None:
        self.calls.append(("build", project.name))
        if project.name in self.failing_builds:
            raise BuildError(project.name, ["npm", "run", "build"], returncode=2)
        dist = project.path / "dist"
        dist.mkdir(exist_ok=True)
        if project.name in self.empty_outputs:
            return
        (dist / "index.html").write_text(INDEX_HTML, encoding="utf-8")
        (dist / "assets").mkdir(exist_ok=True)
        script = PLAIN_JS if project.name in self.plain_outputs else INDEX_JS
        (dist / "assets" / "index.js").write_text(script, encoding="utf-8")


@pytest.fixture
def workspace(tmp_path):
    """An empty workspace root."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def fake_runner():
    return FakeRunner()
