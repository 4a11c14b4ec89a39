"""Build Manager - Central orchestrator for Bundle Forge.

The Build Manager is the main entry point that:
1. Takes the discovered projects in order
2. Installs, builds, rewrites and merges each one, isolating failures
3. Synthesizes the routing descriptor, landing page and project list
   from the projects that made it into the shared output tree
"""

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from contracts import (
    BuildOutcome,
    BuildReport,
    BuildStatus,
    BundleForgeError,
    InstallError,
    MergeError,
    MissingBuildOutputError,
    NoProjectsFoundError,
    Project,
    ProjectError,
    RouteConfig,
)
from discovery import discover_projects
from landing import write_landing_page, write_project_list
from merger import has_build_output, merge_project, mirror_output_tree
from orchestrator.command_runner import CommandRunner
from rewriter import AssetRewriter, RewriteReport, default_rewriter
from router import RouteConfigSynthesizer, write_route_config
from config import settings

logger = logging.getLogger(__name__)


class BuildManager:
    """Runs the per-project build pipeline over a batch of projects.

    Responsibilities:
    - Install dependencies when the project has none yet
    - Run the build and check it left output behind
    - Rewrite root-relative asset references for the project's base path
    - Merge the output into the shared tree
    """

    def __init__(
        self,
        output_root: Optional[Path] = None,
        build_dir: Optional[str] = None,
        skip_install: Optional[bool] = None,
        max_workers: Optional[int] = None,
        rewriter: Optional[AssetRewriter] = None,
        runner: Optional[CommandRunner] = None,
    ):
        """Initialize the Build Manager.

        Args:
            output_root: Shared output tree (defaults to settings)
            build_dir: Build output directory inside each project (defaults to settings)
            skip_install: Never run the install command
            max_workers: Projects built concurrently; 1 means sequential
            rewriter: Asset rewriter applied to each build output
            runner: Runs the install and build commands
        """
        self.output_root = Path(output_root or settings.get_output_path())
        self.build_dir = build_dir or settings.build_output_dir
        self.skip_install = settings.skip_install if skip_install is None else skip_install
        self.max_workers = max(1, max_workers or settings.max_workers)
        self.rewriter = rewriter or default_rewriter()
        self.runner = runner or CommandRunner()

    def needs_install(self, project: Project) -> bool:
        """True unless installs are skipped or the dependency cache exists."""
        if self.skip_install:
            return False
        return not (project.path / settings.dependency_cache_dir).exists()

    def prepare_project(self, project: Project) -> RewriteReport:
        """Install, build and rewrite one project, leaving the shared tree alone.

        Raises:
            ProjectError: Install, build or output check failed
        """
        logger.info("Building %s (%s)", project.name, project.base_path)
        if self.needs_install(project):
            self.runner.install(project)
        self.runner.build(project)

        output = project.build_output_path(self.build_dir)
        if not has_build_output(output):
            raise MissingBuildOutputError(project.name, output)

        rewrite = self.rewriter.rewrite_tree(output, project.base_path)
        if rewrite.failures:
            logger.warning("%s: %d file(s) could not be rewritten", project.name, len(rewrite.failures))
        return rewrite

    def merge_prepared(self, project: Project, rewrite: RewriteReport) -> BuildOutcome:
        """Merge a prepared project into the shared tree and record the outcome."""
        try:
            destination = merge_project(project, self.output_root, self.build_dir)
        except ProjectError as e:
            return _failed(project, e)

        logger.info("OK   %s -> %s (%d asset reference(s) rewritten)",
                    project.name, project.base_path, rewrite.replacements)
        return BuildOutcome(
            project=project,
            status=BuildStatus.MERGED,
            replacements=rewrite.replacements,
            destination=destination,
        )

    def build_project(self, project: Project) -> BuildOutcome:
        """Take one project from source to merged output.

        Never raises for a project-level failure; the failure is recorded
        in the returned outcome instead.
        """
        prepared = self._prepare_or_fail(project)
        if isinstance(prepared, BuildOutcome):
            return prepared
        return self.merge_prepared(project, prepared)

    def _prepare_or_fail(self, project: Project) -> Union[RewriteReport, BuildOutcome]:
        try:
            return self.prepare_project(project)
        except ProjectError as e:
            return _failed(project, e)

    def run(self, projects: Sequence[Project]) -> BuildReport:
        """Build every project, continuing past failures.

        Builds may run concurrently. Merges run afterwards one at a time,
        shallow base paths first, so a parent project's merge never removes
        the subtree of a project nested under it.

        Returns:
            BuildReport with one outcome per project, in the order given
        """
        projects = list(projects)
        if self.max_workers == 1 or len(projects) <= 1:
            prepared = [self._prepare_or_fail(project) for project in projects]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                prepared = list(executor.map(self._prepare_or_fail, projects))

        outcomes: Dict[int, BuildOutcome] = {}
        for index in merge_order(projects):
            result = prepared[index]
            if isinstance(result, BuildOutcome):
                outcomes[index] = result
            else:
                outcomes[index] = self.merge_prepared(projects[index], result)
        return BuildReport(outcomes=[outcomes[index] for index in range(len(projects))])


def merge_order(projects: Sequence[Project]) -> List[int]:
    """Indexes of ``projects`` ordered by base path depth, then given order."""
    return sorted(range(len(projects)), key=lambda index: len(projects[index].base_path_segments))


def _failed(project: Project, error: ProjectError) -> BuildOutcome:
    logger.error("FAIL %s: %s", project.name, error)
    return BuildOutcome(project=project, status=_status_for(error), detail=str(error))


def _status_for(error: ProjectError) -> BuildStatus:
    if isinstance(error, InstallError):
        return BuildStatus.INSTALL_FAILED
    if isinstance(error, MissingBuildOutputError):
        return BuildStatus.NO_OUTPUT
    if isinstance(error, MergeError):
        return BuildStatus.MERGE_FAILED
    return BuildStatus.BUILD_FAILED


class PipelineResult(BaseModel):
    """Everything a complete run produced."""

    projects: Tuple[Project, ...] = Field(default_factory=tuple, description="Discovered projects")
    report: BuildReport
    output_root: Path
    route_config: RouteConfig
    route_config_path: Path
    landing_page_path: Path
    project_list_path: Path
    public_mirror_path: Optional[Path] = None


def prepare_output_root(root: Path, output_root: Path, clean: bool) -> Path:
    """Create the shared output tree, emptying it first when ``clean`` is set.

    Raises:
        BundleForgeError: The output tree would contain the workspace itself
    """
    resolved_root = root.resolve()
    resolved_output = output_root.resolve()
    if resolved_output == resolved_root or resolved_output in resolved_root.parents:
        raise BundleForgeError(f"Output directory {output_root} must be inside the workspace, not contain it")

    try:
        if clean and output_root.exists():
            logger.debug("Cleaning %s", output_root)
            shutil.rmtree(output_root)
        output_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BundleForgeError(f"Could not prepare output directory {output_root}: {e}") from e
    return output_root


def run_pipeline(
    root: Optional[Path] = None,
    output_dir: Optional[str] = None,
    skip_install: Optional[bool] = None,
    max_workers: Optional[int] = None,
    clean_output: Optional[bool] = None,
    public_mirror_dir: Optional[str] = None,
    runner: Optional[CommandRunner] = None,
) -> PipelineResult:
    """Run the whole build: discover, build each project, write the site config.

    Args:
        root: Workspace root (defaults to settings)
        output_dir: Shared output directory, relative to the root (defaults to settings)
        skip_install: Never run the install command
        max_workers: Projects built concurrently
        clean_output: Empty the shared output tree before building
        public_mirror_dir: Also copy the finished output tree here, relative to the root
        runner: Runs the install and build commands

    Returns:
        PipelineResult with the build report and written file paths

    Raises:
        NoProjectsFoundError: Discovery found nothing; no routing descriptor is written
        ConfigWriteError: The routing descriptor, landing page or project list could not be written
    """
    root = Path(root or settings.get_workspace_path())
    output_dir = output_dir or settings.output_dir
    output_root = root / output_dir
    clean_output = settings.clean_output if clean_output is None else clean_output
    public_mirror_dir = public_mirror_dir or settings.public_mirror_dir

    # Step 1: Discover
    ignored = list(settings.ignored_dirs) + [Path(output_dir).name]
    if public_mirror_dir:
        ignored.append(Path(public_mirror_dir).name)
    projects = discover_projects(root, ignored_dirs=ignored)
    if not projects:
        raise NoProjectsFoundError(root)
    logger.info("Found %d project(s): %s", len(projects), ", ".join(p.name for p in projects))

    # Step 2: Build and merge
    prepare_output_root(root, output_root, clean_output)
    manager = BuildManager(
        output_root=output_root,
        skip_install=skip_install,
        max_workers=max_workers,
        runner=runner,
    )
    report = manager.run(projects)
    merged = report.merged_projects

    # Step 3: Site-level files over the merged projects only
    route_config = RouteConfigSynthesizer(output_directory=output_dir).synthesize(merged)
    route_config_path = write_route_config(route_config, settings.get_route_config_path(root))
    landing_page_path = write_landing_page(merged, output_root / "index.html")
    project_list_path = write_project_list(merged, output_root / settings.projects_list_file)

    public_mirror_path = None
    if public_mirror_dir:
        public_mirror_path = mirror_output_tree(output_root, root / public_mirror_dir)

    return PipelineResult(
        projects=projects,
        report=report,
        output_root=output_root,
        route_config=route_config,
        route_config_path=route_config_path,
        landing_page_path=landing_page_path,
        project_list_path=project_list_path,
        public_mirror_path=public_mirror_path,
    )
