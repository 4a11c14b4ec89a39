"""Build contracts: the per-project result of a run and the run's report."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .project_contracts import Project


class BuildStatus(str, Enum):
    """Final state of one project after the orchestrator is done with it."""
    INSTALL_FAILED = "install_failed"
    BUILD_FAILED = "build_failed"
    NO_OUTPUT = "no_output"
    MERGE_FAILED = "merge_failed"
    MERGED = "merged"


class BuildOutcome(BaseModel):
    """Associates a project with what happened to it."""

    model_config = ConfigDict(frozen=True)

    project: Project
    status: BuildStatus
    detail: str = Field(default="", description="Why the project failed; empty on success")
    replacements: int = Field(default=0, ge=0, description="Asset references rewritten")
    destination: Optional[Path] = Field(
        default=None,
        description="Subtree of the shared output the project was merged into"
    )

    @property
    def succeeded(self) -> bool:
        return self.status == BuildStatus.MERGED


class BuildReport(BaseModel):
    """Outcomes of a whole batch, in discovery order."""

    outcomes: List[BuildOutcome] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def merged_projects(self) -> List[Project]:
        """Projects that made it into the shared output tree."""
        return [outcome.project for outcome in self.outcomes if outcome.succeeded]

    @property
    def failed_outcomes(self) -> List[BuildOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def tally(self) -> str:
        """Headline result of the run, ``<succeeded>/<total>``."""
        return f"{self.succeeded}/{self.total}"
