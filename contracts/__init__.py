"""Pydantic contracts for Bundle Forge.

Every stage hands its results to the next through these models.
"""

from .project_contracts import (
    Project,
    ProjectListEntry,
    normalize_base_path,
    display_name_for,
)

from .build_contracts import (
    BuildStatus,
    BuildOutcome,
    BuildReport,
)

from .routing_contracts import (
    RuleClass,
    HasCondition,
    RewriteRule,
    RouteTable,
    BuildSpec,
    RouteConfig,
    HTML_ACCEPT_PATTERN,
    html_accept_condition,
    check_route_precedence,
)

from .errors import (
    BundleForgeError,
    NoProjectsFoundError,
    ProjectError,
    CommandError,
    InstallError,
    BuildError,
    MissingBuildOutputError,
    MergeError,
    ConfigWriteError,
)

__all__ = [
    # Projects
    "Project",
    "ProjectListEntry",
    "normalize_base_path",
    "display_name_for",
    # Builds
    "BuildStatus",
    "BuildOutcome",
    "BuildReport",
    # Routing
    "RuleClass",
    "HasCondition",
    "RewriteRule",
    "RouteTable",
    "BuildSpec",
    "RouteConfig",
    "HTML_ACCEPT_PATTERN",
    "html_accept_condition",
    "check_route_precedence",
    # Errors
    "BundleForgeError",
    "NoProjectsFoundError",
    "ProjectError",
    "CommandError",
    "InstallError",
    "BuildError",
    "MissingBuildOutputError",
    "MergeError",
    "ConfigWriteError",
]
