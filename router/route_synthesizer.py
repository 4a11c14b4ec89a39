"""Route Config Synthesizer.

Derives the static host's routing descriptor from the merged projects. The
host stops at the first matching route, so rules are emitted in two classes:

1. Static-asset rules: any path under a base path ending in a known static
   extension (or inside a well-known asset folder) is served as the literal
   file, with long-lived caching headers.
2. Navigation fallback rules: everything else under a base path goes to that
   project's ``index.html``, but only for requests that accept HTML, so an
   asset request that misses never comes back as the entry document.
"""

import json
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from contracts import (
    BuildSpec,
    ConfigWriteError,
    Project,
    RewriteRule,
    RouteConfig,
    RuleClass,
    html_accept_condition,
)
from config import settings


STATIC_PRIORITY_BASE = 1_000
FALLBACK_PRIORITY_BASE = 1_000_000

# Always treated as asset folders, on top of the rewriter's whitelist
BUNDLER_ASSET_FOLDERS = ["assets"]

_REGEX_SPECIAL = re.compile(r"([.^$*+?()\[\]{}|\\])")


def escape_path(path: str) -> str:
    """Escape regex metacharacters in a URL path for use in a route pattern."""
    return _REGEX_SPECIAL.sub(r"\\\1", path)


class RouteConfigSynthesizer:
    """Builds the ordered routing descriptor for a set of merged projects."""

    def __init__(
        self,
        static_extensions: Optional[Iterable[str]] = None,
        asset_folders: Optional[Iterable[str]] = None,
        cache_control: Optional[str] = None,
        output_directory: Optional[str] = None,
        version: Optional[int] = None,
    ):
        """Initialize the synthesizer.

        Args:
            static_extensions: Extensions served literally (defaults to settings)
            asset_folders: Folder names matched by the supplementary rule (defaults to settings)
            cache_control: Cache-Control value for static routes (defaults to settings)
            output_directory: Output directory reported to the host (defaults to settings)
            version: Descriptor schema version (defaults to settings)
        """
        self.static_extensions = [ext.lstrip(".") for ext in (static_extensions or settings.static_extensions)]
        folders = list(asset_folders or settings.asset_folders)
        self.asset_folders = folders + [f for f in BUNDLER_ASSET_FOLDERS if f not in folders]
        self.cache_control = cache_control or settings.cache_control
        self.output_directory = output_directory or settings.output_dir
        self.version = version or settings.route_config_version

    @property
    def cache_headers(self) -> Dict[str, str]:
        return {"cache-control": self.cache_control}

    def _static_patterns(self, project: Project) -> List[tuple]:
        base = escape_path(project.base_path)
        extensions = "|".join(escape_path(ext) for ext in self.static_extensions)
        folders = "|".join(escape_path(folder) for folder in self.asset_folders)
        return [
            (f"^{base}(.*)\\.({extensions})$", f"{project.base_path}$1.$2"),
            (f"^{base}({folders})/(.*)$", f"{project.base_path}$1/$2"),
        ]

    def static_rules_for(self, project: Project, first_priority: int = STATIC_PRIORITY_BASE) -> List[RewriteRule]:
        """Rules serving the project's static files literally."""
        return [
            RewriteRule(
                source=source,
                destination=destination,
                headers=self.cache_headers,
                rule_class=RuleClass.STATIC,
                priority=first_priority + offset,
            )
            for offset, (source, destination) in enumerate(self._static_patterns(project))
        ]

    def fallback_rule_for(self, project: Project, priority: int = FALLBACK_PRIORITY_BASE) -> RewriteRule:
        """Rule sending HTML navigation under the base path to the entry document."""
        prefix = escape_path(project.base_path_no_slash)
        return RewriteRule(
            source=f"^{prefix}(?:/.*)?$",
            destination=f"{project.base_path}index.html",
            has=[html_accept_condition()],
            rule_class=RuleClass.FALLBACK,
            priority=priority,
        )

    def root_rule(self, priority: int) -> RewriteRule:
        """Rule serving the landing page at the site root."""
        return RewriteRule(
            source="^/$",
            destination="/index.html",
            has=[html_accept_condition()],
            rule_class=RuleClass.FALLBACK,
            priority=priority,
        )

    def build_rules(self, projects: Sequence[Project]) -> List[RewriteRule]:
        """All static rules, then all fallback rules, then the root rule."""
        # Deeper base paths first so a nested project is not shadowed by its parent
        ordered = sorted(projects, key=lambda project: -len(project.base_path_segments))

        rules: List[RewriteRule] = []
        priority = STATIC_PRIORITY_BASE
        for project in ordered:
            static = self.static_rules_for(project, priority)
            rules.extend(static)
            priority += len(static)

        priority = FALLBACK_PRIORITY_BASE
        for project in ordered:
            rules.append(self.fallback_rule_for(project, priority))
            priority += 1
        rules.append(self.root_rule(priority))
        return rules

    def synthesize(self, projects: Sequence[Project]) -> RouteConfig:
        """Produce the routing descriptor for ``projects``.

        Args:
            projects: Successfully merged projects, in discovery order

        Returns:
            RouteConfig whose route order satisfies the precedence invariant
        """
        return RouteConfig(
            version=self.version,
            output_directory=self.output_directory,
            builds=[BuildSpec(config={"distDir": self.output_directory})],
            routes=self.build_rules(projects),
        )


def synthesize_routes(projects: Sequence[Project]) -> RouteConfig:
    """Convenience function building a descriptor with default settings."""
    return RouteConfigSynthesizer().synthesize(projects)


def write_route_config(config: RouteConfig, path: Path) -> Path:
    """Write the routing descriptor as JSON.

    Raises:
        ConfigWriteError: The file could not be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_json_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigWriteError(path, str(e)) from e
    return path
