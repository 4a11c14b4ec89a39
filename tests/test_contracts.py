"""Tests for Pydantic contracts."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from contracts import (
    BuildOutcome,
    BuildReport,
    BuildStatus,
    HasCondition,
    Project,
    ProjectListEntry,
    RewriteRule,
    RouteConfig,
    RouteTable,
    RuleClass,
    display_name_for,
    html_accept_condition,
    normalize_base_path,
)


def static_rule(priority: int, source: str = "^/a/(.*)\\.js$") -> RewriteRule:
    return RewriteRule(
        source=source,
        destination="/a/$1.js",
        headers={"cache-control": "public, max-age=31536000, immutable"},
        rule_class=RuleClass.STATIC,
        priority=priority,
    )


def fallback_rule(priority: int, conditioned: bool = True) -> RewriteRule:
    return RewriteRule(
        source="^/a(?:/.*)?$",
        destination="/a/index.html",
        has=[html_accept_condition()] if conditioned else None,
        rule_class=RuleClass.FALLBACK,
        priority=priority,
    )


class TestBasePathNormalization:
    """Test normalize_base_path and Project validation."""

    @pytest.mark.parametrize("raw, expected", [
        ("lesson", "/lesson/"),
        ("/lesson", "/lesson/"),
        ("lesson/", "/lesson/"),
        ("  /lesson/  ", "/lesson/"),
        ("//course///lesson-3", "/course/lesson-3/"),
        ("/", "/"),
    ])
    def test_normalize(self, raw, expected):
        """Leading and trailing slash are enforced, runs collapsed."""
        assert normalize_base_path(raw) == expected

    def test_normalize_is_fixed_point(self):
        """Normalizing twice changes nothing."""
        once = normalize_base_path("course//lesson")
        assert normalize_base_path(once) == once

    def test_project_normalizes_base_path(self):
        """Project stores the normalized value."""
        project = Project(name="photo-lab", path=Path("/tmp/photo-lab"), base_path="photo-lab")
        assert project.base_path == "/photo-lab/"
        assert project.base_path_no_slash == "/photo-lab"
        assert project.base_path_segments == ["photo-lab"]

    @pytest.mark.parametrize("bad", ["/my lab/", "/lab?x=1/", "/lab#top/", "/../lab/", "/a/./b/", "/a\\b/"])
    def test_project_rejects_invalid_base_path(self, bad):
        """Whitespace, query, fragment, backslash and relative segments are rejected."""
        with pytest.raises(ValidationError):
            Project(name="lab", path=Path("/tmp/lab"), base_path=bad)

    def test_project_is_frozen(self):
        """A discovered project cannot be changed afterwards."""
        project = Project(name="lab", path=Path("/tmp/lab"), base_path="/lab/")
        with pytest.raises(ValidationError):
            project.base_path = "/other/"


class TestProjectNames:
    """Test display names and numeric prefixes."""

    @pytest.mark.parametrize("project_id, expected", [
        ("01-basics", "Basics"),
        ("photo-lab", "Photo Lab"),
        ("12-haunted_house", "Haunted House"),
        ("galaxy", "Galaxy"),
    ])
    def test_display_name(self, project_id, expected):
        assert display_name_for(project_id) == expected

    def test_numeric_prefix(self):
        assert Project(name="07-fonts", path=Path("/x"), base_path="/07-fonts/").numeric_prefix == 7
        assert Project(name="fonts", path=Path("/x"), base_path="/fonts/").numeric_prefix is None

    def test_project_list_entry_alias(self):
        """displayName is the serialized field name."""
        entry = ProjectListEntry(id="01-basics", display_name="Basics", route="/01-basics")
        assert entry.model_dump(by_alias=True) == {
            "id": "01-basics",
            "displayName": "Basics",
            "route": "/01-basics",
        }


class TestBuildContracts:
    """Test BuildOutcome and BuildReport."""

    def test_tally_and_failures(self):
        ok = Project(name="a", path=Path("/a"), base_path="/a/")
        bad = Project(name="b", path=Path("/b"), base_path="/b/")
        report = BuildReport(outcomes=[
            BuildOutcome(project=ok, status=BuildStatus.MERGED, replacements=3),
            BuildOutcome(project=bad, status=BuildStatus.BUILD_FAILED, detail="exit 2"),
        ])

        assert report.total == 2
        assert report.succeeded == 1
        assert report.tally == "1/2"
        assert report.merged_projects == [ok]
        assert [o.project.name for o in report.failed_outcomes] == ["b"]

    def test_only_merged_counts_as_success(self):
        project = Project(name="a", path=Path("/a"), base_path="/a/")
        for status in BuildStatus:
            outcome = BuildOutcome(project=project, status=status)
            assert outcome.succeeded == (status == BuildStatus.MERGED)


class TestRouteTable:
    """Test the route precedence invariant."""

    def test_valid_order(self):
        table = RouteTable(rules=[static_rule(1), static_rule(2), fallback_rule(3)])
        assert len(table.static_rules) == 2
        assert len(table.fallback_rules) == 1

    def test_rejects_static_after_fallback(self):
        """A static rule behind a fallback would never be reached."""
        with pytest.raises(ValidationError, match="after a fallback"):
            RouteTable(rules=[static_rule(1), fallback_rule(2), static_rule(3)])

    def test_rejects_unconditioned_fallback(self):
        """Every fallback must require an HTML accept header."""
        with pytest.raises(ValidationError, match="HTML accept header"):
            RouteTable(rules=[static_rule(1), fallback_rule(2, conditioned=False)])

    def test_rejects_non_increasing_priority(self):
        with pytest.raises(ValidationError, match="priority"):
            RouteTable(rules=[static_rule(5), static_rule(5)])

    def test_requires_html_reads_condition(self):
        assert fallback_rule(1).requires_html
        other = HasCondition(type="header", key="accept", value="application/json")
        rule = RewriteRule(src="^/x$", dest="/x", has=[other], rule_class=RuleClass.FALLBACK, priority=1)
        assert not rule.requires_html


class TestRouteConfig:
    """Test the serialized routing descriptor."""

    def test_serializes_host_field_names(self):
        config = RouteConfig(output_directory="dist", routes=[static_rule(1), fallback_rule(2)])
        data = config.to_json_dict()

        assert data["version"] == 2
        assert data["outputDirectory"] == "dist"
        assert "cleanUrls" not in data
        assert "trailingSlash" not in data
        first = data["routes"][0]
        assert set(first) == {"src", "dest", "headers"}
        assert data["routes"][1]["has"] == [
            {"type": "header", "key": "accept", "value": "(.*)text/html(.*)"}
        ]

    def test_priority_and_class_not_serialized(self):
        data = RouteConfig(output_directory="dist", routes=[static_rule(1)]).to_json_dict()
        assert "priority" not in data["routes"][0]
        assert "rule_class" not in data["routes"][0]

    def test_invalid_order_rejected(self):
        with pytest.raises(ValidationError):
            RouteConfig(output_directory="dist", routes=[fallback_rule(1), static_rule(2)])
