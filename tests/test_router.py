"""Tests for the Route Config Synthesizer."""

import json
import re
from pathlib import Path

import pytest

from contracts import ConfigWriteError, Project, RouteTable, RuleClass
from router import RouteConfigSynthesizer, escape_path, synthesize_routes, write_route_config


def project(name, base_path=None):
    return Project(name=name, path=Path("/workspace") / name, base_path=base_path or f"/{name}/")


def matching(rules, path):
    """Rules whose pattern matches ``path``, in evaluation order."""
    return [rule for rule in rules if re.match(rule.source, path)]


class TestRouteConfigSynthesizer:
    """Test RouteConfigSynthesizer."""

    def test_static_rules_precede_fallbacks(self):
        config = synthesize_routes([project("01-basics"), project("photo-lab")])
        classes = [rule.rule_class for rule in config.routes]

        first_fallback = classes.index(RuleClass.FALLBACK)
        assert all(c == RuleClass.STATIC for c in classes[:first_fallback])
        assert all(c == RuleClass.FALLBACK for c in classes[first_fallback:])
        # The table re-validates cleanly
        RouteTable(rules=config.routes)

    def test_every_fallback_requires_html(self):
        config = synthesize_routes([project("photo-lab")])
        for rule in config.table.fallback_rules:
            assert rule.requires_html

    def test_static_rules_carry_cache_headers(self):
        config = synthesize_routes([project("photo-lab")])
        for rule in config.table.static_rules:
            assert rule.headers == {"cache-control": "public, max-age=31536000, immutable"}

    def test_asset_request_served_literally(self):
        """A hashed bundle resolves to a static rule before any fallback."""
        config = synthesize_routes([project("photo-lab")])
        first = matching(config.routes, "/photo-lab/assets/index-abc123.js")[0]

        assert first.rule_class == RuleClass.STATIC
        # Host substitutes $N; Python's expand uses \N
        template = re.sub(r"\$(\d)", r"\\\1", first.destination)
        match = re.match(first.source, "/photo-lab/assets/index-abc123.js")
        assert match.expand(template) == "/photo-lab/assets/index-abc123.js"

    def test_asset_folder_rule(self):
        """Files in well-known folders are static even without a known extension."""
        config = synthesize_routes([project("photo-lab")])
        first = matching(config.routes, "/photo-lab/textures/wood")[0]
        assert first.rule_class == RuleClass.STATIC

    def test_navigation_falls_back_to_entry(self):
        config = synthesize_routes([project("photo-lab")])
        for path in ["/photo-lab", "/photo-lab/", "/photo-lab/gallery/42"]:
            first = matching(config.routes, path)[0]
            assert first.rule_class == RuleClass.FALLBACK
            assert first.destination == "/photo-lab/index.html"

    def test_fallback_does_not_match_sibling_prefix(self):
        config = synthesize_routes([project("photo-lab")])
        fallback = config.table.fallback_rules[0]
        assert not re.match(fallback.source, "/photo-labs/")

    def test_root_rule_last(self):
        config = synthesize_routes([project("photo-lab")])
        root = config.routes[-1]
        assert root.source == "^/$"
        assert root.destination == "/index.html"
        assert root.requires_html

    def test_nested_base_path_before_parent(self):
        """A deeper base path is not shadowed by a shorter prefix."""
        config = synthesize_routes([project("course"), project("lesson-3", "/course/lesson-3/")])
        fallbacks = config.table.fallback_rules

        assert fallbacks[0].destination == "/course/lesson-3/index.html"
        assert fallbacks[1].destination == "/course/index.html"
        assert matching(fallbacks, "/course/lesson-3/step")[0].destination == "/course/lesson-3/index.html"

    def test_base_path_metacharacters_escaped(self):
        config = synthesize_routes([project("my.app")])
        fallback = config.table.fallback_rules[0]
        assert r"my\.app" in fallback.source
        assert not re.match(fallback.source, "/myXapp/")

    def test_priorities_strictly_increase(self):
        config = synthesize_routes([project("a"), project("b"), project("c")])
        priorities = [rule.priority for rule in config.routes]
        assert priorities == sorted(set(priorities))

    def test_no_projects_still_routes_root(self):
        config = synthesize_routes([])
        assert [rule.source for rule in config.routes] == ["^/$"]

    def test_descriptor_metadata(self):
        data = RouteConfigSynthesizer(output_directory="public").synthesize([project("a")]).to_json_dict()
        assert data["version"] == 2
        assert data["outputDirectory"] == "public"
        assert data["builds"] == [{
            "src": "package.json",
            "use": "@vercel/static-build",
            "config": {"distDir": "public"},
        }]

    def test_custom_extensions(self):
        synthesizer = RouteConfigSynthesizer(static_extensions=[".glb"], asset_folders=["models"])
        rules = synthesizer.static_rules_for(project("a"))
        assert rules[0].source == r"^/a/(.*)\.(glb)$"
        assert rules[1].source == "^/a/(models|assets)/(.*)$"


class TestEscapePath:
    """Test escape_path."""

    def test_leaves_dashes(self):
        assert escape_path("/01-basics/") == "/01-basics/"

    def test_escapes_metacharacters(self):
        assert escape_path("/a.b+c(d)/") == r"/a\.b\+c\(d\)/"


class TestWriteRouteConfig:
    """Test write_route_config."""

    def test_writes_json(self, tmp_path):
        path = write_route_config(synthesize_routes([project("a")]), tmp_path / "vercel.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["routes"][-1] == {
            "src": "^/$",
            "dest": "/index.html",
            "has": [{"type": "header", "key": "accept", "value": "(.*)text/html(.*)"}],
        }

    def test_write_failure(self, tmp_path):
        target = tmp_path / "vercel.json"
        target.mkdir()
        with pytest.raises(ConfigWriteError):
            write_route_config(synthesize_routes([project("a")]), target)
