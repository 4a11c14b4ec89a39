"""Routing contracts for the static host's routing descriptor.

The host evaluates ``routes`` in declaration order and stops at the first
match, so the order of the list is part of its meaning: every static-asset
rule must precede every navigation fallback, and a fallback may only apply
to requests that accept HTML.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


HTML_ACCEPT_PATTERN = "(.*)text/html(.*)"


class RuleClass(str, Enum):
    """Evaluation class of a routing rule."""
    STATIC = "static"
    FALLBACK = "fallback"


class HasCondition(BaseModel):
    """Request condition a rule requires before it applies."""
    type: Literal["header", "cookie", "host", "query"] = "header"
    key: str
    value: Optional[str] = None


def html_accept_condition() -> HasCondition:
    """Condition matching requests that declare an HTML accept type."""
    return HasCondition(type="header", key="accept", value=HTML_ACCEPT_PATTERN)


class RewriteRule(BaseModel):
    """A pattern/destination pair with an optional condition and a priority."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    source: str = Field(..., alias="src", description="Regular expression matched against the request path")
    destination: str = Field(..., alias="dest", description="Path served when the rule matches")
    has: Optional[List[HasCondition]] = Field(default=None, description="Conditions that must all hold")
    headers: Optional[Dict[str, str]] = Field(default=None, description="Response headers to attach")
    rule_class: RuleClass = Field(..., exclude=True)
    priority: int = Field(..., ge=0, exclude=True, description="Lower values are evaluated first")

    @property
    def requires_html(self) -> bool:
        """True when the rule only applies to HTML-accepting requests."""
        return any(
            condition.type == "header"
            and condition.key.lower() == "accept"
            and condition.value is not None
            and "text/html" in condition.value
            for condition in (self.has or [])
        )


def check_route_precedence(rules: List[RewriteRule]) -> None:
    """Raise ValueError unless ``rules`` respect the evaluation-order invariant."""
    seen_fallback = False
    previous_priority = -1
    for index, rule in enumerate(rules):
        if rule.priority <= previous_priority:
            raise ValueError(
                f"route {index} ({rule.source}) has priority {rule.priority}, "
                f"not greater than the previous {previous_priority}"
            )
        previous_priority = rule.priority

        if rule.rule_class == RuleClass.FALLBACK:
            seen_fallback = True
            if not rule.requires_html:
                raise ValueError(f"fallback route {rule.source} is not conditioned on an HTML accept header")
        elif seen_fallback:
            raise ValueError(f"static route {rule.source} is declared after a fallback route")


class RouteTable(BaseModel):
    """An ordered, validated list of routing rules."""

    rules: List[RewriteRule] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_precedence(self) -> "RouteTable":
        check_route_precedence(self.rules)
        return self

    @property
    def static_rules(self) -> List[RewriteRule]:
        return [rule for rule in self.rules if rule.rule_class == RuleClass.STATIC]

    @property
    def fallback_rules(self) -> List[RewriteRule]:
        return [rule for rule in self.rules if rule.rule_class == RuleClass.FALLBACK]


class BuildSpec(BaseModel):
    """Static build metadata telling the host where the output tree lives."""
    src: str = "package.json"
    use: str = "@vercel/static-build"
    config: Dict[str, Any] = Field(default_factory=dict)


class RouteConfig(BaseModel):
    """The routing descriptor written for the static host."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = 2
    output_directory: str = Field(..., alias="outputDirectory")
    builds: List[BuildSpec] = Field(default_factory=list)
    routes: List[RewriteRule] = Field(default_factory=list)
    clean_urls: Optional[bool] = Field(default=None, alias="cleanUrls")
    trailing_slash: Optional[bool] = Field(default=None, alias="trailingSlash")

    @model_validator(mode="after")
    def validate_precedence(self) -> "RouteConfig":
        check_route_precedence(self.routes)
        return self

    @property
    def table(self) -> RouteTable:
        return RouteTable(rules=self.routes)

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with the host's field names, omitting unset options."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
