"""Rewrite root-relative ``src``/``href`` attributes in built HTML documents.

An entry document built without knowledge of its base path references
``/assets/index-abc.js``; once served from ``/photo-lab/`` it has to point at
``/photo-lab/assets/index-abc.js``.
"""

import re
from typing import Iterable, Tuple

from rewriter.base import AssetRewriter


ATTRIBUTE_PATTERN = re.compile(
    r"""(?P<attr>\b(?:src|href)\s*=\s*)(?P<quote>["'])(?P<value>/[^"']*)(?P=quote)""",
    re.IGNORECASE,
)


class HtmlAttributeRewriter(AssetRewriter):
    """Prefixes root-relative attribute values with the project's base path."""

    def __init__(self, html_extensions: Iterable[str] = (".html", ".htm")):
        self._extensions = [ext.lower() for ext in html_extensions]

    @property
    def extensions(self) -> Iterable[str]:
        return self._extensions

    def rewrite_text(self, text: str, base_path: str) -> Tuple[str, int]:
        prefix = base_path.rstrip("/")
        if not prefix:
            return text, 0

        replaced = 0

        def substitute(match: "re.Match[str]") -> str:
            nonlocal replaced
            value = match.group("value")
            # "/" alone links back to the site root and stays as is
            if value == "/" or value.startswith("//") or "://" in value:
                return match.group(0)
            if value.startswith(base_path) or value == prefix:
                return match.group(0)
            replaced += 1
            quote = match.group("quote")
            return f"{match.group('attr')}{quote}{prefix}{value}{quote}"

        return ATTRIBUTE_PATTERN.sub(substitute, text), replaced
