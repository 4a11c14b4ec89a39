"""Rewrite root-relative asset literals inside compiled scripts.

A bundle built for the site root may embed string literals such as
``'/textures/wood.jpg'``. Served from ``/photo-lab/`` those must become
``'/photo-lab/textures/wood.jpg'``. This is a textual pass limited to a
whitelist of asset folders; it does not parse JavaScript.
"""

import re
from typing import Iterable, List, Optional, Pattern, Tuple

from rewriter.base import AssetRewriter
from config import settings


QUOTES = ("'", '"', "`")
# Text right before a literal that marks it as part of an absolute or protocol-relative URL
EXTERNAL_URL_MARKERS = ("://", "//")
# Where the expression holding a literal starts, at the latest
CONTEXT_DELIMITERS = re.compile(r"[;,(){}\[\]=\r\n]")


def _literal_pattern(folder: str, quote: str) -> Pattern[str]:
    """``<quote>/<folder>/<rest><quote>`` on a single line."""
    return re.compile(
        quote + "(/" + re.escape(folder) + "/[^" + quote + r"\r\n]*)" + quote
    )


def _leading_context(text: str, position: int) -> str:
    """Text of the expression in front of ``position``, back to the nearest delimiter."""
    start = max(0, position - 256)
    for match in CONTEXT_DELIMITERS.finditer(text, start, position):
        start = match.end()
    return text[start:position]


class ScriptLiteralRewriter(AssetRewriter):
    """Prefixes asset-folder literals in script files with the project's base path."""

    def __init__(
        self,
        asset_folders: Optional[Iterable[str]] = None,
        script_extensions: Optional[Iterable[str]] = None,
    ):
        """Initialize the rewriter.

        Args:
            asset_folders: Folder names whose literals are rewritten (defaults to settings)
            script_extensions: Script suffixes to scan (defaults to settings)
        """
        self.asset_folders = list(asset_folders or settings.asset_folders)
        self._extensions = [ext.lower() for ext in (script_extensions or settings.script_extensions)]
        self._patterns: List[Pattern[str]] = [
            _literal_pattern(folder, quote)
            for folder in self.asset_folders
            for quote in QUOTES
        ]

    @property
    def extensions(self) -> Iterable[str]:
        return self._extensions

    def rewrite_text(self, text: str, base_path: str) -> Tuple[str, int]:
        prefix = base_path.rstrip("/")
        if not prefix:
            return text, 0

        total = 0
        for pattern in self._patterns:
            replaced = 0

            def substitute(match: "re.Match[str]") -> str:
                nonlocal replaced
                literal = match.group(1)
                before = _leading_context(match.string, match.start())
                if any(marker in before for marker in EXTERNAL_URL_MARKERS):
                    return match.group(0)
                if literal.startswith(base_path):
                    return match.group(0)
                replaced += 1
                quote = match.group(0)[0]
                return quote + prefix + literal + quote

            text = pattern.sub(substitute, text)
            total += replaced
        return text, total
