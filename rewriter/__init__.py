"""Asset path rewriting for relocated build outputs."""

from typing import Iterable, Optional

from .base import AssetRewriter, CompositeRewriter, RewriteReport, rewrite_file
from .script_literals import ScriptLiteralRewriter
from .html_attributes import HtmlAttributeRewriter


def default_rewriter(asset_folders: Optional[Iterable[str]] = None) -> AssetRewriter:
    """Script literal rewriting followed by HTML attribute rewriting."""
    return CompositeRewriter([
        ScriptLiteralRewriter(asset_folders=asset_folders),
        HtmlAttributeRewriter(),
    ])


__all__ = [
    "AssetRewriter",
    "CompositeRewriter",
    "RewriteReport",
    "rewrite_file",
    "ScriptLiteralRewriter",
    "HtmlAttributeRewriter",
    "default_rewriter",
]
