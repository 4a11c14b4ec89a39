"""Base asset rewriter interface.

A rewriter post-processes a built project's output in place so that
root-relative references keep working once the output is served from the
project's base path.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class RewriteReport:
    """What a rewrite pass did to a build output."""
    files_scanned: int = 0
    files_changed: int = 0
    replacements: int = 0
    failures: List[Path] = field(default_factory=list)

    def merge(self, other: "RewriteReport") -> "RewriteReport":
        return RewriteReport(
            files_scanned=self.files_scanned + other.files_scanned,
            files_changed=self.files_changed + other.files_changed,
            replacements=self.replacements + other.replacements,
            failures=self.failures + other.failures,
        )


class AssetRewriter(ABC):
    """Abstract base class for asset reference rewriters."""

    @property
    @abstractmethod
    def extensions(self) -> Iterable[str]:
        """File suffixes (with dot, lower case) this rewriter processes."""
        pass

    @abstractmethod
    def rewrite_text(self, text: str, base_path: str) -> Tuple[str, int]:
        """Rewrite one file's content.

        Args:
            text: File content
            base_path: Normalized base path of the project (``/name/``)

        Returns:
            The new content and the number of replacements made
        """
        pass

    def iter_files(self, output_dir: Path) -> List[Path]:
        """Files under ``output_dir`` this rewriter applies to, in stable order."""
        suffixes = {suffix.lower() for suffix in self.extensions}
        return sorted(
            path for path in Path(output_dir).rglob("*")
            if path.is_file() and path.suffix.lower() in suffixes
        )

    def rewrite_tree(self, output_dir: Path, base_path: str) -> RewriteReport:
        """Rewrite every matching file under ``output_dir`` in place.

        Best-effort: a file that cannot be read, decoded or written is logged
        and left as it was.
        """
        report = RewriteReport()
        if base_path.rstrip("/") == "":
            return report

        for path in self.iter_files(output_dir):
            report.files_scanned += 1
            count = rewrite_file(path, lambda text: self.rewrite_text(text, base_path))
            if count is None:
                report.failures.append(path)
            elif count:
                report.files_changed += 1
                report.replacements += count
        return report


def rewrite_file(path: Path, transform: Callable[[str], Tuple[str, int]]) -> Optional[int]:
    """Apply ``transform`` to a UTF-8 file, writing only if something changed.

    Returns:
        Number of replacements, or None when the file could not be processed.
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s for rewriting: %s", path, e)
        return None

    new_text, count = transform(text)
    if count == 0:
        return 0

    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(new_text)
    except OSError as e:
        logger.warning("Could not write rewritten %s: %s", path, e)
        return None
    return count


class CompositeRewriter(AssetRewriter):
    """Runs several rewriters over the same output and sums their reports."""

    def __init__(self, rewriters: Iterable[AssetRewriter]):
        self.rewriters = list(rewriters)

    @property
    def extensions(self) -> Iterable[str]:
        suffixes = set()
        for rewriter in self.rewriters:
            suffixes.update(suffix.lower() for suffix in rewriter.extensions)
        return suffixes

    def rewrite_text(self, text: str, base_path: str) -> Tuple[str, int]:
        total = 0
        for rewriter in self.rewriters:
            text, count = rewriter.rewrite_text(text, base_path)
            total += count
        return text, total

    def rewrite_tree(self, output_dir: Path, base_path: str) -> RewriteReport:
        report = RewriteReport()
        for rewriter in self.rewriters:
            report = report.merge(rewriter.rewrite_tree(output_dir, base_path))
        return report
