"""Merger module: relocating build outputs into the shared output tree."""

from .artifact_merger import destination_for, has_build_output, merge_project, mirror_output_tree

__all__ = [
    "destination_for",
    "has_build_output",
    "merge_project",
    "mirror_output_tree",
]
