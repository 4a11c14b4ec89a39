"""Orchestrator module for Bundle Forge build execution."""

from .command_runner import CommandRunner
from .build_manager import (
    BuildManager,
    PipelineResult,
    prepare_output_root,
    run_pipeline,
)

__all__ = [
    "CommandRunner",
    "BuildManager",
    "PipelineResult",
    "prepare_output_root",
    "run_pipeline",
]
