"""Telemetry scaffolds.

This package emits deterministic run events for diagnostics.
"""

from .logger import RunLogger, detach_default_handlers

__all__ = ["RunLogger", "detach_default_handlers"]
