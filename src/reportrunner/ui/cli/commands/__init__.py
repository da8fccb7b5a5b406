"""CLI command implementations exposed via ``reportrunner.ui.cli``."""

from __future__ import annotations

from .render import render
from .targets import targets


__all__ = ["render", "targets"]
