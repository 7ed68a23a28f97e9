"""Shared console for CLI output."""

from __future__ import annotations

from rich.console import Console

console = Console()
