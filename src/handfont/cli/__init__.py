"""Command-line interface for handfont.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- build: font from a directory of per-character images
- sheet: font from a template sheet (vision model or fixed grid)
- Progress bars for character tracing
- Verbose/quiet output modes
"""

from handfont.cli.app import app, cli, main

__all__ = ["app", "cli", "main"]
