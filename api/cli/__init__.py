"""Command-line tooling for the cart document store."""

from .commands import create_parser, main, run_command

__all__ = ["create_parser", "main", "run_command"]
