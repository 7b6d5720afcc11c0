"""Command line interface for tracegraph."""

from .main import build_parser, main

__all__ = ["build_parser", "main"]
