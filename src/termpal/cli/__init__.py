"""Command-line interface."""

from termpal.cli.app import create_app

__all__ = ["create_app"]
