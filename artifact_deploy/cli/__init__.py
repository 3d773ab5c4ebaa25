"""Command line interface for artifact-deploy"""

from .main import cli, main

__all__ = ["cli", "main"]
