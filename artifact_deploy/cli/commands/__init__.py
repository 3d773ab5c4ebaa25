# artifact_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import deploy
from . import status

__all__ = [
    "deploy",
    "status",
]
