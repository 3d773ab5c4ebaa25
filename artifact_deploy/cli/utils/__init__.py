"""CLI utility functions"""

from .output import (
    format_deploy_result,
    format_status,
    format_error,
)

__all__ = [
    'format_deploy_result',
    'format_status',
    'format_error',
]
