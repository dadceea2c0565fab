"""CLI utility functions"""

from .output import (
    console,
    format_analysis,
    format_deploy_result,
    print_error,
    print_event,
    print_warning,
)

__all__ = [
    'console',
    'format_analysis',
    'format_deploy_result',
    'print_error',
    'print_event',
    'print_warning',
]
