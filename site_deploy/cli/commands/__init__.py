"""CLI commands"""

from . import analyze
from . import deploy

__all__ = [
    "analyze",
    "deploy",
]
