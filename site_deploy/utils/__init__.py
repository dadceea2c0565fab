"""Utility functions for site-deploy-tool"""

from .async_utils import run_async, retry_async, run_in_batches
from .hash_utils import calculate_content_hash, FileHashIndex
from .formatting import format_size, format_duration, format_path

__all__ = [
    "run_async",
    "retry_async",
    "run_in_batches",
    "calculate_content_hash",
    "FileHashIndex",
    "format_size",
    "format_duration",
    "format_path",
]
