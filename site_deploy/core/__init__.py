"""Core functionality for site-deploy-tool"""

from .archive_ingestor import IngestResult, ingest_archive, load_upload, pack_directory
from .project_classifier import BuildPreset, classify_project, get_build_preset
from .issue_detector import detect_issues
from .path_fixer import fix_absolute_paths
from .patch_generator import generate_patches

__all__ = [
    "IngestResult",
    "ingest_archive",
    "load_upload",
    "pack_directory",
    "BuildPreset",
    "classify_project",
    "get_build_preset",
    "detect_issues",
    "fix_absolute_paths",
    "generate_patches",
]
