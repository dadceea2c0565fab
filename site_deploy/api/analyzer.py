"""Analyzer API for project analysis"""

import asyncio
import logging
from pathlib import Path
from typing import Union

from ..core.archive_ingestor import ingest_archive, load_upload
from ..core.issue_detector import detect_issues
from ..core.path_fixer import fix_absolute_paths
from ..core.project_classifier import classify_project
from ..models.project import ProjectAnalysis, ProjectType
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

INVALID_PROJECT_MESSAGE = "Invalid project: must contain 'index.html' or 'package.json' at the root."
ENTRY_FILES = ("index.html", "package.json")


def analyze_archive(data: bytes, fix_paths: bool = False) -> ProjectAnalysis:
    """
    Analyze an uploaded zip archive

    Args:
        data: Archive bytes
        fix_paths: Rewrite root-absolute asset references afterwards

    Returns:
        ProjectAnalysis

    Raises:
        CorruptArchiveError: If the archive cannot be read
    """
    ingested = ingest_archive(data)
    project_type = classify_project(ingested.manifest)
    warnings = detect_issues(
        ingested.manifest,
        project_type,
        index_html=ingested.index_html,
        text_assets=ingested.text_assets,
    )

    analysis = ProjectAnalysis(
        manifest=ingested.manifest,
        ignored=ingested.ignored,
        project_type=project_type,
        warnings=warnings,
        root_prefix=ingested.root_prefix,
    )
    logger.info(f"Classified upload as {project_type.value} with {len(warnings)} warning(s)")

    if fix_paths:
        analysis = fix_absolute_paths(analysis)
    return analysis


def validate_upload(analysis: ProjectAnalysis) -> None:
    """
    Reject uploads that cannot be a web project

    An unclassified upload must at least carry an index.html or
    package.json at the root or one folder deep.

    Raises:
        ValidationError: If the upload is not deployable
    """
    if analysis.project_type != ProjectType.UNKNOWN:
        return

    for path in analysis.paths:
        if path.rsplit("/", 1)[-1] in ENTRY_FILES and path.count("/") <= 1:
            return

    raise ValidationError(INVALID_PROJECT_MESSAGE)


async def analyze_path(path: Union[str, Path],
                       fix_paths: bool = False,
                       validate: bool = True) -> ProjectAnalysis:
    """
    Analyze a zip file or project folder

    Args:
        path: Zip file or folder
        fix_paths: Rewrite root-absolute asset references
        validate: Reject uploads that are not web projects

    Returns:
        ProjectAnalysis

    Raises:
        ValidationError: If the upload is rejected
        CorruptArchiveError: If the archive cannot be read
    """
    data = await load_upload(Path(path))
    analysis = analyze_archive(data, fix_paths=fix_paths)
    if validate:
        validate_upload(analysis)
    return analysis


def analyze(path: Union[str, Path], **options) -> ProjectAnalysis:
    """
    Analyze a zip file or project folder

    This is a convenience function for synchronous callers.

    Args:
        path: Zip file or folder
        **options: See analyze_path

    Returns:
        ProjectAnalysis
    """
    return asyncio.run(analyze_path(path, **options))
