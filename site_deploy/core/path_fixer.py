"""Rewrite root-absolute asset references to relative ones"""

import logging
import re
from typing import Tuple

from ..constants import SCANNABLE_EXTENSIONS, TEXT_SCAN_LIMIT
from ..models.project import ManifestFile, ProjectAnalysis
from .issue_detector import ABSOLUTE_PATH_WARNING

logger = logging.getLogger(__name__)

ABSOLUTE_REF_PATTERN = re.compile(r"""(src|href)=(["'])/(?!/)([^"']*)["']""", re.IGNORECASE)


def rewrite_absolute_refs(content: str) -> Tuple[str, int]:
    """
    Turn src="/x" and href="/x" into src="./x", keeping the quote style

    Returns:
        Tuple of (new content, number of replacements)
    """
    return ABSOLUTE_REF_PATTERN.subn(r"\1=\2./\3\2", content)


def fix_absolute_paths(analysis: ProjectAnalysis) -> ProjectAnalysis:
    """
    Produce a new analysis with absolute references made relative

    HTML/CSS/JS files up to 1MB are rewritten; sizes follow the new
    content and the absolute-path warning is dropped. The given
    analysis is left untouched.

    Args:
        analysis: Analysis to fix

    Returns:
        New ProjectAnalysis
    """
    fixed_files = []
    fixed_count = 0

    for manifest_file in analysis.manifest:
        if not manifest_file.path.lower().endswith(SCANNABLE_EXTENSIONS) or manifest_file.size > TEXT_SCAN_LIMIT:
            fixed_files.append(manifest_file)
            continue

        content, replacements = rewrite_absolute_refs(manifest_file.read_text())
        if replacements:
            fixed_files.append(ManifestFile.from_bytes(manifest_file.path, content.encode("utf-8")))
            fixed_count += 1
        else:
            fixed_files.append(manifest_file)

    logger.info(f"Rewrote absolute paths in {fixed_count} file(s)")

    return analysis.evolve(
        manifest=tuple(fixed_files),
        warnings=tuple(w for w in analysis.warnings if w != ABSOLUTE_PATH_WARNING),
    )
