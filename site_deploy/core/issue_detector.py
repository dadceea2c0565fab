# site_deploy/core/issue_detector.py
"""Structural checks that produce human-readable warnings"""

import re
from typing import Iterable, List, Mapping, Optional, Sequence

from ..constants import BUILD_OUTPUT_DIRS
from ..models.project import ManifestFile, ProjectType, unique_in_order

ABSOLUTE_PATH_PATTERN = re.compile(r"""(href|src)=["']/(?!/)[^"']*["']""", re.IGNORECASE)
ASSET_REF_PATTERN = re.compile(r"""(?:src|href)=["']([^"']+)["']""")
URL_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")

ABSOLUTE_PATH_WARNING = (
    'Absolute paths detected (e.g., src="/script.js"). This breaks GitHub Pages.'
)
MISSING_ASSET_WARNING = "Missing asset referenced in index.html: '{ref}'"
SOURCE_WITH_BUILD_WARNING = (
    "Found 'package.json' and 'dist/build' folder. You likely uploaded the source code. "
    "Please upload ONLY the contents of the 'dist' or 'build' folder."
)
SOURCE_WITHOUT_BUILD_WARNING = (
    "Detected 'package.json' but no 'index.html' at root. Are you uploading source code? "
    "You must build your project first (npm run build) and upload the output folder."
)
NESTED_INDEX_WARNING = (
    "'index.html' found at '{path}'. It must be at the root level. "
    "Please unzip, go into the folder, and zip the CONTENTS."
)
NO_INDEX_WARNING = "No 'index.html' found. Your site will not load."


def has_absolute_paths(text_assets: Mapping[str, str]) -> bool:
    """Check whether any scanned asset uses root-absolute src/href values"""
    return any(ABSOLUTE_PATH_PATTERN.search(text) for text in text_assets.values())


def extract_asset_refs(html: str) -> List[str]:
    """
    Extract local asset references from an HTML page

    External URLs, protocol-relative URLs, fragments and root-absolute
    references are skipped; './' prefixes and query/fragment suffixes
    are stripped.

    Args:
        html: Page content

    Returns:
        Normalized references in document order
    """
    refs = []
    for match in ASSET_REF_PATTERN.finditer(html):
        ref = match.group(1).strip()
        if ref.startswith(("//", "#", "/")) or URL_SCHEME_PATTERN.match(ref):
            continue
        ref = ref.split("?")[0].split("#")[0]
        if ref.startswith("./"):
            ref = ref[2:]
        if ref:
            refs.append(ref)
    return refs


def find_missing_assets(html: str, paths: Iterable[str]) -> List[str]:
    """Return references of an HTML page that no manifest file satisfies"""
    existing = set(paths)
    return unique_in_order(ref for ref in extract_asset_refs(html) if ref not in existing)


def check_upload_root(files: Sequence[ManifestFile], project_type: ProjectType) -> List[str]:
    """
    Warn when the upload looks like source code or a wrapped folder

    Args:
        files: Kept manifest files
        project_type: Classification result

    Returns:
        Warning messages
    """
    paths = [f.path for f in files]
    has_index = "index.html" in paths
    has_package = "package.json" in paths
    warnings = []

    # Nothing framework-specific matched and there is no page to serve
    if project_type in (ProjectType.UNKNOWN, ProjectType.NODE_PROJECT) and has_package and not has_index:
        if any(p.startswith(BUILD_OUTPUT_DIRS) for p in paths):
            warnings.append(SOURCE_WITH_BUILD_WARNING)
        else:
            warnings.append(SOURCE_WITHOUT_BUILD_WARNING)

    if project_type == ProjectType.UNKNOWN and not has_index and not has_package:
        nested = next((p for p in paths if p.endswith("/index.html")), None)
        if nested:
            warnings.append(NESTED_INDEX_WARNING.format(path=nested))
        else:
            warnings.append(NO_INDEX_WARNING)

    return warnings


def detect_issues(files: Sequence[ManifestFile],
                  project_type: ProjectType,
                  index_html: Optional[str] = None,
                  text_assets: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Run every structural check

    Each distinct warning appears once, however many files trigger it.

    Args:
        files: Kept manifest files
        project_type: Classification result
        index_html: Captured root index.html content
        text_assets: Captured HTML/CSS/JS content by path

    Returns:
        De-duplicated warning messages
    """
    warnings = []

    if text_assets and has_absolute_paths(text_assets):
        warnings.append(ABSOLUTE_PATH_WARNING)

    if index_html:
        for ref in find_missing_assets(index_html, (f.path for f in files)):
            warnings.append(MISSING_ASSET_WARNING.format(ref=ref))

    warnings.extend(check_upload_root(files, project_type))

    return unique_in_order(warnings)
