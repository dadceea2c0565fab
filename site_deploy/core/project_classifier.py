# site_deploy/core/project_classifier.py
"""Framework classification over a normalized manifest"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from ..models.project import ManifestFile, ProjectType

VITE_CONFIG_PATTERN = re.compile(r"(^|/)vite\.config\.(js|ts)$")
NEXT_CONFIG_PATTERN = re.compile(r"(^|/)next\.config\.(js|mjs|ts)$")
VUE_CONFIG_PATTERN = re.compile(r"(^|/)vue\.config\.js$")
CRA_FINGERPRINT = "react-scripts"


def _has_path(files: Sequence[ManifestFile], pattern: re.Pattern) -> bool:
    return any(pattern.search(f.path) for f in files)


def _get_root_file(files: Sequence[ManifestFile], name: str) -> Optional[ManifestFile]:
    for manifest_file in files:
        if manifest_file.path == name:
            return manifest_file
    return None


def _is_vite(files: Sequence[ManifestFile]) -> bool:
    return _has_path(files, VITE_CONFIG_PATTERN)


def _is_next(files: Sequence[ManifestFile]) -> bool:
    return _has_path(files, NEXT_CONFIG_PATTERN)


def _is_angular(files: Sequence[ManifestFile]) -> bool:
    return _get_root_file(files, "angular.json") is not None


def _is_vue(files: Sequence[ManifestFile]) -> bool:
    return _has_path(files, VUE_CONFIG_PATTERN)


def _is_cra(files: Sequence[ManifestFile]) -> bool:
    package_json = _get_root_file(files, "package.json")
    if package_json is None:
        return False
    if any(CRA_FINGERPRINT in f.path for f in files):
        return True
    return CRA_FINGERPRINT in package_json.read_text()


def _is_static(files: Sequence[ManifestFile]) -> bool:
    return _get_root_file(files, "index.html") is not None


def _is_node(files: Sequence[ManifestFile]) -> bool:
    return _get_root_file(files, "package.json") is not None


# First match wins. Signals overlap (a Vite project also carries a
# package.json), so reordering changes results.
CLASSIFICATION_RULES: Tuple[Tuple[ProjectType, Callable[[Sequence[ManifestFile]], bool]], ...] = (
    (ProjectType.VITE, _is_vite),
    (ProjectType.NEXTJS, _is_next),
    (ProjectType.ANGULAR, _is_angular),
    (ProjectType.VUE, _is_vue),
    (ProjectType.CRA, _is_cra),
    (ProjectType.STATIC_SITE, _is_static),
    (ProjectType.NODE_PROJECT, _is_node),
)


def classify_project(files: Sequence[ManifestFile]) -> ProjectType:
    """
    Label the framework of a project

    Args:
        files: Kept manifest files

    Returns:
        First matching ProjectType, or UNKNOWN
    """
    for project_type, matches in CLASSIFICATION_RULES:
        if matches(files):
            return project_type
    return ProjectType.UNKNOWN


@dataclass(frozen=True)
class BuildPreset:
    """How a framework is built in CI and where its output lands"""
    build_command: str
    output_dir: str  # may reference {target}

    def resolve_output_dir(self, target_name: str) -> str:
        return self.output_dir.format(target=target_name)


# Every ProjectType has an entry; None means "publish as is, no build".
BUILD_PRESETS: Dict[ProjectType, Optional[BuildPreset]] = {
    ProjectType.STATIC_SITE: None,
    ProjectType.UNKNOWN: None,
    ProjectType.NODE_PROJECT: BuildPreset("npm run build", "dist"),
    ProjectType.VITE: BuildPreset("npm run build", "dist"),
    ProjectType.CRA: BuildPreset("npm run build", "build"),
    ProjectType.NEXTJS: BuildPreset("npm run build", "out"),
    ProjectType.ANGULAR: BuildPreset("npm run build", "dist/{target}"),
    ProjectType.VUE: BuildPreset("npm run build", "dist"),
}

# Client-rendered apps that need a 404 page falling back to index.html
SPA_TYPES = frozenset({
    ProjectType.VITE,
    ProjectType.CRA,
    ProjectType.VUE,
    ProjectType.ANGULAR,
})


def get_build_preset(project_type: ProjectType) -> Optional[BuildPreset]:
    """Get the CI build preset of a project type"""
    return BUILD_PRESETS[project_type]
