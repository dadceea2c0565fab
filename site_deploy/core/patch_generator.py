# site_deploy/core/patch_generator.py
"""Patch generation for making uploaded projects deployable.

Generation is an ordered pipeline. Every step takes the patches produced
so far and returns a new tuple; steps never mutate patches in place.
The 404-fallback step rewrites the workflow patch created by the first
step, so it must run after it.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..constants import WORKFLOW_PATH
from ..models.patch import Patch
from ..models.project import ManifestFile, ProjectAnalysis, ProjectType
from ..utils.template_utils import render_builtin
from .project_classifier import (
    NEXT_CONFIG_PATTERN,
    SPA_TYPES,
    VITE_CONFIG_PATTERN,
    BuildPreset,
    get_build_preset,
)

logger = logging.getLogger(__name__)

Patches = Tuple[Patch, ...]

UPLOAD_STEP_ANCHOR = "      - name: Upload artifact"
FALLBACK_STEP = (
    "      - name: Create 404 fallback\n"
    "        run: cp {output}/index.html {output}/404.html || true\n"
)

VITE_CONFIG_ANCHOR = "defineConfig({"
# Literal forms the next.config injection understands, tried in order
NEXT_CONFIG_ANCHORS = ("nextConfig = {", "module.exports = {", "export default {")
NEXT_EXPORT_MARKERS = ("output: 'export'", 'output: "export"')


@dataclass(frozen=True)
class PatchContext:
    """Inputs shared by every generation step"""
    analysis: ProjectAnalysis
    target_name: str

    @property
    def project_type(self) -> ProjectType:
        return self.analysis.project_type

    @property
    def preset(self) -> Optional[BuildPreset]:
        return get_build_preset(self.project_type)

    @property
    def output_dir(self) -> Optional[str]:
        preset = self.preset
        return preset.resolve_output_dir(self.target_name) if preset else None

    @property
    def base_path(self) -> str:
        return f"/{self.target_name}/"

    def find_file(self, pattern: re.Pattern) -> Optional[ManifestFile]:
        for manifest_file in self.analysis.manifest:
            if pattern.search(manifest_file.path):
                return manifest_file
        return None


def add_workflow(ctx: PatchContext, patches: Patches) -> Patches:
    """Add a CI build-and-publish workflow for buildable project types"""
    preset = ctx.preset
    if preset is None:
        return patches

    content = render_builtin(
        "workflows", "github-pages.yml",
        build_command=preset.build_command,
        output_dir=ctx.output_dir,
    )
    return patches + (Patch(
        path=WORKFLOW_PATH,
        content=content,
        description=f"Create GitHub Actions workflow for {ctx.project_type.value}",
    ),)


def configure_vite_base(ctx: PatchContext, patches: Patches) -> Patches:
    """Set Vite's base path to the repository path"""
    if ctx.project_type != ProjectType.VITE:
        return patches

    config_file = ctx.find_file(VITE_CONFIG_PATTERN)
    if config_file is None:
        return patches + (Patch(
            path="vite.config.js",
            content=render_builtin("config", "vite.config.js", base_path=ctx.base_path),
            description="Create vite.config.js with correct base path",
        ),)

    content = config_file.read_text()
    if "base:" in content:
        return patches

    if VITE_CONFIG_ANCHOR not in content:
        logger.warning(
            f"{config_file.path} does not contain '{VITE_CONFIG_ANCHOR}'; "
            "base path not injected, set it manually"
        )
        return patches

    content = content.replace(
        VITE_CONFIG_ANCHOR, f'{VITE_CONFIG_ANCHOR}\n  base: "{ctx.base_path}",', 1
    )
    return patches + (Patch(
        path=config_file.path,
        content=content,
        description=f'Update vite.config to set base path to "{ctx.base_path}"',
    ),)


def enable_next_export(ctx: PatchContext, patches: Patches) -> Patches:
    """Turn on Next.js static export in an existing config"""
    if ctx.project_type != ProjectType.NEXTJS:
        return patches

    config_file = ctx.find_file(NEXT_CONFIG_PATTERN)
    if config_file is None:
        return patches

    content = config_file.read_text()
    if any(marker in content for marker in NEXT_EXPORT_MARKERS):
        return patches

    anchor = next((a for a in NEXT_CONFIG_ANCHORS if a in content), None)
    if anchor is None:
        logger.warning(
            f"{config_file.path} has no recognizable config object; "
            "static export not enabled, add output: 'export' manually"
        )
        return patches

    content = content.replace(anchor, f"{anchor}\n  output: 'export',", 1)
    return patches + (Patch(
        path=config_file.path,
        content=content,
        description="Update next.config to enable static export",
    ),)


def add_spa_fallback(ctx: PatchContext, patches: Patches) -> Patches:
    """Insert a 404.html copy step before the workflow's artifact upload"""
    if ctx.project_type not in SPA_TYPES:
        return patches

    step = FALLBACK_STEP.format(output=ctx.output_dir)

    def rewrite(patch: Patch) -> Patch:
        if patch.path != WORKFLOW_PATH or UPLOAD_STEP_ANCHOR not in patch.content:
            return patch
        return patch.with_content(
            patch.content.replace(UPLOAD_STEP_ANCHOR, step + UPLOAD_STEP_ANCHOR, 1)
        )

    return tuple(rewrite(patch) for patch in patches)


GENERATION_STEPS: Tuple[Callable[[PatchContext, Patches], Patches], ...] = (
    add_workflow,
    configure_vite_base,
    enable_next_export,
    add_spa_fallback,
)


def generate_patches(analysis: ProjectAnalysis, target_name: str) -> List[Patch]:
    """
    Generate the patches that make a project deployable

    Args:
        analysis: Classified project analysis
        target_name: Repository or site name used in derived paths

    Returns:
        Ordered list of patches
    """
    ctx = PatchContext(analysis=analysis, target_name=target_name)
    patches: Patches = ()

    for step in GENERATION_STEPS:
        patches = step(ctx, patches)

    logger.debug(f"Generated {len(patches)} patch(es) for {analysis.project_type.value}")
    return list(patches)
