"""Analyze command implementation"""

import json
import re
import sys
from pathlib import Path

import click

from ..utils.output import console, format_analysis, print_error
from ...api.analyzer import analyze_path
from ...api.exceptions import DeployToolError
from ...core.patch_generator import generate_patches
from ...utils.async_utils import run_async


def default_target_name(path: Path) -> str:
    """Derive a repository-safe name from a zip file or folder name"""
    name = path.stem if path.is_file() else path.resolve().name
    return re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip("-") or "site"


@click.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.option('--target', help='Repository or site name used for derived paths')
@click.option('--fix-paths', is_flag=True, help='Rewrite absolute src/href paths to relative ones')
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
def analyze(path, target, fix_paths, as_json):
    """Analyze a zip file or project folder

    Detects the framework, lists ignored files, reports common upload
    mistakes and shows the auto-fixes a GitHub Pages deploy would apply.

    Examples:

        # Analyze a zip file
        site-deploy analyze site.zip

        # Analyze a folder and preview fixes for repository "blog"
        site-deploy analyze ./dist --target blog --fix-paths
    """
    try:
        analysis = run_async(analyze_path(path, fix_paths=fix_paths))
    except DeployToolError as e:
        print_error("Analysis failed", e)
        sys.exit(1)

    target = target or default_target_name(path)
    patches = generate_patches(analysis, target)

    if as_json:
        report = analysis.to_dict()
        report["target"] = target
        report["patches"] = [p.to_dict() for p in patches]
        click.echo(json.dumps(report, indent=2))
        return

    format_analysis(analysis, patches, target)
    if not analysis.warnings:
        console.print("\n[green]No issues found.[/green]")
