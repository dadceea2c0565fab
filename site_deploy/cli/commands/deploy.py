"""Deploy command implementation"""

import sys
from pathlib import Path

import click

from ..utils.output import console, format_deploy_result, print_error, print_event, print_warning
from ...api import Deployer
from ...api.analyzer import analyze_path
from ...api.exceptions import DeployToolError
from ...constants import EMOJI_ROCKET, Provider
from ...services import ConfigService
from ...utils.async_utils import run_async


@click.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.option('--provider', required=True,
              type=click.Choice([p.value for p in Provider]),
              help='Hosting provider')
@click.option('--target', required=True, help='Repository name (github) or site ID (firebase)')
@click.option('--token', help='Access token (defaults to config file or environment)')
@click.option('--description', help='Repository description')
@click.option('--private', is_flag=True, help='Create a private repository')
@click.option('--domain', help='Custom domain written to CNAME (github)')
@click.option('--fix-paths', is_flag=True, help='Rewrite absolute src/href paths to relative ones')
@click.option('--no-patches', is_flag=True, help='Do not apply auto-fixes')
@click.option('--config', 'config_path', type=click.Path(path_type=Path),
              help='Configuration file (default: .site-deploy.yaml)')
def deploy(path, provider, target, token, description, private, domain,
           fix_paths, no_patches, config_path):
    """Deploy a zip file or project folder

    Publishes the upload as a single commit to a GitHub repository with
    Pages enabled, or as a new Firebase Hosting version.

    Examples:

        # Deploy to GitHub Pages (token from GITHUB_TOKEN)
        site-deploy deploy site.zip --provider github --target my-site

        # Deploy to Firebase Hosting
        site-deploy deploy ./dist --provider firebase --target my-project
    """
    provider = Provider(provider)

    try:
        service = ConfigService(config_path=config_path)
        token = service.resolve_token(provider, token)
        analysis = run_async(analyze_path(path, fix_paths=fix_paths))
    except DeployToolError as e:
        print_error("Deployment aborted", e)
        sys.exit(1)

    for warning in analysis.warnings:
        print_warning(warning)

    console.print(
        f"{EMOJI_ROCKET} Deploying [bold]{analysis.project_type.value}[/bold] "
        f"to [cyan]{provider.value}[/cyan]:[bold]{target}[/bold]"
    )

    deployer = Deployer(service.config)
    result = run_async(deployer.deploy_analysis(
        provider,
        analysis,
        target,
        token,
        description=description,
        private=private,
        custom_domain=domain,
        apply_patches=not no_patches,
        sink=print_event,
    ))

    format_deploy_result(result)
    if not result.is_success:
        sys.exit(1)
