# site_deploy/cli/main.py
"""Main CLI entry point for site-deploy"""

import logging
import sys

import click
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT
from .commands import analyze, deploy
from .utils.output import console


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class Context:
    """CLI context object"""

    def __init__(self, verbose: bool = False, debug: bool = False):
        self.verbose = verbose
        self.debug = debug


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.pass_context
def cli(ctx, verbose, debug, quiet):
    """Site Deploy - Publish static sites and front-end projects

    Analyzes a zip file or project folder, detects the framework, fixes
    common GitHub Pages pitfalls and deploys to GitHub Pages or Firebase
    Hosting.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(verbose=verbose, debug=debug)


# Register commands
cli.add_command(analyze.analyze)
cli.add_command(deploy.deploy)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Auto-help for incomplete commands
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        # Handle help for incomplete commands
        if len(sys.argv) == 2 and sys.argv[1] not in [
            '-h', '--help', '--version', '-v', '--verbose', '-d', '--debug', '-q', '--quiet'
        ]:
            # If only command name provided, show its help
            sys.argv.append('--help')

        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
