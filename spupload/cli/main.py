"""Command Line Interface for SharePoint Uploader (spupload)."""

import argparse
import socket
import sys
from urllib.parse import urlparse

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from spupload import __version__
from spupload.core.client import GraphClient
from spupload.core.config import (
    CHUNK_SIZE,
    DEFAULT_DRIVE,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_DOMAIN,
    ENV_SITE,
    ENV_TENANT_ID,
    MAX_WORKERS,
    MIN_WORKERS,
    UploadConfig,
)
from spupload.core.errors import (
    AuthError,
    ConfigurationError,
    PreconditionError,
    ResolutionError,
)
from spupload.services.upload import SharePointUploader, UploadDispatcher
from spupload.utils.helpers import split_valid_files
from spupload.utils.progress import (
    UploadReporter,
    display_operation_summary,
    display_upload_plan,
)

console = Console()

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_UPLOAD_FAILED = 2


def display_header():
    """Display the application header."""
    console.print("\n")
    console.print(
        Panel(
            "[bold blue]SharePoint Uploader (spupload)[/bold blue]\n"
            "[dim]Upload files to SharePoint document libraries via Microsoft Graph[/dim]",
            border_style="blue",
            padding=(1, 2),
        )
    )


def check_network(config, timeout=5):
    """Return True when the Graph endpoint accepts TCP connections."""
    host = urlparse(config.graph_endpoint).hostname or "graph.microsoft.com"
    try:
        with socket.create_connection((host, 443), timeout=timeout):
            return True
    except OSError:
        return False


def build_config(args, environ=None):
    """Build the run configuration from the environment and CLI flags."""
    return UploadConfig.from_env(
        environ,
        folder=args.folder,
        drive=args.drive,
        chunk_size=args.chunk_size,
        max_workers=args.max_workers,
        verbose=args.verbose or None,
    )


def run_preflight_checks(args, environ=None):
    """
    Run pre-flight checks before any upload.

    Returns the validated configuration and the list of files to upload.

    Raises:
        PreconditionError: if the configuration is invalid, no file can be
            uploaded, or Graph is unreachable.
    """
    console.print("\n")
    console.print("[bold cyan]🔍 Running Pre-flight Checks...[/bold cyan]")

    checks_table = Table(show_header=False, box=box.SIMPLE)
    checks_table.add_column("Check", style="white", width=40)
    checks_table.add_column("Status", style="white", width=15)

    config = None
    config_error = None
    try:
        config = build_config(args, environ).validate()
    except ConfigurationError as e:
        config_error = e
    checks_table.add_row(
        "Configuration",
        "✅ [green]PASS[/green]" if config_error is None else "❌ [red]FAIL[/red]",
    )

    files, rejected = split_valid_files(args.files)
    for path, kind in rejected:
        if kind is None:
            console.print(f"⚠️ [yellow]Warning: File not found: {escape(path)}")
        else:
            console.print(f"⚠️ [yellow]Warning: '{escape(path)}' is a {kind}, skipping.")
    checks_table.add_row(
        f"Files ({len(files)} of {len(args.files)} usable)",
        "✅ [green]PASS[/green]" if files else "❌ [red]FAIL[/red]",
    )

    network_ok = None
    if config is not None and files and not args.skip_network_check:
        network_ok = check_network(config)
        checks_table.add_row(
            "Network Connectivity",
            "✅ [green]PASS[/green]" if network_ok else "❌ [red]FAIL[/red]",
        )

    console.print(
        Panel(checks_table, title="[bold]🔧 System Checks[/bold]", border_style="cyan")
    )

    if config_error is not None:
        raise config_error
    if not files:
        raise PreconditionError("No valid files to upload")
    if network_ok is False:
        raise PreconditionError(
            "Cannot connect to Microsoft Graph API. Please check your internet connection."
        )
    return config, files


def report_fatal(error):
    """Print a run-scoped error with any raw server payload."""
    console.print(f"\n❌ [bold red]ERROR: {escape(error.message)}")
    if isinstance(error, ConfigurationError) and error.missing:
        for name in error.missing:
            console.print(f"[red]  - {name}")
        console.print(
            "\n[yellow]Please set these environment variables before running spupload."
        )
    if error.raw_response:
        console.print(f"[dim]{escape(str(error.raw_response))}[/dim]")


def handle_upload(args, config, files):
    """Resolve the destination, upload every file and return the exit status."""
    client = GraphClient(config)

    try:
        client.auth.get_access_token()
        drive = client.resolve_destination()
    except (AuthError, ResolutionError) as e:
        report_fatal(e)
        return EXIT_FATAL

    if not args.no_summary:
        display_upload_plan(files, config)

    uploader = SharePointUploader(client, UploadReporter(show_progress=not args.no_progress))
    outcomes = UploadDispatcher(uploader, max_workers=config.max_workers).dispatch(
        drive, files
    )

    if not args.no_summary:
        display_operation_summary(client.stats)

    failed = [outcome for outcome in outcomes if not outcome.ok]
    if failed and args.fail_on_error:
        return EXIT_UPLOAD_FAILED
    return EXIT_OK


def create_argument_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="spupload",
        description="SharePoint Uploader (spupload) - Upload files to a SharePoint document library using app-only authentication.",
        epilog=f"""
        Credentials and the destination site are read from the environment:
        {ENV_CLIENT_ID}, {ENV_CLIENT_SECRET}, {ENV_TENANT_ID}, {ENV_DOMAIN}
        and {ENV_SITE}. The application needs the 'Sites.ReadWrite.All'
        Application Permission in Azure AD with admin consent.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="+",
        help="The local files to upload.",
    )
    parser.add_argument(
        "-f",
        "--folder",
        default=None,
        help="Destination folder inside the drive (overrides MS_GRAPH_FOLDER).",
    )
    parser.add_argument(
        "-d",
        "--drive",
        default=None,
        help=f"Document library name (overrides MS_GRAPH_DRIVE, default '{DEFAULT_DRIVE}').",
    )
    parser.add_argument(
        "-c",
        "--chunk-size",
        type=int,
        default=None,
        help=f"The chunk size for large file uploads in bytes. Default is {CHUNK_SIZE} bytes.",
    )
    parser.add_argument(
        "-w",
        "--max-workers",
        type=int,
        default=None,
        help=f"Maximum number of concurrent uploads ({MIN_WORKERS}-{MAX_WORKERS}). Default is one per file.",
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Do not print chunk progress lines."
    )
    parser.add_argument(
        "--no-summary",
        action="store_true",
        help="Do not print the upload plan and summary panels.",
    )
    parser.add_argument(
        "--fail-on-error",
        action="store_true",
        help=f"Exit with status {EXIT_UPLOAD_FAILED} when any file fails to upload.",
    )
    parser.add_argument(
        "--skip-network-check",
        action="store_true",
        help="Skip the Graph connectivity pre-flight check.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug output.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(argv=None, environ=None):
    """Parse arguments, run the upload and return the exit status."""
    display_header()

    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config, files = run_preflight_checks(args, environ)
    except PreconditionError as e:
        report_fatal(e)
        return EXIT_FATAL

    try:
        return handle_upload(args, config, files)
    except Exception as e:
        console.print(f"\n❌ [bold red]An unexpected error occurred: {escape(str(e))}")
        return EXIT_FATAL


def main():
    """Main function to handle command-line arguments and execute the upload."""
    sys.exit(run())


if __name__ == "__main__":
    main()
