"""Progress and report display utilities for SharePoint Uploader (spupload)."""

import os

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from spupload.utils.helpers import format_size, truncate_path

console = Console()


class UploadReporter:
    """Prints the per-file lines of an upload run.

    Called from worker threads; rich's console serialises writes.
    """

    def __init__(self, show_progress=True, output=None):
        self.show_progress = show_progress
        self.console = output or console

    @staticmethod
    def _tag(file_name):
        return escape(f"[{file_name}]")

    def started(self, file_name):
        self.console.print(f"[cyan]{self._tag(file_name)}[/cyan] starting upload...")

    def progress(self, file_name, bytes_sent, total_size):
        """Print how much of a chunked upload has been sent so far."""
        if not self.show_progress or total_size <= 0:
            return
        percent = bytes_sent * 100 // total_size
        self.console.print(f"[cyan]{self._tag(file_name)}[/cyan] {percent}%")

    def finished(self, outcome):
        """Print the success or failure line for one file."""
        tag = self._tag(outcome.file_name)
        if outcome.ok:
            self.console.print(
                f"[green]✅ {tag} uploaded to {escape(outcome.web_url)}[/green]"
            )
            return

        self.console.print(
            f"[red]❌ {tag} failed to upload: {escape(outcome.reason or 'unknown error')}[/red]"
        )
        if outcome.raw_response:
            self.console.print(f"[dim]{escape(str(outcome.raw_response))}[/dim]")


def display_upload_plan(file_paths, config):
    """Display an upload plan showing what will be uploaded and how."""
    plan_table = Table(show_header=True, box=box.SIMPLE)
    plan_table.add_column("File", style="cyan")
    plan_table.add_column("Method", style="white")
    plan_table.add_column("Size", style="yellow")

    total_size = 0
    for file_path in file_paths:
        display_name = escape(truncate_path(os.path.basename(file_path), 50))
        try:
            size = os.path.getsize(file_path)
        except OSError:
            plan_table.add_row(display_name, "[red]⚠️ Unreadable[/red]", "-")
            continue

        total_size += size
        if size <= config.small_file_threshold:
            method = "📄 Single request"
        else:
            chunks = -(-size // config.chunk_size)
            method = f"📦 Upload session ({chunks} chunks)"
        plan_table.add_row(display_name, method, format_size(size))

    plan_table.add_row("", "", "")
    plan_table.add_row("[bold]TOTAL", "", f"[bold]{format_size(total_size)}")

    destination = "/".join(
        part for part in (config.site, config.drive, config.folder.strip("/")) if part
    )

    console.print("\n")
    console.print(
        Panel(
            plan_table,
            title=f"[bold green]📋 Upload Plan → {escape(destination)}[/bold green]",
            border_style="green",
        )
    )


def display_operation_summary(stats_obj):
    """Display a summary of the finished run."""
    stats = stats_obj.get_stats()
    duration = stats_obj.get_duration()
    success_rate = stats_obj.get_success_rate()
    transfer_speed = stats_obj.get_transfer_speed_mb_per_sec()

    summary_table = Table(show_header=False, box=box.SIMPLE, pad_edge=False)
    summary_table.add_column("Metric", style="bold cyan", width=25, no_wrap=True)
    summary_table.add_column("Value", style="white", no_wrap=True)

    summary_table.add_row("📁 Total Files", f"[bold]{stats['total_files']}[/bold]")
    summary_table.add_row(
        "✅ Successful Uploads",
        f"[bold green]{stats['successful_uploads']}[/bold green]",
    )
    summary_table.add_row(
        "❌ Failed Uploads", f"[bold red]{stats['failed_uploads']}[/bold red]"
    )
    summary_table.add_row(
        "📤 Data Uploaded",
        f"[bold green]{format_size(stats['uploaded_size'])}[/bold green]",
    )
    summary_table.add_row("🧩 Upload Sessions", f"{stats['sessions_created']}")
    summary_table.add_row("🧱 Chunks Sent", f"{stats['chunks_uploaded']}")
    summary_table.add_row("")
    summary_table.add_row("📊 Success Rate", f"[bold]{success_rate:.1f}%[/bold]")
    summary_table.add_row("💾 Total Size", f"[bold]{format_size(stats['total_size'])}[/bold]")
    summary_table.add_row("⏱️  Duration", f"[bold]{str(duration).split('.')[0]}[/bold]")
    summary_table.add_row("🚀 Speed", f"[bold]{transfer_speed:.2f} MB/s[/bold]")

    if success_rate == 100:
        panel_style = "green"
        title_icon = "🎉"
    elif success_rate >= 80:
        panel_style = "yellow"
        title_icon = "⚠️"
    else:
        panel_style = "red"
        title_icon = "❌"

    console.print("\n")
    console.print(
        Panel(
            summary_table,
            title=f"[bold]{title_icon} Upload Summary[/bold]",
            border_style=panel_style,
            padding=(1, 2),
        )
    )
