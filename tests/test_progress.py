"""Tests for the upload reporter and helpers."""

from unittest.mock import Mock, patch

from spupload.core.config import UploadConfig
from spupload.core.errors import SessionCreationError
from spupload.models.upload import UploadOutcome
from spupload.utils.helpers import format_size, split_valid_files, truncate_path
from spupload.utils import progress
from spupload.utils.progress import UploadReporter, display_upload_plan


def lines(reporter):
    return [call.args[0] for call in reporter.console.print.call_args_list]


def test_progress_lines_are_percentages():
    reporter = UploadReporter(output=Mock())

    reporter.progress("big.bin", 0, 26214400)
    reporter.progress("big.bin", 10485760, 26214400)

    assert lines(reporter) == [
        "[cyan]\\[big.bin][/cyan] 0%",
        "[cyan]\\[big.bin][/cyan] 40%",
    ]


def test_progress_can_be_silenced():
    reporter = UploadReporter(show_progress=False, output=Mock())

    reporter.progress("big.bin", 0, 100)

    reporter.console.print.assert_not_called()


def test_failure_prints_reason_and_raw_response():
    reporter = UploadReporter(output=Mock())
    error = SessionCreationError(
        "failed to create upload session: response has no uploadUrl",
        raw_response='{"id": "x"}',
    )

    reporter.finished(UploadOutcome.failed("/tmp/big.bin", "big.bin", 10, "session", error))

    printed = lines(reporter)
    assert "failed to upload: failed to create upload session" in printed[0]
    assert '{"id": "x"}' in printed[1]


def test_markup_in_file_names_is_escaped():
    reporter = UploadReporter(output=Mock())

    reporter.started("[bold]report.pdf")

    assert "\\[bold]" in lines(reporter)[0]


def test_upload_plan_lists_unreadable_files(tmp_path):
    present = tmp_path / "a.bin"
    present.write_bytes(b"x" * 100)
    config = UploadConfig("id", "secret", "tenant", "contoso.sharepoint.com", "Engineering")

    with patch.object(progress, "console") as mock_console:
        display_upload_plan([str(present), str(tmp_path / "gone.bin")], config)

    table = mock_console.print.call_args_list[-1].args[0].renderable
    assert list(table.columns[1].cells)[1] == "[red]⚠️ Unreadable[/red]"
    assert list(table.columns[2].cells)[-1] == "[bold]100 B"


def test_split_valid_files(tmp_path):
    existing = tmp_path / "a.txt"
    existing.write_text("a")

    files, rejected = split_valid_files(
        [str(existing), str(tmp_path / "nope.txt"), str(tmp_path), str(existing)]
    )

    assert files == [str(existing)]
    assert rejected == [(str(tmp_path / "nope.txt"), None), (str(tmp_path), "directory")]


def test_format_size():
    assert format_size(512) == "512 B"
    assert format_size(2048) == "2.0 KiB"
    assert format_size(25 * 1024 * 1024) == "25.00 MiB"


def test_truncate_path():
    assert truncate_path("short.txt") == "short.txt"
    long_path = "a/very/long/directory/structure/that/keeps/going/file.txt"
    truncated = truncate_path(long_path, 30)
    assert truncated.startswith("...")
    assert truncated.endswith("file.txt")
    assert len(truncated) <= 30
