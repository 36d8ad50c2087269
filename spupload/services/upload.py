"""Upload operations for SharePoint Uploader (spupload)."""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List

import requests
from rich.console import Console
from rich.markup import escape

from spupload.core.errors import SimpleUploadError, UploadError
from spupload.models.responses import decode_response
from spupload.models.upload import DriveHandle, UploadOutcome
from spupload.services.chunks import ChunkSequencer, ChunkUploader
from spupload.services.session import create_upload_session
from spupload.utils.progress import UploadReporter

console = Console()

METHOD_SIMPLE = "simple"
METHOD_SESSION = "session"


class SharePointUploader:
    """Handles file upload operations to a SharePoint document library."""

    def __init__(self, client, reporter=None):
        """Initialize with a GraphClient instance."""
        self.client = client
        self.config = client.config
        self.reporter = reporter or UploadReporter()

    def choose_method(self, file_size):
        if file_size <= self.config.small_file_threshold:
            return METHOD_SIMPLE
        return METHOD_SESSION

    def upload_small_file(self, drive: DriveHandle, file_path, destination_path):
        """Uploads a file of at most 4 MiB using a single PUT request."""
        filename = os.path.basename(file_path)
        upload_url = self.client.get_item_url(drive, destination_path, "content")

        with open(file_path, "rb") as f:
            file_data = f.read()

        headers = self.client.auth.get_headers().copy()
        headers["Content-Type"] = "application/octet-stream"

        try:
            response = requests.put(
                upload_url,
                headers=headers,
                data=file_data,
                timeout=self.config.chunk_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise SimpleUploadError(f"upload request failed: {e}", file_name=filename)

        result = decode_response(response)
        if result.error:
            raise SimpleUploadError(
                f"upload rejected: {result.error.message}",
                raw_response=result.raw,
                file_name=filename,
            )

        web_url = result.get("webUrl")
        if not web_url:
            raise SimpleUploadError(
                "upload response has no web URL", raw_response=result.raw, file_name=filename
            )
        return web_url

    def upload_large_file(
        self, drive: DriveHandle, file_path, destination_path, progress_callback=None
    ):
        """Uploads a file through a new resumable upload session."""
        filename = os.path.basename(file_path)
        file_size = os.path.getsize(file_path)

        session = create_upload_session(
            self.client, drive, destination_path, filename, file_size
        )
        sequencer = ChunkSequencer(
            ChunkUploader(self.client),
            chunk_size=self.config.chunk_size,
            progress_callback=progress_callback,
        )
        return sequencer.run(session, file_path)

    def upload_file(self, drive: DriveHandle, file_path) -> UploadOutcome:
        """
        Upload one file with the method its size calls for.

        Never raises for file-scoped failures: the error is reported and
        returned inside the ``UploadOutcome``.
        """
        file_name = os.path.basename(file_path)
        destination_path = self.config.destination_path(file_name)
        self.reporter.started(file_name)

        file_size = 0
        method = METHOD_SIMPLE
        self.client.stats.update(total_files=1)
        try:
            file_size = os.path.getsize(file_path)
            method = self.choose_method(file_size)
            self.client.stats.update(total_size=file_size)

            if method == METHOD_SIMPLE:
                web_url = self.upload_small_file(drive, file_path, destination_path)
            else:

                def progress_callback(bytes_sent, total_size):
                    self.reporter.progress(file_name, bytes_sent, total_size)

                web_url = self.upload_large_file(
                    drive, file_path, destination_path, progress_callback
                )
        except UploadError as e:
            outcome = UploadOutcome.failed(file_path, file_name, file_size, method, e)
        except OSError as e:
            outcome = UploadOutcome.failed(
                file_path,
                file_name,
                file_size,
                method,
                UploadError(f"cannot read {file_name}: {e}", file_name=file_name),
            )
        else:
            outcome = UploadOutcome.succeeded(
                file_path, file_name, file_size, method, web_url
            )

        if outcome.ok:
            self.client.stats.update(successful_uploads=1, uploaded_size=file_size)
        else:
            self.client.stats.update(failed_uploads=1)

        self.reporter.finished(outcome)
        return outcome


class UploadDispatcher:
    """Runs one upload job per file concurrently and waits for all of them."""

    def __init__(self, uploader: SharePointUploader, max_workers=None):
        """
        ``max_workers=None`` starts one worker per file; an integer bounds
        the pool.
        """
        self.uploader = uploader
        self.max_workers = max_workers

    def dispatch(self, drive: DriveHandle, file_paths) -> List[UploadOutcome]:
        """Upload every file and return the outcomes in input order."""
        file_paths = list(file_paths)
        if not file_paths:
            return []

        workers = min(self.max_workers or len(file_paths), len(file_paths))
        outcomes = []

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = []
            for file_path in file_paths:
                future = executor.submit(self.uploader.upload_file, drive, file_path)
                futures.append((future, file_path))

            # Join every job; one failure never cancels the others
            for future, file_path in futures:
                try:
                    outcomes.append(future.result())
                except Exception as e:
                    file_name = os.path.basename(file_path)
                    console.print(
                        f"[red]❌ Unexpected error uploading {escape(file_name)}: {escape(str(e))}[/red]"
                    )
                    self.uploader.client.stats.update(failed_uploads=1)
                    outcomes.append(
                        UploadOutcome.failed(file_path, file_name, 0, "unknown", e)
                    )

        return outcomes
