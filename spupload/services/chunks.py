"""Chunked transfer of one file through an upload session."""

from enum import Enum

import requests
from rich.console import Console

from spupload.core.config import CHUNK_SIZE
from spupload.core.errors import AmbiguousCompletionError, ChunkUploadError, EmptyUploadError
from spupload.models.responses import decode_response
from spupload.models.upload import ByteRange, ChunkResult, UploadSession, iter_byte_ranges
from spupload.services.reader import ByteRangeReader

console = Console()


class ChunkUploader:
    """Sends single byte ranges to an upload session."""

    def __init__(self, client):
        """Initialize with a GraphClient instance."""
        self.client = client

    def put(self, session: UploadSession, byte_range: ByteRange, data: bytes) -> ChunkResult:
        """
        Upload the bytes of one range.

        The upload URL is pre-authenticated, so no bearer token is sent.
        Intermediate chunks are answered with ``202`` and the next expected
        ranges; the final chunk is answered with the completed drive item.

        Raises:
            ChunkUploadError: on transport failure, on a non-2xx status, or
                when the body carries an error object whatever the status.
        """
        if len(data) != byte_range.length:
            raise ValueError(
                f"got {len(data)} bytes for range {byte_range.content_range}"
            )

        chunk_headers = {
            "Content-Length": str(byte_range.length),
            "Content-Range": byte_range.content_range,
        }

        try:
            response = requests.put(
                session.upload_url,
                headers=chunk_headers,
                data=data,
                timeout=self.client.config.chunk_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ChunkUploadError(
                f"chunk upload failed: {e}",
                byte_range=byte_range,
                file_name=session.file_name,
            )

        result = decode_response(response)
        if result.error:
            raise ChunkUploadError(
                f"chunk upload failed: {result.error.message}",
                byte_range=byte_range,
                status_code=result.status_code,
                error_code=result.error.code,
                raw_response=result.raw,
                file_name=session.file_name,
            )

        item = result.body if ("id" in result.body or "webUrl" in result.body) else None
        self.client.stats.update(chunks_uploaded=1)

        if self.client.config.verbose:
            console.print(
                f"[dim][{session.file_name}] {byte_range.content_range} -> HTTP {result.status_code}[/dim]"
            )
        return ChunkResult(byte_range, result.status_code, item=item, raw=result.raw)


class SequencerState(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class ChunkSequencer:
    """Drives one upload session from the first byte to the last.

    Ranges are sent strictly one after another in offset order; the first
    failure ends the run and nothing is retried. A sequencer runs a single
    session once, so retrying a file means a new session and a new sequencer.
    """

    def __init__(
        self,
        uploader: ChunkUploader,
        chunk_size=CHUNK_SIZE,
        progress_callback=None,
        reader_factory=ByteRangeReader,
    ):
        self.uploader = uploader
        self.chunk_size = chunk_size
        self.progress_callback = progress_callback
        self.reader_factory = reader_factory
        self.state = SequencerState.NOT_STARTED
        self.bytes_sent = 0
        self.last_result = None

    def ranges(self, total_size):
        return iter_byte_ranges(total_size, self.chunk_size)

    def run(self, session: UploadSession, file_path) -> str:
        """
        Upload ``file_path`` through ``session`` and return the item's web URL.

        ``progress_callback(bytes_sent, total_size)`` is called before each
        chunk is submitted.

        Raises:
            EmptyUploadError: if the session is for a zero-byte file.
            ChunkUploadError: if any chunk is rejected.
            TruncatedFileError: if the file shrank while being uploaded.
            AmbiguousCompletionError: if the last chunk was accepted but the
                response did not include the item's web URL.
        """
        if self.state is not SequencerState.NOT_STARTED:
            raise RuntimeError(f"sequencer already used (state: {self.state.value})")

        if session.total_size == 0:
            self.state = SequencerState.FAILED
            raise EmptyUploadError(
                "cannot send a zero-byte file through an upload session",
                file_name=session.file_name,
            )

        try:
            with self.reader_factory(file_path) as reader:
                for byte_range in self.ranges(session.total_size):
                    self.state = SequencerState.IN_PROGRESS
                    if self.progress_callback:
                        self.progress_callback(self.bytes_sent, session.total_size)

                    data = reader.read(byte_range.start, byte_range.length)
                    self.last_result = self.uploader.put(session, byte_range, data)
                    self.bytes_sent = byte_range.end + 1
        except Exception:
            self.state = SequencerState.FAILED
            raise

        web_url = self.last_result.web_url if self.last_result else None
        if not web_url:
            self.state = SequencerState.FAILED
            raise AmbiguousCompletionError(
                "all chunks were sent but no web URL was returned",
                raw_response=self.last_result.raw if self.last_result else None,
                file_name=session.file_name,
            )

        self.state = SequencerState.COMPLETED
        return web_url
