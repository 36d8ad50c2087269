"""Upload data models for SharePoint Uploader (spupload)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, Optional

from spupload.core.config import CONFLICT_BEHAVIOR


@dataclass(frozen=True)
class DriveHandle:
    """A resolved SharePoint document library."""

    site_id: str
    drive_id: str
    name: str


@dataclass(frozen=True)
class ByteRange:
    """An inclusive slice ``[start, end]`` of a file of ``total_size`` bytes."""

    start: int
    end: int
    total_size: int

    def __post_init__(self):
        if not 0 <= self.start <= self.end < self.total_size:
            raise ValueError(
                f"invalid byte range {self.start}-{self.end} for a file of {self.total_size} bytes"
            )

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def is_last(self) -> bool:
        return self.end == self.total_size - 1

    @property
    def content_range(self) -> str:
        """Value of the ``Content-Range`` header for this slice."""
        return f"bytes {self.start}-{self.end}/{self.total_size}"


def iter_byte_ranges(total_size: int, chunk_size: int) -> Iterator[ByteRange]:
    """
    Partition ``total_size`` bytes into contiguous ranges of ``chunk_size``.

    The first range starts at 0, each next one starts right after the
    previous end and the last one ends at ``total_size - 1``; only the last
    range may be shorter than ``chunk_size``. A zero-byte file yields nothing.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk size must be positive, got {chunk_size}")
    if total_size < 0:
        raise ValueError(f"file size cannot be negative, got {total_size}")

    offset = 0
    while offset < total_size:
        end = min(offset + chunk_size, total_size) - 1
        yield ByteRange(offset, end, total_size)
        offset = end + 1


@dataclass(frozen=True)
class UploadSession:
    """A server-side resumable upload handle for one file."""

    destination_path: str
    file_name: str
    total_size: int
    upload_url: str
    conflict_behavior: str = CONFLICT_BEHAVIOR
    expiration: Optional[datetime] = None

    @classmethod
    def from_api_response(
        cls, body: Dict[str, Any], destination_path: str, file_name: str, total_size: int
    ) -> "UploadSession":
        """Create a session from a ``createUploadSession`` response body."""
        expiration = None
        if "expirationDateTime" in body:
            try:
                expiration = datetime.fromisoformat(
                    body["expirationDateTime"].replace("Z", "+00:00")
                )
            except (ValueError, TypeError, AttributeError):
                pass

        return cls(
            destination_path=destination_path,
            file_name=file_name,
            total_size=total_size,
            upload_url=body["uploadUrl"],
            expiration=expiration,
        )


@dataclass(frozen=True)
class ChunkResult:
    """Server acknowledgement for one accepted byte range."""

    byte_range: ByteRange
    status_code: int
    item: Optional[Dict[str, Any]] = None
    raw: str = ""

    @property
    def completed(self) -> bool:
        return self.item is not None

    @property
    def web_url(self) -> Optional[str]:
        if self.item:
            return self.item.get("webUrl") or None
        return None


@dataclass(frozen=True)
class UploadOutcome:
    """Result of one file-upload job: a web URL on success, an error otherwise."""

    file_path: str
    file_name: str
    size: int
    method: str  # "simple" or "session"
    web_url: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.web_url)

    @property
    def reason(self) -> Optional[str]:
        if self.error is None:
            return None if self.web_url else "no web URL returned"
        return getattr(self.error, "message", None) or str(self.error)

    @property
    def raw_response(self) -> Optional[str]:
        return getattr(self.error, "raw_response", None)

    @classmethod
    def succeeded(cls, file_path, file_name, size, method, web_url) -> "UploadOutcome":
        return cls(file_path, file_name, size, method, web_url=web_url)

    @classmethod
    def failed(cls, file_path, file_name, size, method, error) -> "UploadOutcome":
        return cls(file_path, file_name, size, method, error=error)
