"""Positional file reads for chunked uploads."""

import os

from spupload.core.errors import TruncatedFileError


class ByteRangeReader:
    """Reads byte ranges of one local file without loading the whole file.

    Each upload job opens its own reader; handles are never shared between
    threads.
    """

    def __init__(self, file_path):
        self.file_path = file_path
        self._file = None

    def open(self):
        if self._file is None:
            self._file = open(self.file_path, "rb")
        return self

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def read(self, start, length):
        """
        Return exactly ``length`` bytes starting at offset ``start``.

        Raises:
            TruncatedFileError: if the file ended before ``length`` bytes
                could be read, e.g. because it was modified mid-upload.
        """
        if self._file is None:
            raise ValueError(f"reader for {self.file_path} is not open")
        if start < 0 or length < 0:
            raise ValueError(f"invalid read of {length} bytes at offset {start}")

        self._file.seek(start, os.SEEK_SET)
        data = self._file.read(length)
        if len(data) != length:
            file_name = os.path.basename(self.file_path)
            raise TruncatedFileError(
                f"{file_name} is shorter than expected: "
                f"wanted {length} bytes at offset {start}, got {len(data)}",
                file_path=self.file_path,
                expected=length,
                actual=len(data),
                file_name=file_name,
            )
        return data
