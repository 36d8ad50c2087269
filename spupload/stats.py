"""Statistics tracking for SharePoint Uploader (spupload)."""

import threading
from datetime import datetime


def _empty_stats():
    return {
        "total_files": 0,
        "successful_uploads": 0,
        "failed_uploads": 0,
        "total_size": 0,
        "uploaded_size": 0,
        "sessions_created": 0,
        "chunks_uploaded": 0,
        "start_time": datetime.now(),
    }


class OperationStats:
    """Thread-safe statistics tracking for upload jobs."""

    def __init__(self):
        self._lock = threading.Lock()
        self.stats = _empty_stats()

    def update(self, **kwargs):
        """Thread-safe method to update statistics."""
        with self._lock:
            for key, value in kwargs.items():
                if key in self.stats:
                    self.stats[key] += value

    def get_stats(self):
        """Get a copy of current statistics."""
        with self._lock:
            return self.stats.copy()

    def get_success_rate(self):
        """Calculate success rate as a percentage."""
        stats = self.get_stats()
        total_attempted = stats["successful_uploads"] + stats["failed_uploads"]

        if total_attempted == 0:
            return 0.0

        return (stats["successful_uploads"] / total_attempted) * 100

    def get_duration(self):
        """Get operation duration."""
        stats = self.get_stats()
        return datetime.now() - stats["start_time"]

    def get_transfer_speed_mb_per_sec(self):
        """Calculate transfer speed in MB/s."""
        stats = self.get_stats()
        duration = self.get_duration()

        if duration.total_seconds() == 0:
            return 0.0

        mb_transferred = stats["uploaded_size"] / 1024 / 1024
        return mb_transferred / duration.total_seconds()
