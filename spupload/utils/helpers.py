"""Utility functions for SharePoint Uploader (spupload)."""

import os


def truncate_path(path, max_length=40):
    """Truncate a file path with ellipses if it's too long."""
    if len(path) <= max_length:
        return path

    # Keep the filename and as much of the parent directory as fits
    filename = os.path.basename(path)
    if len(filename) >= max_length - 3:
        return f"...{filename[-(max_length - 3):]}"

    remaining_space = max_length - len(filename) - 4  # "..." and "/"
    if remaining_space <= 0:
        return f"...{filename}"
    dir_part = os.path.dirname(path)[:remaining_space]
    return f"...{dir_part}/{filename}"


def format_size(size_bytes):
    """Human readable size in binary units."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KiB"
    if size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.2f} MiB"
    return f"{size_bytes / 1024 / 1024 / 1024:.2f} GiB"


def validate_path_exists(path):
    """Check if a path exists and return its type."""
    if not os.path.exists(path):
        return None
    elif os.path.isfile(path):
        return "file"
    elif os.path.isdir(path):
        return "directory"
    else:
        return "other"


def split_valid_files(paths):
    """
    Separate regular files from everything else.

    Returns a ``(files, rejected)`` pair; ``rejected`` holds ``(path, kind)``
    tuples where kind is ``None`` for paths that do not exist. Duplicate
    paths are kept once.
    """
    files = []
    rejected = []
    seen = set()

    for path in paths:
        kind = validate_path_exists(path)
        if kind != "file":
            rejected.append((path, kind))
            continue
        key = os.path.abspath(path)
        if key in seen:
            continue
        seen.add(key)
        files.append(path)

    return files, rejected
