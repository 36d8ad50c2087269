"""SharePoint Uploader (spupload) - CLI tool for uploading files to SharePoint via Microsoft Graph."""

__version__ = "0.1.0"

from .core.auth import SharePointAuth
from .core.client import GraphClient
from .core.config import UploadConfig
from .services.upload import SharePointUploader, UploadDispatcher
from .stats import OperationStats

__all__ = [
    "SharePointAuth",
    "GraphClient",
    "UploadConfig",
    "SharePointUploader",
    "UploadDispatcher",
    "OperationStats",
]
