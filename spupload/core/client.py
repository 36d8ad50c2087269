"""Core Microsoft Graph client for SharePoint Uploader (spupload)."""

import time
from typing import Callable
from urllib.parse import quote

import requests
from rich.console import Console

from spupload.core.auth import SharePointAuth
from spupload.core.config import UploadConfig
from spupload.core.errors import ResolutionError
from spupload.models.responses import GraphResult, decode_response
from spupload.models.upload import DriveHandle
from spupload.stats import OperationStats

console = Console()


class GraphClient:
    """Core Graph client that handles authentication, lookups and timeouts."""

    def __init__(self, config: UploadConfig, auth: SharePointAuth = None, stats=None):
        """Initialize the client for one run."""
        self.config = config
        self.auth = auth or SharePointAuth(config)
        self.stats = stats or OperationStats()

    def get_drive_base_url(self, drive: DriveHandle):
        """Constructs the base URL for item calls inside a document library."""
        return f"{self.config.graph_endpoint}/drives/{drive.drive_id}"

    def get_item_url(self, drive: DriveHandle, destination_path, action):
        """URL addressing a drive item by path, e.g. ``.../root:/a/b.txt:/content``."""
        sanitized_path = quote(destination_path.strip("/"))
        return f"{self.get_drive_base_url(drive)}/root:/{sanitized_path}:/{action}"

    def retry_request(
        self, func: Callable[[], requests.Response], max_retries=None, delay=1
    ) -> requests.Response:
        """Retry a function with exponential backoff."""
        if max_retries is None:
            max_retries = self.config.max_retries

        for attempt in range(max_retries):
            try:
                return func()
            except requests.exceptions.RequestException as e:
                if attempt == max_retries - 1:
                    raise
                console.print(
                    f"[yellow]Request failed (attempt {attempt + 1}/{max_retries}): {e}"
                )
                time.sleep(delay * (2**attempt))  # Exponential backoff

        raise RuntimeError("retry_request called with max_retries < 1")

    def get_json(self, url) -> GraphResult:
        """GET a Graph URL with retries and decode the response."""

        def get_request():
            return requests.get(
                url, headers=self.auth.get_headers(), timeout=self.config.request_timeout
            )

        return decode_response(self.retry_request(get_request))

    def get_site_id(self, domain, site):
        """Look up the id of ``https://<domain>/sites/<site>``."""
        url = f"{self.config.graph_endpoint}/sites/{domain}:/sites/{site}"
        try:
            result = self.get_json(url)
        except requests.exceptions.RequestException as e:
            raise ResolutionError(f"Failed to retrieve site ID for {domain}/sites/{site}: {e}")

        site_id = result.get("id") if result.ok else None
        if not site_id:
            raise ResolutionError(
                f"Failed to retrieve site ID for {domain}/sites/{site}"
                + (f": {result.error}" if result.error else ""),
                raw_response=result.raw,
            )
        return site_id

    def get_drive_id(self, site_id, drive_name):
        """Look up a document library of the site by its display name."""
        url = f"{self.config.graph_endpoint}/sites/{site_id}/drives"
        try:
            result = self.get_json(url)
        except requests.exceptions.RequestException as e:
            raise ResolutionError(f"Failed to retrieve drive ID for '{drive_name}': {e}")

        if result.ok:
            for drive in result.get("value", []):
                if drive.get("name") == drive_name and drive.get("id"):
                    return drive["id"]

        raise ResolutionError(
            f"Failed to retrieve drive ID for '{drive_name}'"
            + (f": {result.error}" if result.error else ""),
            raw_response=result.raw,
        )

    def resolve_destination(self, domain=None, site=None, drive_name=None) -> DriveHandle:
        """Map the configured site and drive names to a ``DriveHandle``."""
        domain = domain or self.config.domain
        site = site or self.config.site
        drive_name = drive_name or self.config.drive

        site_id = self.get_site_id(domain, site)
        drive_id = self.get_drive_id(site_id, drive_name)
        if self.config.verbose:
            console.print(f"[dim]Resolved drive '{drive_name}' to {drive_id}[/dim]")
        return DriveHandle(site_id=site_id, drive_id=drive_id, name=drive_name)
