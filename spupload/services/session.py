"""Upload session creation for SharePoint Uploader (spupload)."""

import requests
from rich.console import Console

from spupload.core.config import CONFLICT_BEHAVIOR
from spupload.core.errors import SessionCreationError
from spupload.models.responses import decode_response
from spupload.models.upload import DriveHandle, UploadSession

console = Console()


def create_upload_session(
    client, drive: DriveHandle, destination_path, file_name, total_size
) -> UploadSession:
    """
    Ask Graph for a resumable upload session for one file.

    The item is created with the "replace" conflict behaviour, so an existing
    file of the same name is overwritten once the last chunk lands. Session
    creation is never retried.

    Raises:
        SessionCreationError: if the request fails or the response has no
            ``uploadUrl``. The raw response is attached.
    """
    session_url = client.get_item_url(drive, destination_path, "createUploadSession")
    session_body = {
        "item": {
            "@microsoft.graph.conflictBehavior": CONFLICT_BEHAVIOR,
            "name": file_name,
        }
    }

    headers = client.auth.get_headers()
    headers["Content-Type"] = "application/json"

    try:
        response = requests.post(
            session_url,
            headers=headers,
            json=session_body,
            timeout=client.config.request_timeout,
        )
    except requests.exceptions.RequestException as e:
        raise SessionCreationError(
            f"failed to create upload session: {e}", file_name=file_name
        )

    result = decode_response(response)
    if not result.ok or not result.get("uploadUrl"):
        reason = str(result.error) if result.error else "response has no uploadUrl"
        raise SessionCreationError(
            f"failed to create upload session: {reason}",
            raw_response=result.raw,
            file_name=file_name,
        )

    session = UploadSession.from_api_response(
        result.body, destination_path, file_name, total_size
    )
    client.stats.update(sessions_created=1)

    if client.config.verbose:
        console.print(
            f"[dim][{file_name}] upload session created, expires {session.expiration or 'unknown'}[/dim]"
        )
    return session
