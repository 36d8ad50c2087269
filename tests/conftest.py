"""Pytest fixtures for spupload tests."""

import json
import threading
from collections import defaultdict
from unittest.mock import Mock, patch

import pytest

from spupload.core.client import GraphClient
from spupload.core.config import UploadConfig
from spupload.models.upload import DriveHandle
from spupload.utils.progress import UploadReporter

MiB = 1024 * 1024
UPLOAD_HOST = "https://upload.example.test"


def make_response(status_code=200, body=None, text=None, reason="OK"):
    """Build a stand-in for ``requests.Response``."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if text is not None:
        response.text = text
        response.json.side_effect = ValueError("not json")
    elif body is not None:
        response.text = json.dumps(body)
        response.json.return_value = body
    else:
        response.text = ""
        response.json.side_effect = ValueError("empty body")
    return response


def make_file(directory, name, size):
    """Create a file of ``size`` bytes; large files are sparse."""
    path = directory / name
    with open(path, "wb") as f:
        if size <= MiB:
            f.write(bytes(i % 251 for i in range(size)))
        else:
            f.truncate(size)
    return str(path)


class FakeGraph:
    """Records upload traffic and answers like the Graph upload endpoints.

    ``fail_chunk`` maps a file name to the 1-based chunk number that gets an
    error payload; ``omit_web_url`` lists files whose final chunk is answered
    without a ``webUrl``.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.sessions = []
        self.session_bodies = []
        self.simple_uploads = []
        self.chunks = defaultdict(list)
        self.chunk_sizes = defaultdict(list)
        self.fail_chunk = {}
        self.omit_web_url = set()

    def post(self, url, headers=None, json=None, timeout=None, **kwargs):
        name = json["item"]["name"]
        with self._lock:
            self.sessions.append(name)
            self.session_bodies.append(json)
            upload_url = f"{UPLOAD_HOST}/{name}/{len(self.sessions)}"
        return make_response(
            200,
            {"uploadUrl": upload_url, "expirationDateTime": "2026-10-18T10:00:00Z"},
        )

    def put(self, url, headers=None, data=None, timeout=None, **kwargs):
        if url.startswith(UPLOAD_HOST):
            return self._put_chunk(url, headers, data)

        name = url.split(":/content")[0].rsplit("/", 1)[-1]
        with self._lock:
            self.simple_uploads.append((url, len(data)))
        return make_response(
            201, {"id": f"item-{name}", "webUrl": f"https://contoso.sharepoint.com/Docs/{name}"}
        )

    def _put_chunk(self, url, headers, data):
        name = url[len(UPLOAD_HOST) + 1:].split("/")[0]
        content_range = headers["Content-Range"]
        with self._lock:
            self.chunks[url].append(content_range)
            self.chunk_sizes[url].append(len(data))
            index = len(self.chunks[url])

        if self.fail_chunk.get(name) == index:
            return make_response(
                200,
                {"error": {"code": "invalidRange", "message": f"chunk {index} rejected"}},
            )

        span, total = content_range[len("bytes "):].split("/")
        end = int(span.split("-")[1])
        if end + 1 == int(total):
            item = {"id": f"item-{name}", "name": name}
            if name not in self.omit_web_url:
                item["webUrl"] = f"https://contoso.sharepoint.com/Docs/{name}"
            return make_response(201, item)
        return make_response(202, {"nextExpectedRanges": [f"{end + 1}-"]})

    def ranges_for(self, name):
        """Content-Range headers of every session created for ``name``."""
        return [
            ranges
            for url, ranges in self.chunks.items()
            if url[len(UPLOAD_HOST) + 1:].split("/")[0] == name
        ]


@pytest.fixture
def config():
    """A complete configuration with test credentials."""
    return UploadConfig(
        client_id="client-id",
        client_secret="client-secret",
        tenant_id="tenant-id",
        domain="contoso.sharepoint.com",
        site="Engineering",
        folder="Reports",
    )


@pytest.fixture
def mock_auth():
    auth = Mock()
    auth.get_access_token.return_value = "test-token"
    auth.get_headers.side_effect = lambda: {"Authorization": "Bearer test-token"}
    return auth


@pytest.fixture
def client(config, mock_auth):
    return GraphClient(config, auth=mock_auth)


@pytest.fixture
def drive():
    return DriveHandle(site_id="site-id", drive_id="drive-id", name="Documents")


@pytest.fixture
def reporter():
    """A reporter whose console output is discarded."""
    return UploadReporter(output=Mock())


@pytest.fixture
def fake_graph():
    """Patch ``requests.put``/``requests.post`` with a FakeGraph."""
    graph = FakeGraph()
    with patch("requests.put", side_effect=graph.put) as mock_put, patch(
        "requests.post", side_effect=graph.post
    ) as mock_post:
        graph.mock_put = mock_put
        graph.mock_post = mock_post
        yield graph
