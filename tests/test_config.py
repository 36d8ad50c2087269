"""Unit tests for run configuration."""

import pytest

from spupload.core.config import CHUNK_SIZE, UploadConfig
from spupload.core.errors import ConfigurationError, PreconditionError

FULL_ENV = {
    "MS_GRAPH_CLIENT_ID": "client-id",
    "MS_GRAPH_CLIENT_SECRET": "client-secret",
    "MS_GRAPH_TENANT_ID": "tenant-id",
    "MS_GRAPH_DOMAIN": "contoso.sharepoint.com",
    "MS_GRAPH_SITE": "Engineering",
    "MS_GRAPH_FOLDER": "Reports/2026",
}


def test_from_env_reads_all_settings():
    config = UploadConfig.from_env(FULL_ENV).validate()

    assert config.client_id == "client-id"
    assert config.domain == "contoso.sharepoint.com"
    assert config.drive == "Documents"
    assert config.folder == "Reports/2026"
    assert config.chunk_size == CHUNK_SIZE
    assert config.max_workers is None
    assert config.authority == "https://login.microsoftonline.com/tenant-id"


def test_from_env_ignores_process_environment(monkeypatch):
    monkeypatch.setenv("MS_GRAPH_CLIENT_ID", "from-process")

    assert UploadConfig.from_env({}).client_id is None


@pytest.mark.parametrize("placeholder", ["", "null", "  ", "NULL"])
def test_placeholder_values_count_as_missing(placeholder):
    env = dict(FULL_ENV, MS_GRAPH_CLIENT_SECRET=placeholder)

    with pytest.raises(ConfigurationError) as exc_info:
        UploadConfig.from_env(env).validate()

    assert exc_info.value.missing == ["MS_GRAPH_CLIENT_SECRET"]


def test_missing_settings_are_all_reported():
    with pytest.raises(ConfigurationError) as exc_info:
        UploadConfig.from_env({}).validate()

    assert exc_info.value.missing == [
        "MS_GRAPH_CLIENT_ID",
        "MS_GRAPH_CLIENT_SECRET",
        "MS_GRAPH_TENANT_ID",
        "MS_GRAPH_DOMAIN",
        "MS_GRAPH_SITE",
    ]
    assert isinstance(exc_info.value, PreconditionError)


def test_overrides_win_over_environment():
    env = dict(FULL_ENV, MS_GRAPH_CHUNK_SIZE="655360", MS_GRAPH_DRIVE="Shared")
    config = UploadConfig.from_env(env, folder="Other", chunk_size=327680, drive=None)

    assert config.folder == "Other"
    assert config.chunk_size == 327680
    assert config.drive == "Shared"


def test_chunk_size_from_environment_must_be_integer():
    with pytest.raises(ConfigurationError):
        UploadConfig.from_env(dict(FULL_ENV, MS_GRAPH_CHUNK_SIZE="ten megs"))


@pytest.mark.parametrize(
    "overrides",
    [
        {"chunk_size": 0},
        {"chunk_size": -5},
        {"max_workers": 0},
        {"max_workers": 11},
        {"request_timeout": 0},
        {"max_retries": 0},
    ],
)
def test_out_of_range_values_rejected(overrides):
    with pytest.raises(ConfigurationError):
        UploadConfig.from_env(FULL_ENV, **overrides).validate()


def test_unaligned_chunk_size_only_warns():
    config = UploadConfig.from_env(FULL_ENV, chunk_size=1000).validate()

    assert config.chunk_size == 1000


@pytest.mark.parametrize(
    "folder, expected",
    [("", "report.pdf"), ("Reports", "Reports/report.pdf"), ("/Reports/2026/", "Reports/2026/report.pdf")],
)
def test_destination_path(folder, expected):
    config = UploadConfig.from_env(dict(FULL_ENV, MS_GRAPH_FOLDER=folder))

    assert config.destination_path("report.pdf") == expected
