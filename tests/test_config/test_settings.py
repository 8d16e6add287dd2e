"""Tests for environment-driven settings."""

import pytest

from persist_mcp.config import Settings

ENV_KEYS = (
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "CF_ACCOUNT_ID",
    "R2_BUCKET_NAME",
    "PERSIST_SANDBOX_HOST",
    "PERSIST_SANDBOX_PORT",
    "PERSIST_SANDBOX_USER",
    "PERSIST_SANDBOX_IDENTITY_FILE",
    "PERSIST_KNOWN_HOSTS",
    "PERSIST_STRICT_HOST_KEY_CHECKING",
    "PERSIST_MOUNT_PATH",
    "PERSIST_WORKSPACE_DIR",
    "PERSIST_TRANSPORT",
    "PERSIST_HTTP_HOST",
    "PERSIST_HTTP_PORT",
    "PERSIST_LOG_LEVEL",
    "PERSIST_LOG_COLORS",
    "PERSIST_LOG_PAYLOADS",
    "PERSIST_SLOW_THRESHOLD_MS",
    "PERSIST_INCLUDE_TRACEBACK",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env()

    assert settings.storage_configured is False
    assert settings.r2_bucket_name == "moltbot-data"
    assert settings.sandbox_host == "localhost"
    assert settings.sandbox_port == 22
    assert settings.strict_host_key_checking is True
    assert settings.transport == "http"
    assert settings.http_port == 8000
    assert settings.log_level == "INFO"


def test_storage_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("R2_ACCESS_KEY_ID", "key")
    monkeypatch.setenv("R2_SECRET_ACCESS_KEY", "secret")
    monkeypatch.setenv("CF_ACCOUNT_ID", "acct")
    monkeypatch.setenv("R2_BUCKET_NAME", "backups")

    settings = Settings.from_env()
    creds = settings.credentials()

    assert settings.storage_configured is True
    assert creds.access_key_id == "key"
    assert creds.bucket_name == "backups"


def test_blank_credentials_are_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("R2_ACCESS_KEY_ID", "key")
    monkeypatch.setenv("R2_SECRET_ACCESS_KEY", "   ")
    monkeypatch.setenv("CF_ACCOUNT_ID", "acct")

    settings = Settings.from_env()

    assert settings.r2_secret_access_key is None
    assert settings.storage_configured is False


def test_sandbox_host_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSIST_SANDBOX_HOST", "10.0.0.5")
    monkeypatch.setenv("PERSIST_SANDBOX_PORT", "2222")
    monkeypatch.setenv("PERSIST_SANDBOX_USER", "agent")
    monkeypatch.setenv("PERSIST_SANDBOX_IDENTITY_FILE", "/keys/id")

    host = Settings.from_env().sandbox_host_config()

    assert host.name == "sandbox"
    assert host.address == "agent@10.0.0.5:2222"
    assert host.identity_file == "/keys/id"


def test_invalid_int_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSIST_HTTP_PORT", "eighty")

    assert Settings.from_env().http_port == 8000


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("1", True), ("YES", True), ("on", True), ("false", False), ("0", False)],
)
def test_bool_parsing(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("PERSIST_STRICT_HOST_KEY_CHECKING", raw)

    assert Settings.from_env().strict_host_key_checking is expected


@pytest.mark.parametrize(("raw", "expected"), [("stdio", "stdio"), ("HTTP", "http"), ("sse", "http")])
def test_transport(monkeypatch: pytest.MonkeyPatch, raw: str, expected: str) -> None:
    monkeypatch.setenv("PERSIST_TRANSPORT", raw)

    assert Settings.from_env().transport == expected


def test_log_level_uppercased(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSIST_LOG_LEVEL", "debug")

    assert Settings.from_env().log_level == "DEBUG"


def test_layout_uses_configured_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSIST_MOUNT_PATH", "/mnt/r2")
    monkeypatch.setenv("PERSIST_WORKSPACE_DIR", "/srv/ws")

    layout = Settings.from_env().layout()

    assert layout.mount_path == "/mnt/r2"
    assert layout.marker_path == "/mnt/r2/.last-sync"
    assert layout.skills_dir == "/srv/ws/skills"
