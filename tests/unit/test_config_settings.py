"""Unit tests for application settings configuration."""

from pathlib import Path

from flourmill.config import Settings


def test_settings_uses_project_env_file_independent_of_cwd():
    """Settings should always include the project-level .env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_project_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_project_env in normalized
    assert str(Path(".env")) in normalized


def test_settings_read_backend_choice_from_environment(monkeypatch):
    monkeypatch.setenv("RECORD_BACKEND", "local")
    monkeypatch.setenv("SEARCH_MODE", "contains")
    monkeypatch.setenv("LOCAL_STORAGE_KEY", "mill_records")

    settings = Settings(_env_file=None)

    assert settings.record_backend == "local"
    assert settings.search_mode == "contains"
    assert settings.local_storage_key == "mill_records"


def test_settings_defaults_to_remote_exact_search(monkeypatch):
    for name in ("RECORD_BACKEND", "SEARCH_MODE", "LOCAL_STORAGE_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.record_backend == "remote"
    assert settings.search_mode == "exact"
    assert settings.local_storage_key == "wheatStore_customerRecords"
