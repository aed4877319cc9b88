"""Pytest configuration and shared fixtures for ml-results tests."""

import pytest

import ml_results.io.logging_setup
from tests.harness.builders import make_multipart, make_part


# ---------------------------------------------------------------------------
# Response fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def two_part_body():
    """CRLF multipart body with boundary abc123 and bodies First / Second."""
    return make_multipart(
        [
            make_part("First", content_type="text/plain"),
            make_part("Second", content_type="text/plain"),
        ],
        boundary="abc123",
    )


@pytest.fixture
def response_file(tmp_path, two_part_body):
    """Write the two-part body to disk and return its path."""
    path = tmp_path / "response.txt"
    path.write_text(two_part_body, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_settings(tmp_path, monkeypatch):
    """Redirect settings file to a temp directory."""
    settings_file = tmp_path / "settings.json"
    monkeypatch.setattr(
        "ml_results.io.settings.get_config_path",
        lambda: settings_file,
    )
    return settings_file


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch):
    """Every test starts with unconfigured logging and no log env vars."""
    for name in ("ML_RESULTS_LOG_LEVEL", "ML_RESULTS_LOG_DIR", "ML_RESULTS_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    ml_results.io.logging_setup.reset()
    yield
    ml_results.io.logging_setup.reset()
