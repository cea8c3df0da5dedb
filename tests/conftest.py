import os
import pytest
import tempfile


@pytest.fixture(autouse=True)
def isolated_workspace(monkeypatch):
    """Isolate the config file and the environment for each test."""
    with tempfile.TemporaryDirectory() as temp_dir:
        monkeypatch.setenv("MANGA_ARCHIVER_CONFIG", os.path.join(temp_dir, "config", "settings.ini"))
        for name in ("URL", "DELAY", "RETRY", "OUTPUT", "BEGIN", "END", "LANGUAGE", "GROUPS"):
            monkeypatch.delenv(f"MANGA_ARCHIVER_{name}", raising=False)
        yield temp_dir
