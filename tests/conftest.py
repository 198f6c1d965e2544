import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)


_ENV_KEYS = (
    "DEEPSEEK_API_KEY",
    "DEEPSEEK_API_URL",
    "DEEPSEEK_MODEL",
    "BLOGSMITH_UPSTREAM_CONNECT_TIMEOUT",
    "BLOGSMITH_UPSTREAM_READ_TIMEOUT",
    "BLOGSMITH_CORS_ORIGINS",
    "BLOGSMITH_API_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Each test starts without credentials or overrides from the host env."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
