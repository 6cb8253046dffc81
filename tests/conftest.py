from __future__ import annotations

from pathlib import Path

import pytest

import stache


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep `STACHE_*` variables and any local pyproject.toml from leaking into tests."""
    for name in ('STACHE_MISSING_VARIABLES', 'STACHE_MISSING_PARTIALS', 'STACHE_MAX_PARTIAL_DEPTH', 'STACHE_ESCAPE_HTML'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('STACHE_CONFIG_DIR', str(tmp_path))
    monkeypatch.setattr(stache, '_default_env', None)
