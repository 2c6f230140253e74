from __future__ import annotations

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def kev_catalog_bytes() -> bytes:
    return (DATA_DIR / "kev_catalog.json").read_bytes()


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "DT_BASE_URL",
        "DT_API_KEY",
        "DT_POLICY_NAME",
        "DT_POLICY_OPERATOR",
        "DT_POLICY_VIOLATION_STATE",
        "DT_POLICY_PROJECTS",
        "DT_POLICY_TAGS",
        "KEVSYNC_KEV_URL",
        "DT_MAX_REQUESTS_PER_SECOND",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("KEVSYNC_CACHE_DIR", str(tmp_path / "kev-cache"))
