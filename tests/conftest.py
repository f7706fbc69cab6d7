from pathlib import Path

import pytest

from prompt_catalog import config, core
from tests.samples import CONTENT_FILES


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def content_dir(tmp_path):
    root = write_tree(tmp_path / "content", CONTENT_FILES)
    (root / "empty").mkdir()
    return root


@pytest.fixture
def configured(content_dir, tmp_path, monkeypatch):
    monkeypatch.setenv("CONTENT_DIR", str(content_dir))
    monkeypatch.setenv("OUTPUT_PATH", str(tmp_path / "public" / "content-data.json"))
    config.get_config.cache_clear()
    core.get_cache.cache_clear()
    yield content_dir
    config.get_config.cache_clear()
    core.get_cache.cache_clear()
