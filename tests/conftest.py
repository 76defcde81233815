"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path

import pytest

from cpindexer.models import PackageInfo


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _quiet_debug(monkeypatch):
    """Keep debug logging off unless a test turns it on."""
    monkeypatch.delenv("CPINDEXER_DEBUG", raising=False)


@pytest.fixture
def mods_root(tmp_path):
    root = tmp_path / "Mods"
    root.mkdir()
    return root


@pytest.fixture
def make_package(mods_root):
    """Create a content pack folder with a manifest and optional content.json."""

    def _make(folder, unique_id="Author.Mod", name="Magic Mod", changes=None, dynamic_tokens=None, i18n=None):
        package_dir = mods_root / folder
        write_json(package_dir / "manifest.json", {"UniqueID": unique_id, "Name": name})
        if changes is not None or dynamic_tokens is not None:
            content = {"Format": "2.0.0", "Changes": changes or []}
            if dynamic_tokens is not None:
                content["DynamicTokens"] = dynamic_tokens
            write_json(package_dir / "content.json", content)
        if i18n is not None:
            write_json(package_dir / "i18n" / "default.json", i18n)
        return package_dir

    return _make


@pytest.fixture
def package(tmp_path):
    root = tmp_path / "AuthorMod"
    root.mkdir()
    return PackageInfo(
        unique_id="Author.Mod",
        name="Magic Mod",
        root_dir=root,
        translations={"item.name": "Magic Bean", "boots.name": "Cozy Boots"},
    )
