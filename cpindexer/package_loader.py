from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Set

from .file_utils import is_json_file, read_jsonc
from .models import PackageInfo

MANIFEST_NAME = "manifest.json"
CONTENT_NAME = "content.json"
I18N_DIR_NAME = "i18n"
MAX_DISCOVERY_DEPTH = 6
UNIQUE_ID_KEYS = ("UniqueID", "UniqueId", "uniqueID", "uniqueId")


def discover_package_folders(mods_root: Path) -> List[Path]:
    """Return every folder under ``mods_root`` that directly holds a manifest.

    Package folders are not searched any deeper, and dot folders are ignored.
    Each real directory is visited once, so symlink loops terminate.
    """

    results: List[Path] = []
    visited: Set[Path] = set()

    def _walk(directory: Path, depth: int) -> None:
        if depth > MAX_DISCOVERY_DEPTH:
            return
        try:
            resolved = directory.resolve()
        except OSError:
            return
        if resolved in visited:
            return
        visited.add(resolved)
        if (directory / MANIFEST_NAME).is_file():
            results.append(directory)
            return
        try:
            children = sorted(directory.iterdir(), key=lambda child: child.name)
        except OSError:
            return
        for child in children:
            if child.is_dir() and not child.name.startswith("."):
                _walk(child, depth + 1)

    if mods_root.is_dir():
        _walk(mods_root, 0)
    return results


def read_manifest_identity(package_dir: Path) -> tuple[str, str]:
    """Return ``(unique_id, name)`` for a package, falling back to the folder name."""

    folder_name = package_dir.name
    unique_id = folder_name
    name = folder_name

    manifest = read_jsonc(package_dir / MANIFEST_NAME)
    if manifest is None:
        return unique_id, name

    raw_id = next((manifest[key] for key in UNIQUE_ID_KEYS if manifest.get(key) is not None), None)
    if isinstance(raw_id, str) and raw_id.strip():
        unique_id = raw_id.strip()

    raw_name = manifest.get("Name")
    if isinstance(raw_name, str) and raw_name.strip():
        name = raw_name.strip()
    else:
        name = unique_id
    return unique_id, name


def _is_default_or_english(name: str) -> bool:
    lower = name.lower()
    for suffix in (".jsonc", ".json"):
        if lower.endswith(suffix):
            lower = lower[: -len(suffix)]
            break
    return lower in ("default", "en") or lower.startswith("en-")


def _load_translation_file(path: Path, translations: Dict[str, str]) -> None:
    data = read_jsonc(path)
    if data is None:
        return
    for key, value in data.items():
        if isinstance(value, str):
            translations[key] = value


def load_translations(package_dir: Path) -> Dict[str, str]:
    """Load default/English i18n strings for a package.

    Both ``i18n/default.json`` and ``i18n/default/<any>.json`` layouts are
    read. Flat files load first, then locale folders; later keys win.
    """

    translations: Dict[str, str] = {}
    i18n_root = package_dir / I18N_DIR_NAME
    if not i18n_root.is_dir():
        return translations

    try:
        entries = sorted(i18n_root.iterdir(), key=lambda entry: entry.name)
    except OSError:
        return translations

    for entry in entries:
        if entry.is_file() and is_json_file(entry) and _is_default_or_english(entry.name):
            _load_translation_file(entry, translations)

    for entry in entries:
        if not entry.is_dir() or not _is_default_or_english(entry.name):
            continue
        try:
            locale_files = sorted(entry.iterdir(), key=lambda item: item.name)
        except OSError:
            continue
        for locale_file in locale_files:
            if locale_file.is_file() and is_json_file(locale_file):
                _load_translation_file(locale_file, translations)

    return translations


def parse_dynamic_tokens(document: Dict[str, Any]) -> Dict[str, str]:
    tokens: Dict[str, str] = {}
    definitions = document.get("DynamicTokens")
    if not isinstance(definitions, list):
        return tokens
    for definition in definitions:
        if not isinstance(definition, dict) or not isinstance(definition.get("Name"), str):
            continue
        value = definition.get("Value")
        if isinstance(value, str) and value.strip():
            tokens[definition["Name"].strip().lower()] = value.strip()
    return tokens


def load_dynamic_tokens(package_dir: Path) -> Dict[str, str]:
    """Read the package-wide DynamicTokens declared in its ``content.json``."""

    content = read_jsonc(package_dir / CONTENT_NAME)
    if content is None:
        return {}
    return parse_dynamic_tokens(content)


def load_package(package_dir: Path) -> PackageInfo:
    unique_id, name = read_manifest_identity(package_dir)
    return PackageInfo(
        unique_id=unique_id,
        name=name,
        root_dir=package_dir,
        translations=load_translations(package_dir),
        dynamic_tokens=load_dynamic_tokens(package_dir),
    )


def build_known_packages(packages: List[PackageInfo]) -> Dict[str, str]:
    """Map each package's unique id to its display name."""

    known: Dict[str, str] = {}
    for package in packages:
        if package.unique_id.strip():
            known[package.unique_id.strip()] = package.name or package.unique_id
    return known
