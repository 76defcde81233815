from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, List, Optional, Set

import json5

JSON_SUFFIXES = (".json", ".jsonc")


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def is_json_file(path: Path) -> bool:
    return path.suffix.lower() in JSON_SUFFIXES


def parse_jsonc_text(text: str) -> Any:
    try:
        # The standard module is fast and handles most files.
        return json.loads(text)
    except json.JSONDecodeError:
        # json5 is slower but accepts comments and trailing commas.
        return json5.loads(text)


def read_jsonc(path: Path) -> dict[str, Any] | None:
    """Load a JSON or JSONC object, returning ``None`` if it cannot be used."""

    try:
        text = path.read_text(encoding="utf-8-sig")
        data = parse_jsonc_text(text)
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def iter_json_files(root: Path, _visited: Optional[Set[Path]] = None) -> Iterator[Path]:
    """Yield JSON files below ``root`` in a stable order, skipping dot folders.

    Each real directory is walked once, so symlink loops terminate.
    """

    visited = _visited if _visited is not None else set()
    try:
        resolved = root.resolve()
    except OSError:
        return
    if resolved in visited:
        return
    visited.add(resolved)
    try:
        children: List[Path] = sorted(root.iterdir(), key=lambda child: child.name)
    except OSError:
        return
    for child in children:
        if child.is_dir():
            if child.name.startswith("."):
                continue
            yield from iter_json_files(child, visited)
        elif child.is_file() and is_json_file(child):
            yield child
