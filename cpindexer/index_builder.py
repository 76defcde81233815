from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .file_utils import ensure_directory, read_jsonc
from .models import IndexEntry, InstalledItemInfo
from .schemas import CATEGORY_TYPES, category_for_prefix
from .text_utils import split_qualified_id


def build_category_buckets(items: Mapping[str, InstalledItemInfo]) -> Dict[str, List[IndexEntry]]:
    buckets: Dict[str, List[IndexEntry]] = {category: [] for category in CATEGORY_TYPES}
    for qualified_id, info in items.items():
        parts = split_qualified_id(qualified_id)
        if parts is None:
            continue
        prefix, inner_id = parts
        buckets[category_for_prefix(prefix)].append(
            IndexEntry(
                id=inner_id,
                name=info.name or inner_id,
                qualified_id=qualified_id,
                mod_id=info.mod_id,
                mod_name=info.mod_name,
            )
        )
    for entries in buckets.values():
        entries.sort(key=lambda entry: entry.qualified_id)
    return buckets


def build_index_document(items: Mapping[str, InstalledItemInfo]) -> Dict[str, Any]:
    document: Dict[str, Any] = {"categoryTypes": dict(CATEGORY_TYPES)}
    for category, entries in build_category_buckets(items).items():
        document[category] = [entry.to_dict() for entry in entries]
    return document


def stable_stringify(value: Any) -> str:
    """Serialize with every object's keys sorted, so equal data gives equal text."""

    return json.dumps(value, sort_keys=True, indent=2, ensure_ascii=False)


def write_if_changed(output_path: Path, document: Mapping[str, Any]) -> bool:
    """Write ``document`` only when it differs from what is already on disk.

    Returns ``True`` when the file was (re)written.
    """

    next_text = stable_stringify(document)

    previous = read_jsonc(output_path) if output_path.exists() else None
    if previous is not None:
        if stable_stringify(previous) == next_text:
            return False
    elif output_path.exists():
        try:
            if output_path.read_text(encoding="utf-8") == next_text:
                return False
        except (OSError, UnicodeDecodeError):
            pass

    ensure_directory(output_path.parent)
    output_path.write_text(next_text, encoding="utf-8")
    return True
