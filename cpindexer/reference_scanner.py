"""Indexing of item ids that recipes, shops, machines and similar data mention."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from .models import InstalledItemInfo, PackageInfo
from .patch_scanner import register_item
from .schemas import DEFINED_PREFIXES
from .text_utils import find_embedded_qualified_ids, split_qualified_id
from .tokens import expand_tokens, substitute_mod_id


def extract_qualified_ids(raw: str, mod_id: str, dynamic_tokens: Mapping[str, str] | None) -> List[str]:
    if not raw.strip():
        return []
    text = substitute_mod_id(expand_tokens(raw, dynamic_tokens), mod_id)
    return find_embedded_qualified_ids(text)


def collect_qualified_ids(
    value: Any,
    mod_id: str,
    dynamic_tokens: Mapping[str, str] | None,
    found: Dict[str, None] | None = None,
) -> Dict[str, None]:
    """Gather qualified ids from every string leaf, in first-seen order."""

    if found is None:
        found = {}
    if isinstance(value, str):
        for qualified_id in extract_qualified_ids(value, mod_id, dynamic_tokens):
            found.setdefault(qualified_id, None)
    elif isinstance(value, list):
        for item in value:
            collect_qualified_ids(item, mod_id, dynamic_tokens, found)
    elif isinstance(value, dict):
        for item in value.values():
            collect_qualified_ids(item, mod_id, dynamic_tokens, found)
    return found


def resolve_owner(
    inner_id: str,
    package: PackageInfo,
    known_packages: Mapping[str, str],
) -> tuple[str, str]:
    """Guess which package owns a referenced id.

    Tries ``<UniqueID>_<LocalId>`` first, then an exact or dotted
    ``<UniqueID>.<LocalId>`` match, then the package doing the scanning.
    """

    candidate_id = inner_id.strip()
    if not candidate_id:
        return package.unique_id, package.name

    owner, separator, _ = candidate_id.partition("_")
    if separator and owner and owner in known_packages:
        return owner, known_packages[owner]

    for known_id, known_name in known_packages.items():
        if candidate_id == known_id or candidate_id.startswith(known_id + "."):
            return known_id, known_name

    return package.unique_id, package.name


def scan_reference_patch(
    patch: Dict[str, Any],
    package: PackageInfo,
    dynamic_tokens: Mapping[str, str] | None,
    known_packages: Mapping[str, str],
    base_ids: set[str] | frozenset[str],
    items: Dict[str, InstalledItemInfo],
) -> int:
    entries = patch.get("Entries")
    source = entries if isinstance(entries, (dict, list)) else patch
    found = collect_qualified_ids(source, package.unique_id, dynamic_tokens)

    added = 0
    for qualified_id in found:
        if qualified_id in base_ids or qualified_id in items:
            continue
        parts = split_qualified_id(qualified_id)
        if parts is None:
            continue
        prefix, inner_id = parts
        if prefix not in DEFINED_PREFIXES:
            continue
        owner_id, owner_name = resolve_owner(inner_id, package, known_packages)
        if register_item(items, qualified_id, InstalledItemInfo(owner_id, owner_name, inner_id)):
            added += 1
    return added
