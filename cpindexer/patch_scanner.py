"""Indexing of item-defining ``EditData`` patches."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .logging_utils import log_debug
from .models import InstalledItemInfo, NameStrategy, PackageInfo, SchemaDescriptor
from .text_utils import collapse_whitespace, qualify, resolve_localized_text
from .tokens import expand_tokens, resolve_i18n_tokens, substitute_mod_id

RECORD_NAME_FIELDS = ("DisplayName", "Displayname")
RECORD_FALLBACK_FIELD = "Name"
GUARD_KEY = "When"


def make_name_readable(
    raw: Any,
    translations: Mapping[str, str],
    mod_id: str,
    dynamic_tokens: Mapping[str, str] | None,
) -> str:
    text = raw if isinstance(raw, str) else ("" if raw is None else str(raw))
    text = expand_tokens(text, dynamic_tokens)
    text = substitute_mod_id(text, mod_id)
    text = resolve_i18n_tokens(text, translations)
    text = resolve_localized_text(text)
    return collapse_whitespace(text)


def resolve_inner_id(raw_key: str, mod_id: str, dynamic_tokens: Mapping[str, str] | None) -> str:
    return substitute_mod_id(expand_tokens(raw_key, dynamic_tokens), mod_id)


def _record_name_candidate(entry_data: Any) -> str | None:
    if not isinstance(entry_data, dict):
        return None
    for field_name in (*RECORD_NAME_FIELDS, RECORD_FALLBACK_FIELD):
        value = entry_data.get(field_name)
        if isinstance(value, str):
            return value.strip()
    return None


def resolve_record_display_name(
    entry_data: Any,
    inner_id: str,
    package: PackageInfo,
    dynamic_tokens: Mapping[str, str] | None,
) -> str:
    candidate = _record_name_candidate(entry_data)
    if not candidate:
        return inner_id
    readable = make_name_readable(candidate, package.translations, package.unique_id, dynamic_tokens)
    return readable or inner_id


def resolve_delimited_display_name(
    raw_value: str,
    field_index: int,
    inner_id: str,
    package: PackageInfo,
    dynamic_tokens: Mapping[str, str] | None,
) -> str:
    """Read the display name out of a slash separated data string.

    Falls back to the internal name in field 0, then to the entry id.
    """

    if not raw_value.strip():
        return inner_id

    parts = expand_tokens(raw_value, dynamic_tokens).split("/")
    internal_name = parts[0].strip()
    display_part = parts[field_index].strip() if field_index < len(parts) else ""

    if not display_part:
        return internal_name or inner_id

    readable = make_name_readable(display_part, package.translations, package.unique_id, dynamic_tokens)
    return readable or internal_name or inner_id


def resolve_display_name(
    schema: SchemaDescriptor,
    entry_data: Any,
    inner_id: str,
    package: PackageInfo,
    dynamic_tokens: Mapping[str, str] | None,
) -> str:
    if (
        schema.strategy == NameStrategy.DELIMITED
        and schema.name_field_index is not None
        and isinstance(entry_data, str)
    ):
        return resolve_delimited_display_name(entry_data, schema.name_field_index, inner_id, package, dynamic_tokens)
    return resolve_record_display_name(entry_data, inner_id, package, dynamic_tokens)


def register_item(items: Dict[str, InstalledItemInfo], qualified_id: str, info: InstalledItemInfo) -> bool:
    """Store ``info`` unless the id was already claimed earlier in this run."""

    if qualified_id in items:
        return False
    items[qualified_id] = info
    return True


def _alias_inner_id(entry_data: Any, mod_id: str, dynamic_tokens: Mapping[str, str] | None) -> str | None:
    if not isinstance(entry_data, dict):
        return None
    name = entry_data.get(RECORD_FALLBACK_FIELD)
    if not isinstance(name, str) or not name.strip():
        return None
    return resolve_inner_id(name.strip(), mod_id, dynamic_tokens)


def scan_definition_patch(
    patch: Dict[str, Any],
    schema: SchemaDescriptor,
    package: PackageInfo,
    dynamic_tokens: Mapping[str, str] | None,
    base_ids: set[str] | frozenset[str],
    items: Dict[str, InstalledItemInfo],
) -> int:
    """Register every entry an item-defining patch adds.

    Returns the number of qualified ids newly registered.
    """

    if patch.get("TargetField"):
        return 0
    entries = patch.get("Entries")
    if not isinstance(entries, dict):
        return 0

    mod_id = package.unique_id
    added = 0
    for key, entry_data in entries.items():
        raw_inner_id = str(key).strip()
        if not raw_inner_id or raw_inner_id == GUARD_KEY:
            continue

        inner_id = resolve_inner_id(raw_inner_id, mod_id, dynamic_tokens)
        qualified_id = qualify(schema.prefix, inner_id)
        if "{{" in qualified_id or "}}" in qualified_id:
            log_debug(f"[{mod_id}] Token still present in indexed id: {qualified_id}")

        if qualified_id in base_ids:
            continue

        display_name = resolve_display_name(schema, entry_data, inner_id, package, dynamic_tokens)
        if register_item(items, qualified_id, InstalledItemInfo(mod_id, package.name, display_name)):
            added += 1

        if not schema.supports_alias:
            continue
        alias_inner_id = _alias_inner_id(entry_data, mod_id, dynamic_tokens)
        if not alias_inner_id or alias_inner_id == inner_id:
            continue
        alias_qualified_id = qualify(schema.prefix, alias_inner_id)
        if alias_qualified_id in base_ids:
            continue
        alias_name = resolve_record_display_name(entry_data, alias_inner_id, package, dynamic_tokens)
        if register_item(items, alias_qualified_id, InstalledItemInfo(mod_id, package.name, alias_name)):
            added += 1

    return added
