"""Splicing of ``Action: Include`` patches into their parent change list."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping

from .file_utils import read_jsonc
from .logging_utils import log_debug, log_warn
from .models import PackageInfo, WarningCache
from .tokens import (
    expand_tokens,
    expand_tokens_in_value,
    has_unresolved_token,
    merge_token_tables,
    substitute_mod_id,
)

INCLUDE_ACTION = "include"


def is_include_patch(patch: Any) -> bool:
    return isinstance(patch, dict) and str(patch.get("Action", "")).strip().casefold() == INCLUDE_ACTION


def split_from_file_value(raw: Any) -> List[str]:
    """``FromFile`` may be a single path, a comma separated list or an array."""

    if isinstance(raw, list):
        return [item.strip() for item in raw if isinstance(item, str) and item.strip()]
    if not isinstance(raw, str):
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def build_include_token_map(
    mod_id: str,
    dynamic_tokens: Mapping[str, str] | None,
    local_tokens: Any,
) -> Dict[str, str]:
    local = local_tokens if isinstance(local_tokens, dict) else None
    token_map = merge_token_tables(dynamic_tokens, local)
    token_map["modid"] = mod_id
    return token_map


def _propagate_guard(children: List[Any], guard: Any) -> List[Any]:
    if guard is None:
        return list(children)
    guarded: List[Any] = []
    for child in children:
        if isinstance(child, dict) and "When" not in child:
            child = {**child, "When": guard}
        guarded.append(child)
    return guarded


def expand_include_patches(
    changes: List[Any],
    package: PackageInfo,
    dynamic_tokens: Mapping[str, str] | None,
    warnings: WarningCache,
    visiting: FrozenSet[Path] = frozenset(),
) -> List[Any]:
    """Replace every include patch with the changes of the file it points to.

    Includes that cannot be resolved right now (unresolved tokens, missing or
    broken files, include cycles) are kept as they are so nothing is lost.
    """

    mod_id = package.unique_id
    expanded: List[Any] = []

    for patch in changes:
        if not isinstance(patch, dict):
            continue
        if not is_include_patch(patch):
            expanded.append(patch)
            continue

        from_files = split_from_file_value(patch.get("FromFile"))
        if not from_files:
            log_debug(f"[{mod_id}] Include skipped: empty or invalid FromFile.")
            expanded.append(patch)
            continue

        token_map = build_include_token_map(mod_id, dynamic_tokens, patch.get("LocalTokens"))
        keep_unexpanded = False

        for from_file in from_files:
            resolved_name = substitute_mod_id(expand_tokens(from_file, token_map), mod_id)

            if has_unresolved_token(resolved_name):
                if warnings.first_time(warnings.deferred_includes, f"{mod_id}::{resolved_name}"):
                    log_debug(f"[{mod_id}] Include deferred (unresolved tokens): '{from_file}' -> '{resolved_name}'")
                keep_unexpanded = True
                continue

            include_path = (package.root_dir / resolved_name).resolve()
            path_key = f"{mod_id}::{include_path}"
            exists = include_path.is_file()

            if warnings.first_time(warnings.resolved_includes, path_key):
                log_debug(f"[{mod_id}] Include resolved: '{resolved_name}' -> '{include_path}' (exists={exists})")

            if not exists:
                if warnings.first_time(warnings.missing_includes, path_key):
                    log_warn(f"[{mod_id}] Include missing file: '{include_path}' (FromFile='{resolved_name}')")
                keep_unexpanded = True
                continue

            if include_path in visiting:
                if warnings.first_time(warnings.cyclic_includes, path_key):
                    log_warn(f"[{mod_id}] Include cycle detected at '{include_path}', leaving it unexpanded.")
                keep_unexpanded = True
                continue

            document = read_jsonc(include_path)
            if document is None:
                if warnings.first_time(warnings.missing_includes, f"{path_key}::parse"):
                    log_warn(f"[{mod_id}] Include failed to parse: '{include_path}'")
                keep_unexpanded = True
                continue

            document = expand_tokens_in_value(document, token_map)
            children = document.get("Changes")
            if not isinstance(children, list):
                continue

            children = _propagate_guard(children, patch.get("When"))
            expanded.extend(
                expand_include_patches(
                    children,
                    package,
                    {name: value for name, value in token_map.items() if name != "modid"},
                    warnings,
                    visiting | {include_path},
                )
            )

        if keep_unexpanded:
            expanded.append(patch)

    return expanded
