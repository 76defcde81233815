"""Content Patcher style ``{{Token}}`` substitution.

Only plain named tokens are expanded here. ``{{i18n:...}}`` lookups and the
``{{ModId}}`` placeholder are reserved for the dedicated helpers further down,
so callers can run them as separate passes once the package context is known.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

TOKEN_PATTERN = re.compile(r"\{\{\s*([^}:]+?)\s*}}")
ANY_TOKEN_PATTERN = re.compile(r"\{\{[^}]+}}")
MOD_ID_PATTERN = re.compile(r"\{\{\s*modid\s*}}", re.IGNORECASE)
I18N_PATTERN = re.compile(r"\{\{\s*i18n\s*:\s*([^{}]+?)\s*}}", re.IGNORECASE)

RESERVED_TOKENS = frozenset({"i18n", "modid"})
MAX_TOKEN_PASSES = 10

TokenTable = Mapping[str, str]


def _replace_pass(text: str, tokens: TokenTable) -> str:
    def _replace(match: re.Match[str]) -> str:
        name = match.group(1).strip().lower()
        if name in RESERVED_TOKENS:
            return match.group(0)
        value = tokens.get(name)
        return value if isinstance(value, str) else match.group(0)

    return TOKEN_PATTERN.sub(_replace, text)


def expand_tokens(text: str, tokens: TokenTable | None, max_passes: int = MAX_TOKEN_PASSES) -> str:
    """Expand ``{{Name}}`` tokens until the text stops changing.

    Token names are matched case-insensitively against a table keyed by
    lowercase name. Unknown tokens stay in place.
    """

    if not tokens:
        return text

    value = text
    for _ in range(max_passes):
        expanded = _replace_pass(value, tokens)
        if expanded == value:
            return value
        value = expanded
    return value


def expand_tokens_in_value(value: Any, tokens: TokenTable | None) -> Any:
    """Apply :func:`expand_tokens` to every string and object key in a JSON value."""

    if not tokens:
        return value
    if isinstance(value, str):
        return expand_tokens(value, tokens)
    if isinstance(value, list):
        return [expand_tokens_in_value(item, tokens) for item in value]
    if isinstance(value, dict):
        return {
            expand_tokens(key, tokens) if isinstance(key, str) else key: expand_tokens_in_value(item, tokens)
            for key, item in value.items()
        }
    return value


def has_unresolved_token(text: str) -> bool:
    return ANY_TOKEN_PATTERN.search(text) is not None


def substitute_mod_id(text: str, mod_id: str) -> str:
    return MOD_ID_PATTERN.sub(lambda _match: mod_id, text)


def resolve_i18n_tokens(text: str, translations: Mapping[str, str], max_passes: int = MAX_TOKEN_PASSES) -> str:
    """Resolve ``{{i18n:key}}`` placeholders.

    Keys without a translation collapse to the bare key text. Each pass only
    resolves keys that contain no braces, so ``{{i18n:item.{{i18n:x}}}}``
    resolves inside-out.
    """

    if not text:
        return text

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        if not key:
            return match.group(0)
        translated = translations.get(key)
        if translated and translated.strip():
            return translated.strip()
        return key

    value = text
    for _ in range(max_passes):
        resolved = I18N_PATTERN.sub(_replace, value)
        if resolved == value:
            break
        value = resolved
    return value


def merge_token_tables(*tables: TokenTable | None) -> dict[str, str]:
    """Merge token tables left to right; later tables win on collisions."""

    merged: dict[str, str] = {}
    for table in tables:
        if not table:
            continue
        for name, value in table.items():
            merged[str(name).strip().lower()] = "" if value is None else str(value).strip()
    return merged
