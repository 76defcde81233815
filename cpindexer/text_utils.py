from __future__ import annotations

import re

WHITESPACE_PATTERN = re.compile(r"\s+")
QUALIFIED_ID_PATTERN = re.compile(r"^\(([A-Z]+)\)(.+)$")
EMBEDDED_QUALIFIED_ID_PATTERN = re.compile(r"\(([A-Z]+)\)([A-Za-z0-9._-]+)\b")
LOCALIZED_TEXT_PATTERN = re.compile(r"\[\s*LocalizedText\s+([^\]]+?)\s*]", re.IGNORECASE)
NAME_SUFFIX_PATTERN = re.compile(r"_(DisplayName|Name|title|Title|label|Label)$", re.IGNORECASE)
DOTTED_NAME_SUFFIX_PATTERN = re.compile(r"\.?(DisplayName|Name)$", re.IGNORECASE)
CAMEL_BOUNDARY_PATTERN = re.compile(r"([a-z0-9])([A-Z])")


def collapse_whitespace(raw: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", raw).strip()


def qualify(prefix: str, inner_id: str) -> str:
    return f"({prefix}){inner_id}"


def split_qualified_id(qualified_id: str) -> tuple[str, str] | None:
    match = QUALIFIED_ID_PATTERN.match(qualified_id)
    if not match:
        return None
    return match.group(1), match.group(2)


def friendly_from_localized_text_key(raw_key: str) -> str:
    """Turn a game string key into something a person can read.

    ``Strings\\Objects:IceOrbRing_Name`` becomes ``Ice Orb Ring``.
    """

    if not raw_key:
        return raw_key

    key = raw_key.strip('"').strip()
    _, _, tail = key.rpartition(":")
    tail = tail.strip()

    tail = NAME_SUFFIX_PATTERN.sub("", tail)
    tail = DOTTED_NAME_SUFFIX_PATTERN.sub("", tail)
    tail = tail.replace("_", " ")
    tail = CAMEL_BOUNDARY_PATTERN.sub(r"\1 \2", tail)
    tail = collapse_whitespace(tail)

    return tail or raw_key


def resolve_localized_text(raw: str) -> str:
    """Replace every ``[LocalizedText ...]`` marker in ``raw`` with readable text."""

    if not raw:
        return raw

    def _replace(match: re.Match[str]) -> str:
        return friendly_from_localized_text_key(match.group(1)) or match.group(0)

    return LOCALIZED_TEXT_PATTERN.sub(_replace, raw)


def find_embedded_qualified_ids(raw: str) -> list[str]:
    return [qualify(match.group(1), match.group(2)) for match in EMBEDDED_QUALIFIED_ID_PATTERN.finditer(raw)]
