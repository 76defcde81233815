from __future__ import annotations

from typing import Dict

from .models import NameStrategy, SchemaDescriptor

SCHEMAS: Dict[str, SchemaDescriptor] = {
    "data/objects": SchemaDescriptor("objects", "O", supports_alias=True),
    "data/bigcraftables": SchemaDescriptor("bigCraftables", "BC"),
    "data/weapons": SchemaDescriptor("weapons", "W"),
    "data/furniture": SchemaDescriptor("furniture", "F", NameStrategy.DELIMITED, name_field_index=7),
    "data/boots": SchemaDescriptor("boots", "B", NameStrategy.DELIMITED, name_field_index=6),
    "data/hats": SchemaDescriptor("hats", "H", NameStrategy.DELIMITED, name_field_index=5),
    "data/shirts": SchemaDescriptor("shirts", "S"),
    "data/pants": SchemaDescriptor("pants", "P"),
    "data/tools": SchemaDescriptor("tools", "T"),
}

REFERENCE_TARGETS = frozenset(
    {
        "data/machines",
        "data/cookingrecipes",
        "data/craftingrecipes",
        "data/shops",
        "data/events",
        "data/npcgifttastes",
        "data/locations",
    }
)

# Order is the order of the arrays in the written index document.
CATEGORY_TYPES: Dict[str, str] = {
    "objects": "O",
    "bigCraftables": "BC",
    "boots": "B",
    "flooring": "FL",
    "furniture": "F",
    "hats": "H",
    "mannequins": "M",
    "pants": "P",
    "shirts": "S",
    "tools": "T",
    "trinkets": "TR",
    "wallpapers": "WP",
    "weapons": "W",
}

PREFIX_TO_CATEGORY: Dict[str, str] = {prefix: category for category, prefix in CATEGORY_TYPES.items()}
DEFAULT_CATEGORY = "objects"

# Prefixes that item-defining schemas can produce; reference scanning only
# registers these.
DEFINED_PREFIXES = frozenset(schema.prefix for schema in SCHEMAS.values())


def normalize_target(target: str) -> str:
    return target.strip().replace("\\", "/").casefold()


def schema_for_target(target: str) -> SchemaDescriptor | None:
    return SCHEMAS.get(normalize_target(target))


def is_reference_target(target: str) -> bool:
    return normalize_target(target) in REFERENCE_TARGETS


def category_for_prefix(prefix: str) -> str:
    return PREFIX_TO_CATEGORY.get(prefix, DEFAULT_CATEGORY)
