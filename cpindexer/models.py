from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Set


class NameStrategy(str, Enum):
    RECORD = "record"
    DELIMITED = "delimited"


class RebuildStatus(str, Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(slots=True, frozen=True)
class SchemaDescriptor:
    category: str
    prefix: str
    strategy: NameStrategy = NameStrategy.RECORD
    name_field_index: int | None = None
    supports_alias: bool = False


@dataclass(slots=True)
class PackageInfo:
    unique_id: str
    name: str
    root_dir: Path
    translations: Dict[str, str] = field(default_factory=dict)
    dynamic_tokens: Dict[str, str] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return f"{self.name} ({self.unique_id})"


@dataclass(slots=True)
class InstalledItemInfo:
    mod_id: str
    mod_name: str
    name: str


@dataclass(slots=True)
class IndexEntry:
    id: str
    name: str
    qualified_id: str
    mod_id: str
    mod_name: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "qualifiedId": self.qualified_id,
            "modId": self.mod_id,
            "modName": self.mod_name,
        }


@dataclass(slots=True)
class WarningCache:
    """Per-run de-duplication of include diagnostics."""

    missing_includes: Set[str] = field(default_factory=set)
    deferred_includes: Set[str] = field(default_factory=set)
    resolved_includes: Set[str] = field(default_factory=set)
    cyclic_includes: Set[str] = field(default_factory=set)

    def reset(self) -> None:
        self.missing_includes.clear()
        self.deferred_includes.clear()
        self.resolved_includes.clear()
        self.cyclic_includes.clear()

    @staticmethod
    def first_time(seen: Set[str], key: str) -> bool:
        if key in seen:
            return False
        seen.add(key)
        return True


@dataclass(slots=True)
class RebuildOutcome:
    status: RebuildStatus
    output_path: Path | None = None
    package_count: int = 0
    item_count: int = 0
    packages: list[PackageInfo] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.status == RebuildStatus.UPDATED
