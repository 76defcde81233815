from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Set

import toml

from .file_utils import read_jsonc
from .logging_utils import log_info, log_warn

DEFAULT_OUTPUT = Path("data/installed-mod-ids.json")
DEFAULT_AUTO_REBUILD_COOLDOWN = 10.0


class ConfigNotFoundError(FileNotFoundError):
    """The configured mods root is missing or is not a directory."""


@dataclass(slots=True)
class IndexerConfig:
    mods_root: Path | None = None
    output_path: Path = DEFAULT_OUTPUT
    baseline_paths: List[Path] = field(default_factory=list)
    auto_rebuild_cooldown: float = DEFAULT_AUTO_REBUILD_COOLDOWN


def load_program_config(config_path: Path) -> IndexerConfig:
    """Load indexer settings from a TOML file.

    Relative paths in the file are resolved against the file's directory.
    """

    config = IndexerConfig()
    if not config_path.exists():
        log_warn(f"Config file {config_path} not found. Proceeding with defaults.")
        return config

    raw_text = config_path.read_text(encoding="utf-8")
    try:
        data = toml.loads(raw_text)
    except toml.TomlDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {config_path}") from exc

    base_dir = config_path.parent
    if data.get("mods_root"):
        config.mods_root = base_dir / str(data["mods_root"])
    if data.get("output"):
        config.output_path = base_dir / str(data["output"])
    baseline = data.get("baseline", [])
    if isinstance(baseline, str):
        baseline = [baseline]
    if not isinstance(baseline, list):
        raise ValueError(f"Invalid 'baseline' in config file: {config_path}")
    config.baseline_paths = [base_dir / str(entry) for entry in baseline]
    if "auto_rebuild_cooldown" in data:
        config.auto_rebuild_cooldown = float(data["auto_rebuild_cooldown"])
    return config


def require_mods_root(config: IndexerConfig) -> Path:
    mods_root = config.mods_root
    if mods_root is None or not str(mods_root).strip():
        raise ConfigNotFoundError("No mods root folder is configured.")
    mods_root = mods_root.expanduser()
    if not mods_root.is_dir():
        raise ConfigNotFoundError(f"Mods root folder {mods_root} does not exist or is not a directory.")
    return mods_root


def _baseline_candidates(path: Path) -> List[Path]:
    if path.suffix.lower() in (".json", ".jsonc"):
        return [path]
    return [path.with_name(path.name + ".jsonc"), path.with_name(path.name + ".json")]


def load_base_qualified_ids(baseline_paths: Sequence[Path]) -> Set[str]:
    """Collect every qualified id listed in the given index-shaped documents.

    These are vanilla or hand-maintained ids that must never be reported as
    package additions.
    """

    base: Set[str] = set()
    for baseline in baseline_paths:
        for candidate in _baseline_candidates(baseline):
            if not candidate.exists():
                continue
            data = read_jsonc(candidate)
            if data is None:
                log_warn(f"Baseline file {candidate} could not be parsed, skipping.")
                continue
            category_types = data.get("categoryTypes")
            if not isinstance(category_types, dict):
                continue
            for category in category_types:
                items = data.get(category)
                if not isinstance(items, list):
                    continue
                for item in items:
                    if isinstance(item, dict) and item.get("qualifiedId"):
                        base.add(str(item["qualifiedId"]).strip())

    log_info(f"Loaded {len(base)} base qualified IDs.")
    return base
