from __future__ import annotations

from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Mapping

from .file_utils import iter_json_files, read_jsonc
from .includes import expand_include_patches
from .index_builder import build_index_document, write_if_changed
from .load_config import ConfigNotFoundError, IndexerConfig, load_base_qualified_ids, require_mods_root
from .logging_utils import log_debug, log_error, log_info, log_ok
from .models import InstalledItemInfo, PackageInfo, RebuildOutcome, RebuildStatus, WarningCache
from .package_loader import build_known_packages, discover_package_folders, load_package, parse_dynamic_tokens
from .patch_scanner import scan_definition_patch
from .reference_scanner import scan_reference_patch
from .schemas import is_reference_target, schema_for_target

EDIT_DATA_ACTION = "editdata"
TEMPLATE_MARKER = "template"


def is_template_document(path: Path, document: Mapping[str, object]) -> bool:
    """Template files only make sense when included with local tokens."""

    return TEMPLATE_MARKER in path.name.lower() and isinstance(document.get("Changes"), list)


class InstalledIndexer:
    """Builds the installed item index for every package under the mods root.

    One instance is meant to live for the whole process; the include warning
    caches it owns are cleared at the start of every rebuild.
    """

    def __init__(self, config: IndexerConfig, base_ids: Iterable[str] | None = None) -> None:
        self.config = config
        self._base_ids = frozenset(base_ids) if base_ids is not None else None
        self.warnings = WarningCache()

    def _load_base_ids(self) -> FrozenSet[str]:
        if self._base_ids is not None:
            return self._base_ids
        return frozenset(load_base_qualified_ids(self.config.baseline_paths))

    def rebuild(self, auto: bool = False) -> RebuildOutcome:
        self.warnings.reset()

        try:
            mods_root = require_mods_root(self.config)
        except ConfigNotFoundError as exc:
            if not auto:
                log_error(f"{exc} A valid mods root folder is required.")
            return RebuildOutcome(status=RebuildStatus.SKIPPED)

        base_ids = self._load_base_ids()
        packages = [load_package(package_dir) for package_dir in discover_package_folders(mods_root)]
        known_packages = build_known_packages(packages)
        log_debug(f"Known mods loaded: {len(known_packages)}")

        if auto:
            log_debug(f"Auto rebuild scanning {len(packages)} mod folders.")
        else:
            log_info(f"Detected {len(packages)} mod folders.")

        items: Dict[str, InstalledItemInfo] = {}
        for package in packages:
            self.scan_package(package, base_ids, known_packages, items)

        output_path = self.config.output_path
        changed = write_if_changed(output_path, build_index_document(items))

        if changed:
            if auto:
                log_info(f"Installed mod index updated: {output_path}")
            else:
                log_ok(f"Installed item index updated: {output_path}")
        elif auto:
            log_debug("Installed mod index unchanged.")
        else:
            log_info("Installed item index is already up to date.")

        return RebuildOutcome(
            status=RebuildStatus.UPDATED if changed else RebuildStatus.UNCHANGED,
            output_path=output_path,
            package_count=len(packages),
            item_count=len(items),
            packages=packages,
        )

    def scan_package(
        self,
        package: PackageInfo,
        base_ids: FrozenSet[str],
        known_packages: Mapping[str, str],
        items: Dict[str, InstalledItemInfo],
    ) -> int:
        log_debug(f"Mod folder '{package.root_dir.name}' -> modId='{package.unique_id}', modName='{package.name}'")
        added = 0
        for path in iter_json_files(package.root_dir):
            added += self.scan_document(path, package, base_ids, known_packages, items)
        return added

    def scan_document(
        self,
        path: Path,
        package: PackageInfo,
        base_ids: FrozenSet[str],
        known_packages: Mapping[str, str],
        items: Dict[str, InstalledItemInfo],
    ) -> int:
        document = read_jsonc(path)
        if document is None:
            return 0
        changes = document.get("Changes")
        if not isinstance(changes, list):
            return 0
        if is_template_document(path, document):
            log_debug(f"[{package.unique_id}] Skipping template for direct indexing: '{path.name}'")
            return 0

        dynamic_tokens = {**package.dynamic_tokens, **parse_dynamic_tokens(document)}
        patches = expand_include_patches(
            changes,
            package,
            dynamic_tokens,
            self.warnings,
            visiting=frozenset({path.resolve()}),
        )

        added = 0
        for patch in patches:
            if not isinstance(patch, dict):
                continue
            if str(patch.get("Action", "")).strip().casefold() != EDIT_DATA_ACTION:
                continue
            target = patch.get("Target")
            if not isinstance(target, str):
                continue

            if is_reference_target(target):
                added += scan_reference_patch(patch, package, dynamic_tokens, known_packages, base_ids, items)
                continue

            schema = schema_for_target(target)
            if schema is None:
                continue
            added += scan_definition_patch(patch, schema, package, dynamic_tokens, base_ids, items)
        return added
