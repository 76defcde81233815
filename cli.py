from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from cpindexer import (
    InstalledIndexer,
    RebuildScheduler,
    RebuildStatus,
    export_report,
    load_program_config,
    print_index_summary,
)
from cpindexer.file_utils import read_jsonc
from cpindexer.logging_utils import log_info, log_warn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Scan installed Content Patcher packs, collect every item ID they add, "
            "and write the installed item index used by the editor tooling."
        )
    )
    parser.add_argument(
        "--config-path",
        type=Path,
        default=Path("config.toml"),
        help="Path to the program configuration TOML file.",
    )
    parser.add_argument(
        "--mods-root",
        type=Path,
        default=None,
        help="Directory that contains the installed mod folders. Overrides the config file.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the installed item index JSON. Overrides the config file.",
    )
    parser.add_argument(
        "--baseline",
        type=Path,
        nargs="*",
        default=None,
        help="Index files listing vanilla/custom IDs that must not be reported as mod items.",
    )
    parser.add_argument(
        "--auto",
        action="store_true",
        default=False,
        help="Run as an automatic rebuild: quiet, and a missing mods root is not an error.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print how many items each mod contributed.",
    )
    parser.add_argument(
        "--export-path",
        type=Path,
        default=Path(""),
        help="Path to save an Excel report of the index.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = load_program_config(args.config_path.expanduser())
    if args.mods_root is not None:
        config.mods_root = args.mods_root.expanduser()
    if args.output is not None:
        config.output_path = args.output.expanduser()
    if args.baseline is not None:
        config.baseline_paths = [path.expanduser() for path in args.baseline]

    indexer = InstalledIndexer(config)
    scheduler = RebuildScheduler(indexer.rebuild, cooldown=config.auto_rebuild_cooldown)
    outcome = asyncio.run(scheduler.rebuild_now(auto=args.auto))

    if outcome is None:
        raise SystemExit("Installed index rebuild failed.")
    if outcome.status == RebuildStatus.SKIPPED:
        if args.auto:
            return
        raise SystemExit(1)

    document = read_jsonc(outcome.output_path) if outcome.output_path else None
    if document is None:
        log_warn("Index file could not be read back; skipping summary and report.")
        return

    if args.verbose:
        print_index_summary(document, outcome.packages)
    state = "updated" if outcome.changed else "unchanged"
    log_info(f"Total items indexed: {outcome.item_count} from {outcome.package_count} mods (index {state})")

    export_path = args.export_path
    if not export_path == Path(""):
        if export_path.suffix.lower() != ".xlsx":
            export_path = export_path / "installed_items.xlsx"
        export_report(output_path=export_path, document=document)
        log_info(f"Report saved to {export_path}")


if __name__ == "__main__":
    main()
