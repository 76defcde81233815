from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

from openpyxl import Workbook

from .logging_utils import log_info, log_ok
from .models import PackageInfo

ITEM_COLUMNS = ("qualifiedId", "id", "name", "modId", "modName")


def print_index_summary(document: Mapping[str, Any], packages: Sequence[PackageInfo]) -> None:
    counts: dict[str, int] = {}
    for category in document.get("categoryTypes", {}):
        for item in document.get(category, []):
            counts[item["modId"]] = counts.get(item["modId"], 0) + 1

    if not counts:
        log_ok("No installed mod items indexed.")
        return

    log_info("Items per mod:")
    for package in sorted(packages, key=lambda pkg: pkg.unique_id.lower()):
        total = counts.pop(package.unique_id, 0)
        log_info(f"{package.label}: {total} items", indent=2)
    # Referenced ids can be owned by mods that are not installed themselves.
    for mod_id, total in sorted(counts.items()):
        log_info(f"{mod_id}: {total} items (referenced only)", indent=2)


def export_report(output_path: Path, document: Mapping[str, Any]) -> None:
    """Write an Excel workbook with one sheet per non-empty category."""

    output_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    summary_sheet = workbook.active
    if not summary_sheet:
        summary_sheet = workbook.create_sheet("summary")
    else:
        summary_sheet.title = "summary"
    summary_sheet.append(["category", "prefix", "items"])

    category_types: Mapping[str, str] = document.get("categoryTypes", {})
    for category, prefix in category_types.items():
        items = document.get(category, [])
        summary_sheet.append([category, prefix, len(items)])
        if not items:
            continue
        sheet = workbook.create_sheet(category)
        sheet.append(list(ITEM_COLUMNS))
        for item in items:
            sheet.append([item.get(column, "") for column in ITEM_COLUMNS])

    workbook.save(output_path)
    workbook.close()


__all__ = ["print_index_summary", "export_report"]
