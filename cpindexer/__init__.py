"""Installed item indexing for Content Patcher content packs."""

from .index_builder import build_index_document, stable_stringify, write_if_changed
from .indexer import InstalledIndexer
from .load_config import (
    ConfigNotFoundError,
    IndexerConfig,
    load_base_qualified_ids,
    load_program_config,
)
from .models import (
    IndexEntry,
    InstalledItemInfo,
    PackageInfo,
    RebuildOutcome,
    RebuildStatus,
    SchemaDescriptor,
)
from .report import export_report, print_index_summary
from .scheduler import RebuildScheduler
from .tokens import expand_tokens, expand_tokens_in_value, resolve_i18n_tokens, substitute_mod_id

__all__ = [
    "IndexEntry",
    "InstalledItemInfo",
    "PackageInfo",
    "RebuildOutcome",
    "RebuildStatus",
    "SchemaDescriptor",
    "ConfigNotFoundError",
    "IndexerConfig",
    "load_program_config",
    "load_base_qualified_ids",
    "InstalledIndexer",
    "RebuildScheduler",
    "build_index_document",
    "stable_stringify",
    "write_if_changed",
    "expand_tokens",
    "expand_tokens_in_value",
    "resolve_i18n_tokens",
    "substitute_mod_id",
    "export_report",
    "print_index_summary",
]
