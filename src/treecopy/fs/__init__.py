from .copy import collect_copy_items, copy_path, execute_copy_plan
from .local import FileSystem, LocalFileSystem
from .report import ReportCopy, ReportCopyBuilder
from .spec import (
    EnumCopyItemKind,
    SpecCopyError,
    SpecCopyItem,
    SpecCopyPatterns,
    SpecCopyPlan,
    SpecCopyProgress,
    SpecEntryDecision,
    SpecFsEntry,
    split_pattern_tokens,
)
from .util import calculate_percent, is_pattern_matching, match_wildcard

__all__ = [
    "EnumCopyItemKind",
    "FileSystem",
    "LocalFileSystem",
    "ReportCopy",
    "ReportCopyBuilder",
    "SpecCopyError",
    "SpecCopyItem",
    "SpecCopyPatterns",
    "SpecCopyPlan",
    "SpecCopyProgress",
    "SpecEntryDecision",
    "SpecFsEntry",
    "calculate_percent",
    "collect_copy_items",
    "copy_path",
    "execute_copy_plan",
    "is_pattern_matching",
    "match_wildcard",
    "split_pattern_tokens",
]
