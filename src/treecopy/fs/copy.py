import os
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from .local import FileSystem, LocalFileSystem
from .report import ReportCopy, ReportCopyBuilder
from .spec import (
    EnumCopyItemKind,
    SpecCopyItem,
    SpecCopyPatterns,
    SpecCopyPlan,
    SpecCopyProgress,
    SpecEntryDecision,
    SpecFsEntry,
    format_display_path,
)
from .util import (
    calculate_percent,
    decide_entry,
    derive_destination,
    is_nested_in,
    should_exclude_by_patterns,
)
from .walk import iter_tree

################################################################################
# #region Enumeration


def collect_copy_items(
    path_source: Path,
    path_destination: Path,
    *,
    spec_patterns: SpecCopyPatterns,
    if_skip_empty_dir: bool = False,
    filesystem: FileSystem,
) -> SpecCopyPlan:
    """Enumerate the source and build the ordered work items.

    Args:
        path_source: Source file or directory; must exist.
        path_destination: Destination root (directory source) or target path
            (file source).
        spec_patterns: Include/exclude lists.
        if_skip_empty_dir: Do not turn directory entries into work items.
        filesystem: Filesystem primitives.

    Returns:
        SpecCopyPlan: Work items in visitation order with file count and size.
    """
    l_items: list[SpecCopyItem] = []
    l_warnings: list[str] = []
    n_files = 0
    n_size_all = 0
    b_case_sensitive = filesystem.if_case_sensitive

    def _warn(msg: str) -> None:
        logger.warning(msg)
        l_warnings.append(msg)

    def _resolve_size(path: Path) -> int:
        try:
            return filesystem.file_size(path)
        except OSError as e:
            _warn(f"Failed to read file size: {path} ({e})")
            return 0

    if filesystem.is_dir(path_source):

        def _decide(entry: SpecFsEntry) -> SpecEntryDecision:
            return decide_entry(
                entry.path,
                entry.if_dir,
                spec_patterns,
                if_skip_empty_dir=if_skip_empty_dir,
                if_case_sensitive=b_case_sensitive,
            )

        for _entry, _decision in iter_tree(
            filesystem, path_source, _decide, on_warning=_warn
        ):
            if not _decision.if_accept:
                continue
            path_dst = derive_destination(_entry.path, path_source, path_destination)
            if _entry.if_dir:
                l_items.append(
                    SpecCopyItem(
                        _entry.path, path_dst, 0, EnumCopyItemKind.DIRECTORY
                    )
                )
                continue
            n_size = _resolve_size(_entry.path)
            l_items.append(SpecCopyItem(_entry.path, path_dst, n_size))
            n_size_all += n_size
            n_files += 1

    elif not should_exclude_by_patterns(
        str(path_source), spec_patterns, if_case_sensitive=b_case_sensitive
    ):
        n_size = filesystem.file_size(path_source)
        l_items.append(SpecCopyItem(path_source, path_destination, n_size))
        n_size_all += n_size
        n_files += 1

    logger.debug(
        f"Enumerated {len(l_items)} items ({n_files} files, {n_size_all}B) "
        f"from {path_source}"
    )
    return SpecCopyPlan(
        items=tuple(l_items),
        cnt_files=n_files,
        size_all=n_size_all,
        warnings=tuple(l_warnings),
    )


# #endregion
################################################################################
# #region Execution


def execute_copy_plan(
    plan: SpecCopyPlan,
    *,
    filesystem: FileSystem,
    on_progress: Callable[[SpecCopyProgress], None] | None = None,
    time_start: float | None = None,
) -> ReportCopy:
    """Copy every work item in order, isolating failures per item.

    Args:
        plan: Work items from :func:`collect_copy_items`.
        filesystem: Filesystem primitives.
        on_progress: Called after every attempt, successful or not.
        time_start: ``time.perf_counter()`` value at which the run started;
            defaults to now.

    Returns:
        ReportCopy: Final statistics of the run.
    """
    t_run = time.perf_counter() if time_start is None else time_start
    builder_cp_report = ReportCopyBuilder()
    builder_cp_report.add_planned(plan.cnt_files, plan.size_all)
    for _warning in plan.warnings:
        builder_cp_report.add_warning(_warning)

    n_total = len(plan.items)
    for _idx, _item in enumerate(plan.items, start=1):
        t_item = time.perf_counter()
        spec_error = None
        try:
            filesystem.copy_path(_item.path_src, _item.path_dst, if_dir=_item.is_dir)
            builder_cp_report.add_copied(_item)
        except OSError as e:
            spec_error = builder_cp_report.add_error(_item.path_src, _item.path_dst, e)
            logger.debug(f"Copy failed: {_item.path_src} -> {_item.path_dst}: {e}")

        if on_progress is not None:
            t_now = time.perf_counter()
            spec_progress = SpecCopyProgress(
                item=_item,
                index=_idx,
                total=n_total,
                time_event=time.strftime("%H:%M:%S"),
                seconds_item=t_now - t_item,
                seconds_run=t_now - t_run,
                size_copied=builder_cp_report.size_copied,
                size_all=builder_cp_report.size_all,
                percent=calculate_percent(
                    builder_cp_report.size_copied, builder_cp_report.size_all
                ),
                error=spec_error,
            )
            # a failing reporter must not stop the remaining copies
            try:
                on_progress(spec_progress)
            except Exception as e:
                c_warning = (
                    f"Progress report failed for "
                    f"{format_display_path(_item.path_src)}: {e!r}"
                )
                builder_cp_report.add_warning(c_warning)
                logger.warning(c_warning)

    report = builder_cp_report.build(seconds_elapsed=time.perf_counter() - t_run)
    logger.debug(f"Copy finished: {report}")
    return report


# #endregion
################################################################################
# #region Entry


def copy_path(
    path_source: os.PathLike[str] | str,
    path_destination: os.PathLike[str] | str,
    *,
    patterns_include: Sequence[str] | str | None = None,
    patterns_exclude: Sequence[str] | str | None = None,
    if_skip_empty_dir: bool = False,
    filesystem: FileSystem | None = None,
    on_plan: Callable[[SpecCopyPlan], None] | None = None,
    on_progress: Callable[[SpecCopyProgress], None] | None = None,
) -> ReportCopy:
    """Copy a file or a directory tree with wildcard filtering.

    Args:
        path_source: Source file or directory.
        path_destination: Destination root for a directory source, target
            path for a file source.
        patterns_include: Include patterns matched against full source paths;
            tokens may hold several patterns joined by ``,`` or ``;``.
        patterns_exclude: Exclude patterns, same syntax.
        if_skip_empty_dir: Create directories only as parents of copied files.
        filesystem: Filesystem primitives; defaults to ``LocalFileSystem``.
        on_plan: Called once after enumeration, before any copy.
        on_progress: Called after every copy attempt.

    Raises:
        FileNotFoundError: If the source path does not exist.

    Returns:
        ReportCopy: Summary of the run; ``calculate_error_count`` is the
        number of failed work items.
    """
    t_start = time.perf_counter()
    fs_impl = filesystem or LocalFileSystem()
    path_src = Path(path_source)
    path_dst = Path(path_destination)

    if not fs_impl.exists(path_src):
        raise FileNotFoundError(
            f"Source path does not exist: {format_display_path(path_src)}"
        )

    if is_nested_in(path_dst, path_src) and fs_impl.is_dir(path_src):
        logger.warning(f"Destination lies inside the source tree: {path_dst}")

    spec_patterns = SpecCopyPatterns.from_raw(
        patterns_include=patterns_include,
        patterns_exclude=patterns_exclude,
    )
    plan = collect_copy_items(
        path_src,
        path_dst,
        spec_patterns=spec_patterns,
        if_skip_empty_dir=if_skip_empty_dir,
        filesystem=fs_impl,
    )
    if on_plan is not None:
        on_plan(plan)

    return execute_copy_plan(
        plan,
        filesystem=fs_impl,
        on_progress=on_progress,
        time_start=t_start,
    )


# #endregion
################################################################################
