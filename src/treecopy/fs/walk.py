from collections.abc import Callable, Hashable, Iterator
from pathlib import Path

from loguru import logger

from .local import FileSystem
from .spec import SpecEntryDecision, SpecFsEntry


def _list_children(
    filesystem: FileSystem,
    path_dir: Path,
    on_warning: Callable[[str], None],
) -> list[SpecFsEntry]:
    try:
        return filesystem.list_dir(path_dir)
    except OSError as e:
        on_warning(f"Failed to list directory: {path_dir} ({e})")
        return []


def iter_tree(
    filesystem: FileSystem,
    dir_root: Path,
    decide: Callable[[SpecFsEntry], SpecEntryDecision],
    *,
    on_warning: Callable[[str], None] | None = None,
) -> Iterator[tuple[SpecFsEntry, SpecEntryDecision]]:
    """Lazily walk everything below ``dir_root``, parents before children.

    Each entry is yielded together with ``decide(entry)``. The walk descends
    into a directory unless that decision asks to prune it, so whether an
    entry is recorded and whether its subtree is visited are independent.
    Children are visited in ``list_dir`` order.

    Args:
        filesystem: Filesystem primitives.
        dir_root: Directory to walk; the root itself is not yielded.
        decide: Filter decision for one entry.
        on_warning: Receives non-fatal problems (unlistable directory,
            symlink loop). Defaults to a loguru warning.

    Yields:
        ``(entry, decision)`` pairs in depth-first pre-order.
    """
    fn_warn = on_warning or (lambda msg: logger.warning(msg))
    set_visited_dirs: set[Hashable] = set()
    try:
        set_visited_dirs.add(filesystem.identify_dir(dir_root))
    except OSError as e:
        fn_warn(f"Failed to stat directory: {dir_root} ({e})")

    l_stack: list[Iterator[SpecFsEntry]] = [
        iter(_list_children(filesystem, dir_root, fn_warn))
    ]
    while l_stack:
        entry = next(l_stack[-1], None)
        if entry is None:
            l_stack.pop()
            continue

        decision = decide(entry)
        yield entry, decision

        if not entry.if_dir or decision.if_prune:
            continue
        try:
            dir_identifier = filesystem.identify_dir(entry.path)
        except OSError as e:
            fn_warn(f"Failed to stat directory: {entry.path} ({e})")
            continue
        if dir_identifier in set_visited_dirs:
            fn_warn(f"Symlink loop detected: {entry.path}")
            continue
        set_visited_dirs.add(dir_identifier)
        l_stack.append(iter(_list_children(filesystem, entry.path, fn_warn)))
