import unicodedata
from collections.abc import Sequence
from pathlib import Path

from .spec import SpecCopyPatterns, SpecEntryDecision

################################################################################
# #region PatternMatching


def _char_width(char: str) -> int:
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def _split_width_units(text: str) -> list[str | None]:
    """One unit per column; a wide character is followed by a ``None`` tail."""
    l_units: list[str | None] = []
    for _char in text:
        l_units.append(_char)
        if _char_width(_char) == 2:
            l_units.append(None)
    return l_units


def _closure_stars(pattern: Sequence[str | None], states: set[int]) -> set[int]:
    """Extend pattern positions across ``*`` (which may match nothing)."""
    l_pending = list(states)
    while l_pending:
        n_pos = l_pending.pop()
        if n_pos < len(pattern) and pattern[n_pos] == "*":
            if (n_next := n_pos + 1) not in states:
                states.add(n_next)
                l_pending.append(n_next)
    return states


def match_wildcard(value: str, pattern: str, *, if_case_sensitive: bool = True) -> bool:
    """Match ``value`` against one wildcard pattern.

    Matching runs over display columns. A wide (CJK) character takes two
    columns, ``?`` consumes exactly one column and ``*`` any number of them.
    A wide character is therefore matched by ``??``, ``?*`` or ``*?`` but not
    by a lone ``?``. Literal characters must match whole characters. Every
    other character is literal; ``[`` has no special meaning.

    Args:
        value: String to test, typically a full path.
        pattern: Wildcard pattern.
        if_case_sensitive: Compare case-sensitively if True.

    Returns:
        True if the whole of ``value`` matches ``pattern``.

    Examples:
        >>> match_wildcard("/src/a.txt", "*.txt")
        True
        >>> match_wildcard("中.txt", "?.txt")
        False
        >>> match_wildcard("中.txt", "??.txt")
        True
        >>> match_wildcard("/src/中文.txt", "/src/?*")
        True
    """
    if not if_case_sensitive:
        value = value.casefold()
        pattern = pattern.casefold()

    l_pattern = _split_width_units(pattern)
    n_pattern = len(l_pattern)
    set_states = _closure_stars(l_pattern, {0})
    for _unit in _split_width_units(value):
        set_next: set[int] = set()
        for _pos in set_states:
            if _pos >= n_pattern:
                continue
            c_pat = l_pattern[_pos]
            if c_pat == "*":
                set_next.add(_pos)
            elif c_pat == "?" or c_pat == _unit:
                set_next.add(_pos + 1)
        if not set_next:
            return False
        set_states = _closure_stars(l_pattern, set_next)
    return n_pattern in set_states


def is_pattern_matching(
    value: str,
    patterns: Sequence[str],
    *,
    if_case_sensitive: bool = True,
) -> bool:
    """Check whether a value matches any pattern.

    An empty sequence matches nothing; "no filter" is decided by the caller.
    """
    return any(
        match_wildcard(value, p, if_case_sensitive=if_case_sensitive)
        for p in patterns
    )


def should_exclude_by_patterns(
    value: str,
    spec_patterns: SpecCopyPatterns,
    *,
    if_case_sensitive: bool = True,
) -> bool:
    """Apply include-then-exclude filtering to a value.

    Args:
        value: String to test.
        spec_patterns: Compiled include/exclude lists; ``None`` means no rule.
        if_case_sensitive: Compare case-sensitively if True.

    Returns:
        True if the value should be excluded.
    """
    if spec_patterns.patterns_include is not None and not is_pattern_matching(
        value, spec_patterns.patterns_include, if_case_sensitive=if_case_sensitive
    ):
        return True
    return spec_patterns.patterns_exclude is not None and is_pattern_matching(
        value, spec_patterns.patterns_exclude, if_case_sensitive=if_case_sensitive
    )


def decide_entry(
    path: Path,
    if_dir: bool,
    spec_patterns: SpecCopyPatterns,
    *,
    if_skip_empty_dir: bool = False,
    if_case_sensitive: bool = True,
) -> SpecEntryDecision:
    """Decide whether a source entry becomes a work item.

    Rejection never prunes the subtree: descendants of a rejected directory
    are evaluated on their own.
    """
    if should_exclude_by_patterns(
        str(path), spec_patterns, if_case_sensitive=if_case_sensitive
    ):
        return SpecEntryDecision(if_accept=False)
    if if_dir and if_skip_empty_dir:
        return SpecEntryDecision(if_accept=False)
    return SpecEntryDecision(if_accept=True)


# #endregion
################################################################################
# #region Path


def derive_destination(path_src: Path, dir_src_root: Path, dir_dst_root: Path) -> Path:
    """Re-root an entry of the source tree under the destination root.

    Examples:
        >>> derive_destination(Path("/a/b/c/d.txt"), Path("/a/b"), Path("/x/y"))
        PosixPath('/x/y/c/d.txt')
    """
    return dir_dst_root / path_src.relative_to(dir_src_root)


def _is_relative_to_base(path: Path, base: Path) -> bool:
    try:
        path.relative_to(base)
        return True
    except ValueError:
        return False


def is_nested_in(path: Path, base: Path) -> bool:
    """Check whether ``path`` resolves to ``base`` or somewhere below it."""
    return _is_relative_to_base(
        path.resolve(strict=False), base.resolve(strict=False)
    )


# #endregion
################################################################################
# #region Progress


def calculate_percent(size_copied: int, size_all: int) -> float:
    """Copied share in percent, floored to one decimal digit.

    A run with nothing to copy counts as complete.

    Examples:
        >>> calculate_percent(1, 3)
        33.3
        >>> calculate_percent(0, 0)
        100.0
    """
    if size_all <= 0:
        return 100.0
    return (size_copied * 1000 // size_all) / 10


# #endregion
################################################################################
