import os
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

_RE_PATTERN_SEPARATORS = re.compile(r"[,;]")


def format_display_path(path: os.PathLike[str] | str) -> str:
    """Render a path for terminal output.

    Bytes of a POSIX name that are not valid UTF-8 are shown as ``\\xNN``
    escapes instead of surrogates that no text stream can encode.

    Examples:
        >>> format_display_path(os.fsdecode(b"/src/\\xff.txt"))
        '/src/\\\\xff.txt'
    """
    return os.fsencode(path).decode("utf-8", "backslashreplace")


def format_display_text(text: str) -> str:
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def split_pattern_tokens(tokens: Iterable[str]) -> list[str]:
    """Flatten raw tokens into individual wildcard patterns.

    ``,`` and ``;`` are treated like whitespace, so ``"*.h,*.cpp"`` and
    ``"*.h *.cpp"`` yield the same list. Empty fragments are dropped.

    Examples:
        >>> split_pattern_tokens(["*.h,*.cpp", "*.txt; *.md"])
        ['*.h', '*.cpp', '*.txt', '*.md']
    """
    l_patterns: list[str] = []
    for _token in tokens:
        l_patterns.extend(_RE_PATTERN_SEPARATORS.sub(" ", _token).split())
    return l_patterns


class EnumCopyItemKind(StrEnum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class SpecFsEntry:
    """One immediate child returned by a directory listing."""

    path: Path
    if_dir: bool


@dataclass(frozen=True, slots=True)
class SpecEntryDecision:
    if_accept: bool
    if_prune: bool = False


@dataclass(frozen=True, slots=True)
class SpecCopyItem:
    path_src: Path
    path_dst: Path
    size_bytes: int = 0
    kind: EnumCopyItemKind = EnumCopyItemKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EnumCopyItemKind.DIRECTORY


@dataclass(frozen=True, slots=True)
class SpecCopyPlan:
    """Ordered work items produced by the enumeration pass."""

    items: tuple[SpecCopyItem, ...] = ()
    cnt_files: int = 0
    size_all: int = 0
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SpecCopyError:
    path_src: Path
    path_dst: Path
    exception: Exception

    @property
    def message(self) -> str:
        c_reason = getattr(self.exception, "strerror", None) or str(self.exception)
        return (
            f"[copy {format_display_path(self.path_src)} -> "
            f"{format_display_path(self.path_dst)} failure]\n"
            f"{format_display_text(c_reason)}"
        )


@dataclass(frozen=True, slots=True)
class SpecCopyProgress:
    """Snapshot emitted after every copy attempt."""

    item: SpecCopyItem
    index: int  # 1-based
    total: int
    time_event: str
    seconds_item: float
    seconds_run: float
    size_copied: int
    size_all: int
    percent: float
    error: SpecCopyError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class SpecCopyPatterns:
    """Compiled include/exclude wildcard lists."""

    patterns_include: tuple[str, ...] | None
    patterns_exclude: tuple[str, ...] | None

    @staticmethod
    def _ensure_sequence(value: Sequence[str] | str | None) -> Sequence[str] | None:
        return [value] if isinstance(value, str) else value

    @staticmethod
    def _compile(patterns: Iterable[str] | None) -> tuple[str, ...] | None:
        if not patterns:
            return None
        return tuple(split_pattern_tokens(patterns)) or None

    @classmethod
    def from_raw(
        cls,
        *,
        patterns_include: Sequence[str] | str | None,
        patterns_exclude: Sequence[str] | str | None,
    ) -> "SpecCopyPatterns":
        """Build a pattern set from raw command tokens.

        Each token may carry several patterns joined by ``,`` or ``;``.
        """
        return cls(
            patterns_include=cls._compile(cls._ensure_sequence(patterns_include)),
            patterns_exclude=cls._compile(cls._ensure_sequence(patterns_exclude)),
        )
