from dataclasses import dataclass, field
from pathlib import Path

from .spec import SpecCopyError, SpecCopyItem


@dataclass(frozen=True, slots=True)
class ReportCopy:
    """
    Outcome of one copy run.

    The report is the run context handed back to the caller once every work
    item has been attempted. It owns the final counters, the failures recorded
    per item and the wall time of the run.

    Attributes:
        cnt_files:
            Number of files (not directories) that passed filtering.
        size_all:
            Sum of the sizes of those files, in bytes.
        size_copied:
            Bytes belonging to work items that were copied successfully.
        cnt_attempted:
            Number of work items (files and directories) that were attempted.
        cnt_copied:
            Number of work items that were copied successfully.
        errors:
            One :class:`SpecCopyError` per failed work item, in attempt order.
        warnings:
            Non-fatal problems met while enumerating the source.
        seconds_elapsed:
            Wall time of the whole run.
    """

    cnt_files: int = 0
    size_all: int = 0
    size_copied: int = 0
    cnt_attempted: int = 0
    cnt_copied: int = 0
    errors: tuple[SpecCopyError, ...] = ()
    warnings: tuple[str, ...] = ()
    seconds_elapsed: float = 0.0

    @property
    def calculate_error_count(self) -> int:
        return len(self.errors)

    @property
    def calculate_warning_count(self) -> int:
        return len(self.warnings)

    @property
    def calculate_success_file_count(self) -> int:
        return max(0, self.cnt_files - self.calculate_error_count)

    @property
    def error_messages(self) -> tuple[str, ...]:
        return tuple(e.message for e in self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, int]:
        return {
            "cnt_files": self.cnt_files,
            "size_all": self.size_all,
            "size_copied": self.size_copied,
            "cnt_attempted": self.cnt_attempted,
            "cnt_copied": self.cnt_copied,
            "cnt_errors": self.calculate_error_count,
            "cnt_warnings": self.calculate_warning_count,
        }

    def format(self, *, prefix: str = "[COPY]") -> str:
        s = self.to_dict()
        return (
            f"{prefix} files={s['cnt_files']} "
            f"bytes={s['size_copied']}/{s['size_all']} "
            f"copied={s['cnt_copied']}/{s['cnt_attempted']} "
            f"errors={s['cnt_errors']} warnings={s['cnt_warnings']}"
        )

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"file_count={self.cnt_files}, "
            f"all_size={self.size_all}, "
            f"copied_size={self.size_copied}, "
            f"attempted_count={self.cnt_attempted}, "
            f"copied_count={self.cnt_copied}, "
            f"errors_count={self.calculate_error_count}, "
            f"warnings_count={self.calculate_warning_count}, "
            f"seconds={self.seconds_elapsed:.3f})"
        )


@dataclass(slots=True)
class ReportCopyBuilder:
    """Mutable accumulator for copy statistics."""

    cnt_files: int = 0
    size_all: int = 0
    size_copied: int = 0
    cnt_attempted: int = 0
    cnt_copied: int = 0
    errors: list[SpecCopyError] = field(default_factory=lambda: [])
    warnings: list[str] = field(default_factory=lambda: [])

    def add_planned(self, cnt_files: int, size_all: int) -> None:
        self.cnt_files += cnt_files
        self.size_all += size_all

    def add_copied(self, item: SpecCopyItem) -> None:
        self.cnt_attempted += 1
        self.cnt_copied += 1
        self.size_copied += item.size_bytes

    def add_error(self, path_src: Path, path_dst: Path, error: Exception) -> SpecCopyError:
        self.cnt_attempted += 1
        spec_error = SpecCopyError(path_src, path_dst, error)
        self.errors.append(spec_error)
        return spec_error

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def build(self, *, seconds_elapsed: float = 0.0) -> ReportCopy:
        return ReportCopy(
            cnt_files=self.cnt_files,
            size_all=self.size_all,
            size_copied=self.size_copied,
            cnt_attempted=self.cnt_attempted,
            cnt_copied=self.cnt_copied,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            seconds_elapsed=seconds_elapsed,
        )
