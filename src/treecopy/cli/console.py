from dataclasses import dataclass

from rich.console import Console
from rich.style import Style
from rich.text import Text

from treecopy.fs.report import ReportCopy
from treecopy.fs.spec import SpecCopyPlan, SpecCopyProgress, format_display_path


@dataclass(frozen=True, slots=True)
class SpecCliTheme:
    info: str = "grey70"
    success: str = "#4ADE80"
    failure: str = "#F87171"
    heading: str = "#00FFFF"


def format_progress_line(progress: SpecCopyProgress) -> str:
    """Render one detail-log line for a copy attempt.

    Examples:
        ``[09:15:02, 3ms/41ms], [2/5], [10B 30B/60B, 50.0%], [copy /src/a.txt complete]``
    """
    n_ms_item = int(progress.seconds_item * 1000)
    n_ms_run = int(progress.seconds_run * 1000)
    c_status = "complete" if progress.ok else "failure"
    return (
        f"[{progress.time_event}, {n_ms_item}ms/{n_ms_run}ms], "
        f"[{progress.index}/{progress.total}], "
        f"[{progress.item.size_bytes}B {progress.size_copied}B/{progress.size_all}B, "
        f"{progress.percent:.1f}%], "
        f"[copy {format_display_path(progress.item.path_src)} {c_status}]"
    )


class CopyConsole:
    """Console output split into info, success and failure channels."""

    def __init__(
        self, *, console: Console | None = None, theme: SpecCliTheme | None = None
    ):
        self.console = console or Console()
        self.theme = theme or SpecCliTheme()

    def _emit(self, text: str, color: str) -> None:
        # paths may contain "[...]", which must not be read as rich markup
        self.console.print(Text(text, style=Style(color=color)), soft_wrap=True)

    def info(self, text: str) -> None:
        self._emit(text, self.theme.info)

    def success(self, text: str) -> None:
        self._emit(text, self.theme.success)

    def failure(self, text: str) -> None:
        self._emit(text, self.theme.failure)

    def render_plan(self, plan: SpecCopyPlan) -> None:
        self.info(f"file count:{plan.cnt_files}, all size:{plan.size_all}B")

    def render_progress(self, progress: SpecCopyProgress) -> None:
        if progress.error is not None:
            self.failure(progress.error.message)
            self.failure(format_progress_line(progress))
            return
        self.success(format_progress_line(progress))

    def render_report(self, report: ReportCopy) -> None:
        self.console.rule(
            "summary", style=Style(color=self.theme.heading), characters="─"
        )
        self.success(
            f"total {report.cnt_files} files to copy, "
            f"{report.calculate_success_file_count} file copy successful."
        )
        if report.errors:
            self.failure(f"{report.calculate_error_count} file copy failure")
            for _message in report.error_messages:
                self.failure(_message)
        if report.warnings:
            self.info(f"{report.calculate_warning_count} warnings")
        self.info(f"time used: {int(report.seconds_elapsed)}s")
