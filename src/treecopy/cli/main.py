import sys
from collections.abc import Sequence

from loguru import logger

from treecopy.fs.copy import copy_path

from .console import CopyConsole
from .parser import build_parser

# statuses above 255 wrap around on POSIX
EXIT_STATUS_MAX = 255
EXIT_STATUS_PREFLIGHT = 1
EXIT_STATUS_INTERRUPT = 130


def configure_logging(level: str = "WARNING") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def main(argv: Sequence[str] | None = None, *, console: CopyConsole | None = None) -> int:
    """
    Run ``treecopy`` and return the process exit status.

    The status is the number of work items that failed to copy (capped at
    255). Missing positional arguments print the usage text and return 0.
    A source that cannot be classified before enumeration returns 1.
    """
    parser = build_parser()
    ns, l_unknown = parser.parse_known_args(argv)
    configure_logging(ns.log_level)
    if l_unknown:
        logger.warning(f"Ignored arguments: {' '.join(l_unknown)}")

    if ns.path_src is None or ns.path_dst is None:
        parser.print_help()
        return 0

    cls_console = console or CopyConsole()
    try:
        report = copy_path(
            ns.path_src,
            ns.path_dst,
            patterns_include=ns.patterns_include,
            patterns_exclude=ns.patterns_exclude,
            if_skip_empty_dir=ns.if_skip_empty_dir,
            on_plan=cls_console.render_plan,
            on_progress=cls_console.render_progress if ns.if_detail_log else None,
        )
    except OSError as e:
        logger.error(f"Copy aborted before start: {e}")
        cls_console.failure(str(e))
        return EXIT_STATUS_PREFLIGHT
    except KeyboardInterrupt:
        logger.warning("KeyboardInterrupt received, copy stopped.")
        return EXIT_STATUS_INTERRUPT

    cls_console.render_report(report)
    return min(report.calculate_error_count, EXIT_STATUS_MAX)
