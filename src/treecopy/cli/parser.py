"""Argument parser for the ``treecopy`` command.

Flags keep the single-dash long spelling of the original tool
(``-include``, ``-detail_log``). ``-include``/``-exclude`` take every
following token up to the next one starting with ``-``, and repeating
either flag adds to the list. argparse keeps two kinds of dash tokens as
patterns: negative numbers (``-1``; Python 3.13 also reads ``-1*`` as one)
and tokens holding a space (``"-a b"``).
An unknown dash token such as ``-x*`` ends the list and is ignored.
"""

import argparse

from rich_argparse import ArgumentDefaultsRichHelpFormatter, RawTextRichHelpFormatter

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

WILDCARD_HELP = """\
Patterns are matched against full source paths:
  *  zero or more arbitrary characters
  ?  exactly one character column (a wide CJK character is two columns,
     so it needs ??, ?* or *?)
Several patterns may share one token when joined by ',' or ';'.
A token starting with '-' ends the pattern list, except a negative number
or a quoted token holding a space, which is kept as a pattern.

Example:
  treecopy ./project ./export -include *.h,*.cpp -exclude *tmp* -detail_log
"""


class SmartFormatter(ArgumentDefaultsRichHelpFormatter, RawTextRichHelpFormatter):
    """
    Keep manual newlines/indentation AND show (default: ...) in help.
    """

    pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treecopy",
        description="Copy a file or a directory tree with wildcard filtering.",
        epilog=WILDCARD_HELP,
        formatter_class=SmartFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("path_src", nargs="?", metavar="src_path", help="Source file or directory.")
    parser.add_argument(
        "path_dst",
        nargs="?",
        metavar="dst_path",
        help="Destination root (directory source) or target file (file source).",
    )
    parser.add_argument(
        "-skip_empty_dir",
        dest="if_skip_empty_dir",
        action="store_true",
        help="Only create directories that receive copied files.",
    )
    parser.add_argument(
        "-include",
        dest="patterns_include",
        nargs="*",
        action="extend",
        default=[],
        metavar="PAT",
        help="Copy only paths matching any of these patterns.",
    )
    parser.add_argument(
        "-exclude",
        dest="patterns_exclude",
        nargs="*",
        action="extend",
        default=[],
        metavar="PAT",
        help="Skip paths matching any of these patterns.",
    )
    parser.add_argument(
        "-detail_log",
        dest="if_detail_log",
        action="store_true",
        help="Print a progress line after every copied entry.",
    )
    parser.add_argument(
        "-log_level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Level of diagnostic messages written to stderr.",
    )
    parser.add_argument(
        "-help",
        "-h",
        "--help",
        action="help",
        default=argparse.SUPPRESS,
        help="Show this help and exit.",
    )
    return parser
