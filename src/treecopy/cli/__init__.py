from .console import CopyConsole, SpecCliTheme, format_progress_line
from .main import main
from .parser import build_parser

__all__ = ["CopyConsole", "SpecCliTheme", "build_parser", "format_progress_line", "main"]
