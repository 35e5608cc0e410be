"""Scanner — entropy and the file scanning engine."""

from gitdetect.scanner.engine import FileScanner, ScanError, read_lines, walk_files
from gitdetect.scanner.entropy import shannon_entropy

__all__ = [
    "FileScanner",
    "ScanError",
    "read_lines",
    "shannon_entropy",
    "walk_files",
]
