"""File repositories — sources of file trees to scan."""

from gitdetect.repos.base import FileRepository
from gitdetect.repos.localfs import LocalFileRepository

__all__ = ["FileRepository", "LocalFileRepository"]
