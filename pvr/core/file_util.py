"""Filesystem primitives used by the recorded manager and cleaner

Every function takes and returns plain string paths so that indexes built
from store rows and listings built from the disk compare equal.
"""

import os
import logging
from typing import List, NamedTuple

logger = logging.getLogger(__name__)


class FileList(NamedTuple):
    """Recursive listing of a directory (the root itself is not included)"""
    files: List[str]
    directories: List[str]


def stat(file_path: str) -> os.stat_result:
    """Stat a path; raises FileNotFoundError when it does not exist"""
    return os.stat(file_path)


def get_file_size(file_path: str) -> int:
    return stat(file_path).st_size


def exists(file_path: str) -> bool:
    try:
        stat(file_path)
        return True
    except OSError:
        return False


def unlink(file_path: str) -> None:
    os.unlink(file_path)


def get_file_list(root: str) -> FileList:
    """List every file and directory below root"""
    files: List[str] = []
    directories: List[str] = []

    def _on_error(err: OSError):
        logger.warning(f"Failed to list {err.filename}: {err}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        for dirname in dirnames:
            directories.append(os.path.join(dirpath, dirname))
        for filename in filenames:
            files.append(os.path.join(dirpath, filename))

    return FileList(files=files, directories=directories)


def is_empty_directory(dir_path: str) -> bool:
    with os.scandir(dir_path) as entries:
        return next(entries, None) is None


def rmdir(dir_path: str) -> None:
    """Remove an empty directory; raises OSError if it is not empty"""
    os.rmdir(dir_path)
