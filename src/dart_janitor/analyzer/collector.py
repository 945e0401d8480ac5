"""Source file discovery."""
import os
from pathlib import Path
from typing import List

from ..config import SOURCE_EXTENSION


def collect_source_files(code_dir: str | Path, extension: str = SOURCE_EXTENSION) -> List[str]:
    """Recursively collect source files under code_dir, sorted by path.

    Symbolic links are neither followed nor collected.

    Args:
        code_dir: Directory to scan (e.g. <project>/lib)
        extension: File extension to keep, including the dot

    Returns:
        Absolute normalized paths in ascending order; empty if code_dir is missing
    """
    code_dir = os.path.normpath(os.path.abspath(code_dir))
    if not os.path.isdir(code_dir):
        return []

    files = []
    for dirpath, dirnames, filenames in os.walk(code_dir, followlinks=False):
        for filename in filenames:
            file_path = os.path.join(dirpath, filename)
            if os.path.splitext(filename)[1] != extension or os.path.islink(file_path):
                continue
            if os.path.isfile(file_path):
                files.append(os.path.normpath(file_path))
    files.sort()
    return files
