"""
Archive preparation for Veracode uploads.

Zips a source directory, skipping files that match glob-style exclusion
patterns, and reports the final archive size. The filesystem work runs in
a worker thread so callers can await it alongside API requests.
"""

import asyncio
import errno
import logging
import os
import zipfile
from fnmatch import fnmatch
from pathlib import PurePosixPath
from typing import Iterable, List, Optional

from veracode_agent.exceptions import FileSystemError

logger = logging.getLogger("veracode-agent")


class UploadArchivePrep:
    """
    Builds zip archives of source trees for upload.

    Exclusion patterns without a slash are matched against every component
    of the relative path, so ``build`` skips any ``build`` directory and
    ``*.log`` skips log files at any depth. Patterns with a slash are
    anchored at the source directory and ``*`` never crosses a ``/``.

    Example:
        >>> size = await UploadArchivePrep.create_zip_archive(
        ...     "./src", "upload.zip", UploadArchivePrep.DEFAULT_EXCLUSIONS
        ... )
    """

    COMPRESSION_LEVEL = 9

    # Common clutter callers can pass as ``ignore``
    DEFAULT_EXCLUSIONS = {
        ".git",
        ".svn",
        ".hg",
        "__pycache__",
        "*.pyc",
        "node_modules",
        ".DS_Store",
        "Thumbs.db",
        ".vscode",
        ".idea",
        "*.tmp",
        "*.temp",
    }

    @staticmethod
    def _match_segments(parts: List[str], segments: List[str]) -> bool:
        # "*" stays inside one path segment; "**" spans any number of them
        if not segments:
            return not parts
        head, rest = segments[0], segments[1:]
        if head == "**":
            return any(
                UploadArchivePrep._match_segments(parts[i:], rest)
                for i in range(len(parts) + 1)
            )
        return (
            bool(parts)
            and fnmatch(parts[0], head)
            and UploadArchivePrep._match_segments(parts[1:], rest)
        )

    @staticmethod
    def should_exclude_file(relative_path: str, ignore: Optional[Iterable[str]] = None) -> bool:
        """
        Check a relative path against glob exclusion patterns.

        A pattern without ``/`` is matched against every path component. A
        pattern with ``/`` is matched segment by segment from the archive
        root, and also excludes everything below a directory it matches.

        Args:
            relative_path: Path relative to the archive root
            ignore: Glob patterns; ``**`` matches zero or more directories

        Returns:
            True if any pattern matches
        """
        if not ignore:
            return False
        parts = list(PurePosixPath(relative_path.replace(os.sep, "/")).parts)
        for pattern in ignore:
            pattern = pattern.strip("/")
            if not pattern:
                continue
            if "/" not in pattern:
                if any(fnmatch(part, pattern) for part in parts):
                    return True
                continue
            segments = pattern.split("/")
            if any(
                UploadArchivePrep._match_segments(parts[:end], segments)
                for end in range(1, len(parts) + 1)
            ):
                return True
        return False

    @staticmethod
    def _handle_archive_warning(error: OSError) -> None:
        # A file vanishing between listing and reading is not fatal
        if isinstance(error, FileNotFoundError) or error.errno == errno.ENOENT:
            logger.warning(f"Warning: {error}")
            return
        raise error

    @staticmethod
    def _write_archive(directory: str, zip_name: str, ignore: List[str]) -> int:
        zip_path = os.path.abspath(zip_name)
        file_count = 0

        with zipfile.ZipFile(
            zip_name,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=UploadArchivePrep.COMPRESSION_LEVEL,
        ) as archive:
            for root, dirs, files in os.walk(directory):
                rel_root = os.path.relpath(root, directory)
                if rel_root == ".":
                    rel_root = ""
                dirs[:] = sorted(
                    d
                    for d in dirs
                    if not UploadArchivePrep.should_exclude_file(os.path.join(rel_root, d), ignore)
                )
                for name in sorted(files):
                    file_path = os.path.join(root, name)
                    arcname = os.path.join(rel_root, name)
                    if os.path.abspath(file_path) == zip_path:
                        continue
                    if UploadArchivePrep.should_exclude_file(arcname, ignore):
                        continue
                    try:
                        archive.write(file_path, arcname)
                        file_count += 1
                    except OSError as e:
                        UploadArchivePrep._handle_archive_warning(e)

        logger.debug(f"Archived {file_count} files from {directory}")
        return os.path.getsize(zip_name)

    @staticmethod
    async def create_zip_archive(
        directory: str, zip_name: str, ignore: Optional[Iterable[str]] = None
    ) -> int:
        """
        Create a zip archive of a directory.

        Missing-file warnings (ENOENT) are logged and the file is skipped;
        any other error aborts the archive and propagates unchanged.

        Args:
            directory: Source directory
            zip_name: Destination archive path
            ignore: Glob patterns to exclude

        Returns:
            Size of the archive in bytes

        Raises:
            FileSystemError: If the source is not a directory
            OSError: If the archive cannot be written
        """
        if not os.path.isdir(directory):
            raise FileSystemError(f"Source path is not a directory: {directory}")

        patterns = list(ignore or [])
        logger.debug(f"Creating archive {zip_name} from {directory} (excluding {patterns})")
        size = await asyncio.to_thread(
            UploadArchivePrep._write_archive, directory, zip_name, patterns
        )
        logger.info(f"Created archive {zip_name} ({size} bytes)")
        return size


create_zip_archive = UploadArchivePrep.create_zip_archive
