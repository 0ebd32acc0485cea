"""
File system utilities for binkit.

This module provides the file operations the installer relies on:
- Executable lookup on PATH
- Archive extraction (tar.gz, tgz, zip) with traversal protection
- Wildcard search inside an extracted tree
- Atomic replacement of an installed executable
- Scratch workspaces with guaranteed cleanup
"""

import fnmatch
import gzip
import logging
import os
import shutil
import stat
import tarfile
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Union

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def find_executable(
    name: str, search_paths: Optional[list[Path]] = None
) -> Optional[Path]:
    """
    Find an executable in the system PATH or provided search paths.

    Args:
        name: Executable name (e.g., 'jq', 'kubectl')
        search_paths: Optional list of directories to search

    Returns:
        Path to the first executable found, None otherwise

    Example:
        >>> find_executable('sh')
        PosixPath('/usr/bin/sh')
    """
    if search_paths is None:
        path_env = os.environ.get("PATH", "")
        search_paths = [Path(p) for p in path_env.split(os.pathsep) if p]

    for directory in search_paths:
        exe_path = Path(directory) / name
        if exe_path.is_file() and os.access(exe_path, os.X_OK):
            return exe_path

    return None


# ============================================================================
# Archive Extraction
# ============================================================================


class ArchiveKind(Enum):
    """How a downloaded artifact is unpacked."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"
    BINARY = "binary"


def classify_archive(file_name: str) -> ArchiveKind:
    """
    Classify an artifact by its file name suffix.

    Anything that is not a gzipped tarball or a zip file is treated as a
    bare executable.

    Example:
        >>> classify_archive("tool_1.0_linux_amd64.tgz")
        <ArchiveKind.TAR_GZ: 'tar.gz'>
    """
    name = file_name.lower()
    if name.endswith((".tar.gz", ".tgz")):
        return ArchiveKind.TAR_GZ
    if name.endswith(".zip"):
        return ArchiveKind.ZIP
    return ArchiveKind.BINARY


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def _validate_link_target(member: tarfile.TarInfo, destination: Path) -> None:
    """
    Validate that a symlink or hardlink member points inside destination.

    Symlink targets are relative to the member's directory, hardlink targets
    to the archive root.

    Raises:
        InsecureArchiveError: If the link target escapes destination
    """
    root = destination.resolve()
    if member.issym():
        base = root / os.path.dirname(member.name)
    else:
        base = root
    target = Path(os.path.normpath(base / member.linkname))

    if not is_relative_to(target, root):
        raise InsecureArchiveError(
            f"Archive member '{member.name}' links to '{member.linkname}' "
            "outside the extraction directory. Extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    kind: Optional[ArchiveKind] = None,
) -> None:
    """
    Extract an archive to a destination directory.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to
        kind: Archive kind; detected from the file name if None

    Raises:
        UnsupportedArchiveFormat: If the archive is not a tarball or zip
        InsecureArchiveError: If archive contains malicious paths
        ArchiveExtractionError: If extraction fails

    Example:
        >>> extract_archive('tool.tar.gz', '/tmp/workspace')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    if kind is None:
        kind = classify_archive(archive_path.name)

    try:
        if kind is ArchiveKind.TAR_GZ:
            _extract_tar_gz(archive_path, destination)
        elif kind is ArchiveKind.ZIP:
            _extract_zip(archive_path, destination)
        else:
            raise UnsupportedArchiveFormat(
                f"Not an archive: {archive_path.name}. Supported: .tar.gz, .tgz, .zip"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except (OSError, tarfile.TarError, zipfile.BadZipFile, EOFError, zlib.error) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive, keeping unix permission bits."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.infolist()

        for member in members:
            _validate_archive_path(member.filename, destination)

        for member in members:
            extracted = Path(zf.extract(member, destination))
            mode = (member.external_attr >> 16) & 0o777
            if mode and not member.is_dir():
                extracted.chmod(mode)


def _verify_gzip_stream(archive_path: Path) -> None:
    """
    Read a gzip file to the end so corruption is reported.

    tarfile stops quietly at the first unreadable header after the start of
    the archive, which would otherwise look like a shorter archive.

    Raises:
        OSError, EOFError, zlib.error: If the stream is truncated or corrupt
    """
    with gzip.open(archive_path, "rb") as stream:
        while stream.read(CHUNK_SIZE):
            pass


def _extract_tar_gz(archive_path: Path, destination: Path) -> None:
    """Extract a .tar.gz archive."""
    _verify_gzip_stream(archive_path)

    with tarfile.open(archive_path, "r:gz") as tar:
        members = tar.getmembers()
        for member in members:
            _validate_archive_path(member.name, destination)
            if member.issym() or member.islnk():
                _validate_link_target(member, destination)

        # Extraction filters were backported to 3.9.17, 3.10.12 and 3.11.4
        if hasattr(tarfile, "data_filter"):
            tar.extractall(destination, members=members, filter="data")
        else:
            tar.extractall(destination, members=members)


def find_matching_file(root: Union[str, Path], pattern: str) -> Optional[Path]:
    """
    Find the first regular file under root matching a wildcard pattern.

    Patterns without a '/' are matched against file names only (like
    ``find -name``); patterns with a '/' are matched against the path
    relative to root. Directories are walked in sorted order so the result
    is deterministic.

    Args:
        root: Directory to search
        pattern: fnmatch-style pattern, e.g. 'tool-*' or '*/bin/tool'

    Returns:
        Path to the first match, or None
    """
    root = Path(root)
    match_relative = "/" in pattern

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            candidate = Path(dirpath) / filename
            if not candidate.is_file():
                continue
            subject = candidate.relative_to(root).as_posix() if match_relative else filename
            if fnmatch.fnmatchcase(subject, pattern):
                return candidate

    return None


# ============================================================================
# Safe File Operations
# ============================================================================


def replace_file_atomic(
    source: Union[str, Path], target: Union[str, Path], mode: int = 0o755
) -> Path:
    """
    Place source at target atomically and set its permissions.

    The file is first copied to a temporary name in the target directory
    (same filesystem), chmod-ed, then renamed over the target. If anything
    fails the original target (if any) is left untouched.

    Args:
        source: File to install
        target: Final path
        mode: Permission bits for the installed file

    Returns:
        The target path

    Raises:
        OSError: If any step fails
    """
    source = Path(source)
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    os.close(temp_fd)
    temp_path = Path(temp_path_str)

    try:
        shutil.copyfile(source, temp_path)
        os.chmod(temp_path, mode)
        temp_path.replace(target)
    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise

    return target


def _make_tree_writable(path: Path) -> None:
    """Give the owner full access to every directory under path."""
    os.chmod(path, stat.S_IRWXU)
    for dirpath, dirnames, _ in os.walk(path):
        for dirname in dirnames:
            child = os.path.join(dirpath, dirname)
            if not os.path.islink(child):
                os.chmod(child, stat.S_IRWXU)


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree, including read-only subdirectories.

    Archives may unpack directories without write permission; on a first
    failure the tree is made writable and removal is retried.

    Args:
        path: Directory to remove

    Raises:
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
        return
    except OSError as e:
        logger.debug(f"Retrying removal of '{path}' after making it writable: {e}")

    try:
        _make_tree_writable(path)
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


# ============================================================================
# Temporary File/Directory Management
# ============================================================================


@contextmanager
def temporary_directory(prefix: str = "binkit_") -> Iterator[Path]:
    """
    Context manager for a uniquely named scratch directory.

    Removal is attempted on every exit path, including exceptions. A
    directory that cannot be removed is logged and left behind.

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            try:
                safe_rmtree(temp_dir)
            except FilesystemError as e:
                logger.warning(f"Could not clean up scratch directory: {e}")


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "is_relative_to",
    "find_executable",
    "ArchiveKind",
    "classify_archive",
    "extract_archive",
    "find_matching_file",
    "replace_file_atomic",
    "safe_rmtree",
    "temporary_directory",
]
