"""
Workspace traversal: walk a directory and collect files to review.

Reviewable files are those whose extension has a language tag (see
coderev.languages). Build output, dependency and test directories are skipped
by default.

Typical usage:
    from pathlib import Path
    from coderev.traversal import find_review_files

    files = find_review_files(Path("./my_project"))

    # Custom ignore set
    files = find_review_files(Path("./my_project"), ignore_dirs={"dist", "vendor"})
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Set

from coderev.languages import reviewable_extensions

logger = logging.getLogger(__name__)

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Build output
    "out",
    "dist",
    "build",

    # Tests (review production code, not fixtures)
    "test",
    "tests",
    "__tests__",

    # Dependencies
    "node_modules",
    "vendor",

    # Version control and editors
    ".git",
    ".svn",
    ".hg",
    ".vscode",
    ".idea",

    # Python environments and caches
    "venv",
    ".venv",
    "__pycache__",
    ".pytest_cache",
}


def is_reviewable(path: Path) -> bool:
    """
    Check if a file has an extension the reviewer knows.

    Examples:
        >>> is_reviewable(Path("src/app.ts"))
        True
        >>> is_reviewable(Path("README.md"))
        False
    """
    return path.suffix in reviewable_extensions()


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """Check a directory name (not the full path) against the ignore set (case-sensitive)."""
    return dir_path.name in ignore_dirs


def find_review_files(
    root: Path,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively find all reviewable files under root.

    Args:
        root: Root directory to start traversal from.
        ignore_dirs: Directory names to skip. If None, uses DEFAULT_IGNORE_DIRS.
        follow_symlinks: If True, follow symbolic links; skipped by default.
        filter_fn: Optional extra filter; only files for which it returns
                   True are included.

    Returns:
        Absolute paths, sorted for deterministic ordering.

    Raises:
        FileNotFoundError: If root does not exist.
        NotADirectoryError: If root is not a directory.

    Notes:
        Permission errors on subdirectories are logged and do not stop
        traversal.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = root.resolve()

    if not root.exists():
        logger.error("Root directory does not exist: %s", root)
        raise FileNotFoundError(f"Root directory does not exist: {root}")

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.info("Starting traversal from: %s", root)

    collected_files: list[Path] = []

    def _walk_directory(current_dir: Path) -> None:
        """Recursive helper to walk directory tree."""
        try:
            for entry in current_dir.iterdir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Skipping symlink: %s", entry)
                    continue

                if entry.is_dir():
                    if should_ignore_directory(entry, ignore_dirs):
                        logger.debug("Ignoring directory: %s", entry)
                        continue
                    _walk_directory(entry)

                elif entry.is_file() and is_reviewable(entry):
                    if filter_fn is not None and not filter_fn(entry):
                        logger.debug("Filtered out by custom filter: %s", entry)
                        continue
                    collected_files.append(entry)

        except PermissionError as e:
            logger.warning("Permission denied accessing directory %s: %s", current_dir, e)
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current_dir, e)

    _walk_directory(root)

    collected_files.sort()

    logger.info(
        "Traversal complete: found %d file(s) in %s",
        len(collected_files),
        root,
    )

    return collected_files
