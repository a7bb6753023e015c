"""Filesystem helpers: existence checks, directory copies, scratch directories."""

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from gitref.constants import SCRATCH_PREFIX
from gitref.log import get_logger

logger = get_logger(__name__)

# Never copied out of a clone
IGNORED_NAMES = (".git",)


def path_exists(path: Path | str) -> bool:
    """Check whether ``path`` exists."""
    if Path(path).exists():
        return True
    logger.debug("path %s doesn't exist", path)
    return False


def copy_all_dir_files(src_dir: Path, dest_dir: Path) -> None:
    """Copy the contents of ``src_dir`` into ``dest_dir``, recursively.

    Existing files in ``dest_dir`` are overwritten. Files copied before a
    failure are left in place.

    Args:
        src_dir: Directory whose contents are copied
        dest_dir: Destination directory (created if missing)
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    for entry in src_dir.iterdir():
        if entry.name in IGNORED_NAMES:
            continue
        target = dest_dir / entry.name
        if entry.is_dir() and not entry.is_symlink():
            shutil.copytree(entry, target, symlinks=True, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, target, follow_symlinks=False)


@contextmanager
def scratch_directory(root: Path | None = None) -> Generator[Path, None, None]:
    """
    Context manager yielding a fresh, uniquely named scratch directory.

    The directory and everything in it is removed when the block exits,
    whether it finishes normally or raises.

    Args:
        root: Parent directory; the system temp directory when None
    """
    if root is not None:
        root.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix=SCRATCH_PREFIX, dir=root) as tmp_dir:
        logger.debug("Created scratch directory %s", tmp_dir)
        yield Path(tmp_dir)
    logger.debug("Removed scratch directory %s", tmp_dir)
