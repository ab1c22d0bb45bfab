"""Directory tree copying and staged replacement."""

from __future__ import annotations

import logging
import shutil
import tempfile
import uuid
from pathlib import Path

from savestate.core.constants import STAGING_PREFIX

logger = logging.getLogger(__name__)


def copy_tree(source: Path, destination: Path) -> None:
    """Merge-copy *source* into *destination*.

    Missing directories are created; files already present at the destination
    but absent from the source are left alone. The first ``OSError`` aborts the
    copy and propagates, leaving whatever was copied so far in place.
    """
    destination.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        target = destination / entry.name
        if entry.is_dir():
            copy_tree(entry, target)
        else:
            shutil.copyfile(entry, target)


def stage_directory(parent: Path) -> Path:
    """Create an empty hidden directory under *parent* for building a tree.

    The name does not embed the target name, so it stays short whatever the
    target is called.
    """
    parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f"{STAGING_PREFIX}staging-", dir=parent))
    logger.debug("Created staging directory %s", staging)
    return staging


def discard_directory(path: Path) -> None:
    """Remove *path* recursively if it exists."""
    shutil.rmtree(path, ignore_errors=True)


def swap_into_place(staging: Path, target: Path) -> None:
    """Replace *target* with the fully built *staging* tree using renames.

    *staging* must live in the same directory as *target* so both renames stay
    on one filesystem. If the final rename fails the previous tree is put back.
    """
    retired: Path | None = None
    if target.exists():
        retired = target.with_name(f"{STAGING_PREFIX}retired-{uuid.uuid4().hex}")
        target.rename(retired)
    try:
        staging.rename(target)
    except OSError:
        if retired is not None:
            retired.rename(target)
        raise
    if retired is not None:
        try:
            shutil.rmtree(retired)
        except OSError:
            logger.warning("Could not remove retired tree %s", retired, exc_info=True)
    logger.debug("Swapped %s into %s", staging, target)
