"""Snapshot lifecycle — capture, list, restore and delete save states.

Snapshots live under ``<snapshot_root>/<profile>/<name>/`` as a full copy of
the profile's live save directory plus a ``save.meta`` descriptor. Every
operation reads the active profile once and keeps using that value, even if
the profile is switched while it runs.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from savestate.core.constants import META_FILENAME, STAGING_PREFIX
from savestate.core.errors import RecordParseError
from savestate.core.models import Snapshot, validate_segment
from savestate.core.services.profile import ProfileContext
from savestate.storage.metadata import read_record_if_present, write_record
from savestate.storage.paths import PathResolver
from savestate.storage.tree import copy_tree, discard_directory, stage_directory, swap_into_place

logger = logging.getLogger(__name__)


class SnapshotEngine:
    def __init__(
        self,
        context: ProfileContext,
        resolver: PathResolver,
        snapshot_root: Path,
    ) -> None:
        self.context = context
        self.resolver = resolver
        self.snapshot_root = Path(snapshot_root)

    # ── Queries ───────────────────────────────────────────────────────

    def list_profiles(self) -> list[str]:
        """Return the profile directories the host game has created."""
        base = self.resolver.base_directory()
        return sorted(
            entry.name
            for entry in base.iterdir()
            if entry.is_dir() and not entry.name.startswith(STAGING_PREFIX)
        )

    def list_snapshots(self) -> list[Snapshot]:
        """Return the snapshots of the active profile, ordered by index.

        A profile without any snapshots yet yields an empty list.
        """
        profile_root = self._profile_root(self.context.current())
        try:
            entries = [e for e in profile_root.iterdir() if e.is_dir()]
        except FileNotFoundError:
            return []
        except OSError:
            logger.warning("Cannot read snapshot directory %s", profile_root, exc_info=True)
            return []

        results = []
        for entry in entries:
            if entry.name.startswith(STAGING_PREFIX):
                continue
            try:
                record = read_record_if_present(entry / META_FILENAME)
            except (RecordParseError, OSError) as exc:
                logger.warning("Skipping snapshot %s: %s", entry, exc)
                continue
            if record is None:
                continue
            if record.name != entry.name:
                logger.warning(
                    "Snapshot metadata name %r differs from directory %r; using directory",
                    record.name,
                    entry.name,
                )
                record = record.model_copy(update={"name": entry.name})
            results.append(record)
        return sorted(results, key=lambda s: (s.index, s.name))

    def current_snapshot_index(self) -> int | None:
        """Return the index recorded in the live save's ``save.meta``, if any.

        Raises ``RecordParseError`` when the file exists but is malformed.
        """
        live = self.resolver.live_save_directory(self.context.current())
        record = read_record_if_present(live / META_FILENAME)
        return None if record is None else record.index

    def snapshot_directory(self, name: str) -> Path:
        validate_segment(name, "Snapshot name")
        return self._profile_root(self.context.current()) / name

    # ── Mutations ─────────────────────────────────────────────────────

    def capture(self, snapshot: Snapshot) -> Path:
        """Copy the live save into a new snapshot directory.

        The copy is built in a hidden staging directory and renamed into
        place only once the tree and its ``save.meta`` are complete. An
        existing snapshot with the same name is replaced.
        """
        profile = self.context.current()
        live = self.resolver.live_save_directory(profile)
        if not live.is_dir():
            raise FileNotFoundError(f"Live save directory not found: {live}")

        profile_root = self._profile_root(profile)
        target = profile_root / snapshot.name
        staging = stage_directory(profile_root)
        try:
            copy_tree(live, staging)
            write_record(staging / META_FILENAME, snapshot)
            swap_into_place(staging, target)
        except BaseException:
            discard_directory(staging)
            raise
        logger.info("Captured snapshot %s (index %d) for %s", snapshot.name, snapshot.index, profile)
        return target

    def restore(self, snapshot: Snapshot) -> None:
        """Copy a snapshot back over the live save directory.

        Files in the live directory that the snapshot does not contain are
        kept. The merged tree is assembled beside the live directory and
        swapped in whole, so a failure leaves the live save untouched.
        """
        profile = self.context.current()
        source = self._profile_root(profile) / snapshot.name
        if not source.is_dir():
            raise FileNotFoundError(f"Snapshot not found: {source}")

        live = self.resolver.live_save_directory(profile)
        if not live.parent.is_dir():
            raise FileNotFoundError(f"Game save location not found: {live.parent}")
        staging = stage_directory(live.parent)
        try:
            if live.is_dir():
                copy_tree(live, staging)
            copy_tree(source, staging)
            swap_into_place(staging, live)
        except BaseException:
            discard_directory(staging)
            raise
        logger.info("Restored snapshot %s for %s", snapshot.name, profile)

    def delete(self, name: str) -> None:
        """Remove a snapshot. Deleting an unknown name is not an error."""
        target = self.snapshot_directory(name)
        try:
            shutil.rmtree(target)
        except FileNotFoundError:
            logger.debug("Snapshot %s already absent", target)
            return
        logger.info("Deleted snapshot %s", target)

    def _profile_root(self, profile: str) -> Path:
        return self.snapshot_root / profile
