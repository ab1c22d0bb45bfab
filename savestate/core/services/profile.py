"""Active profile selection, persisted across restarts."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from savestate.core.constants import DEFAULT_PROFILE
from savestate.core.models import ProfileStatus, validate_segment
from savestate.storage.metadata import read_record_if_present, write_record

logger = logging.getLogger(__name__)


class ProfileContext:
    """Holds the currently selected profile behind a single lock.

    Every change is written straight to the status file, so there is nothing
    to flush on shutdown.
    """

    def __init__(self, status_path: Path, profile: str = DEFAULT_PROFILE) -> None:
        self.status_path = Path(status_path)
        self._profile = validate_segment(profile, "Profile name")
        self._lock = threading.Lock()

    @classmethod
    def load(cls, status_path: Path) -> ProfileContext:
        """Create a context and restore it from *status_path*."""
        context = cls(status_path)
        context.restore()
        return context

    def current(self) -> str:
        with self._lock:
            return self._profile

    def set_active(self, profile: str) -> None:
        """Select *profile* and persist the choice immediately."""
        validate_segment(profile, "Profile name")
        with self._lock:
            self._profile = profile
            self._save()
        logger.info("Active profile set to %s", profile)

    def restore(self) -> None:
        """Load the status file, writing the current state if there is none."""
        with self._lock:
            status = read_record_if_present(self.status_path, ProfileStatus)
            if status is None:
                logger.info("No status file at %s; initialising", self.status_path)
                self._save()
                return
            self._profile = status.profile
        logger.debug("Restored active profile %s", status.profile)

    def _save(self) -> None:
        self.status_path.parent.mkdir(parents=True, exist_ok=True)
        write_record(self.status_path, ProfileStatus(profile=self._profile))
