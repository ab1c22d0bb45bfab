"""Resolution of the host game's live save directory."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from savestate.core.constants import DEFAULT_IDENTITY_VAR, DEFAULT_LIVE_TEMPLATE
from savestate.core.errors import IdentityUnavailableError

logger = logging.getLogger(__name__)


class PathResolver:
    """Builds live save paths from a template and the current user's identity.

    The template contains a ``$<identity_var>`` placeholder (``$USERNAME`` by
    default) which is replaced with the value of that variable in *environ*.
    """

    def __init__(
        self,
        template: str = DEFAULT_LIVE_TEMPLATE,
        identity_var: str = DEFAULT_IDENTITY_VAR,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.template = template
        self.identity_var = identity_var
        self._environ = os.environ if environ is None else environ

    def identity(self) -> str:
        value = self._environ.get(self.identity_var)
        if not value:
            raise IdentityUnavailableError(self.identity_var)
        return value

    def base_directory(self) -> Path:
        """Return the directory holding one subdirectory per profile."""
        placeholder = f"${self.identity_var}"
        resolved = self.template
        if placeholder in resolved:
            resolved = resolved.replace(placeholder, self.identity())
        path = Path(resolved).absolute()
        logger.debug("Resolved live save base %s", path)
        return path

    def live_save_directory(self, profile: str) -> Path:
        """Return the live save directory for *profile*. It may not exist."""
        return self.base_directory() / profile
