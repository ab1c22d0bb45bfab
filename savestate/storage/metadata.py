"""Metadata documents — JSON sidecars for snapshots and the status file."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from savestate.core.errors import RecordParseError
from savestate.core.models import Snapshot

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def write_record(path: Path, record: BaseModel) -> None:
    """Write *record* as JSON to *path*, replacing any previous content.

    The document is written to a temporary file in the same directory and
    renamed over *path*.
    """
    content = record.model_dump_json()
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %s", path)


def read_record(path: Path, model: type[RecordT] = Snapshot) -> RecordT:
    """Load and validate a record.

    Raises ``FileNotFoundError`` if *path* is absent and ``RecordParseError``
    if its content is not a valid *model* document.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise RecordParseError(path, "not UTF-8 text") from exc
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise RecordParseError(path, _summarize(exc)) from exc


def read_record_if_present(path: Path, model: type[RecordT] = Snapshot) -> RecordT | None:
    """Like :func:`read_record` but return None when *path* does not exist."""
    try:
        return read_record(path, model)
    except FileNotFoundError:
        return None


def _summarize(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "document"
    return f"{location}: {first.get('msg', 'invalid')}"
