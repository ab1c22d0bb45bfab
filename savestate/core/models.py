"""Core domain models for savestate."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from savestate.core.constants import DEFAULT_PROFILE, STAGING_PREFIX

_RESERVED_SEGMENTS = frozenset({".", ".."})
_SEPARATORS = ("/", "\\")


def validate_segment(value: str, what: str = "name") -> str:
    """Return *value* if it can be used as a single directory name.

    Leading dots are rejected because hidden directories are reserved for
    staging copies.
    """
    if not value or not value.strip():
        raise ValueError(f"{what} must not be empty")
    if value in _RESERVED_SEGMENTS or any(sep in value for sep in _SEPARATORS):
        raise ValueError(f"{what} must be a single path segment: {value!r}")
    if value.startswith(STAGING_PREFIX):
        raise ValueError(f"{what} must not start with {STAGING_PREFIX!r}: {value!r}")
    if "\x00" in value:
        raise ValueError(f"{what} must not contain NUL bytes")
    return value


class Snapshot(BaseModel):
    """Descriptor of a captured save state, stored as ``save.meta``."""

    model_config = {"frozen": True, "strict": True}

    index: int = Field(ge=0)
    name: str
    date: str

    @field_validator("name")
    @classmethod
    def name_must_be_segment(cls, v: str) -> str:
        return validate_segment(v, "Snapshot name")


class ProfileStatus(BaseModel):
    """Persisted tool state (``status.json``)."""

    model_config = {"frozen": True, "strict": True}

    profile: str = DEFAULT_PROFILE

    @field_validator("profile")
    @classmethod
    def profile_must_be_segment(cls, v: str) -> str:
        return validate_segment(v, "Profile name")
