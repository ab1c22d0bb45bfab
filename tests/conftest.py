"""Shared test fixtures."""

import pytest

from savestate.core.services.profile import ProfileContext
from savestate.core.services.snapshots import SnapshotEngine
from savestate.storage.paths import PathResolver


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def profiles_dir(tmp_path):
    """The game's profile directory for user ``player``."""
    return tmp_path / "Users" / "player" / "Profiles"


@pytest.fixture
def resolver(tmp_path):
    template = str(tmp_path / "Users" / "$USERNAME" / "Profiles")
    return PathResolver(template, environ={"USERNAME": "player"})


@pytest.fixture
def live_dir(profiles_dir):
    """A populated live save for the Default profile."""
    live = profiles_dir / "Default"
    (live / "Campaign").mkdir(parents=True)
    (live / "Save.sav").write_bytes(b"gold=10")
    (live / "Campaign" / "Run.sav").write_bytes(b"\x00\x01run-1")
    return live


@pytest.fixture
def context(home):
    return ProfileContext.load(home / "status.json")


@pytest.fixture
def engine(context, resolver, home):
    return SnapshotEngine(context, resolver, home / "saves")
