"""Shared constants — single source of truth for values used across modules."""

# Profiles
DEFAULT_PROFILE = "Default"

# Files and directories under the tool's home
STATUS_FILENAME = "status.json"
SNAPSHOT_ROOT_DIRNAME = "saves"

# Metadata sidecar, one per snapshot and one in the live save directory
META_FILENAME = "save.meta"

# Live save location (Wildfrost on Windows)
DEFAULT_IDENTITY_VAR = "USERNAME"
DEFAULT_LIVE_TEMPLATE = "C:/Users/$USERNAME/AppData/LocalLow/Deadpan Games/Wildfrost/Profiles"

# Staging directories are hidden siblings of their target
STAGING_PREFIX = "."
