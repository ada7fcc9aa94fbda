"""Fixed scan settings for nmsweep."""

import os

# Directory name being searched for
TARGET_NAME = "node_modules"

# Depth bounds relative to the scan root (root itself is depth 0)
MIN_DEPTH = 1
MAX_DEPTH = 3

# Binary size units used for display
MIB = 1024**2
GIB = 1024**3

DEBUG_ENV_VAR = "NMSWEEP_DEBUG"


def debug_enabled() -> bool:
    """Whether debug logging was requested through the environment."""
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in ("1", "true", "yes", "on")
