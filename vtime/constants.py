"""
Virtual-time scheduler constants.

All time values are virtual milliseconds.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Drain limits
# ---------------------------------------------------------------------------
DEFAULT_MAX_PASSES: int = 20

# ---------------------------------------------------------------------------
# Seam delays
# ---------------------------------------------------------------------------
FRAME_INTERVAL_MS: int = 16  # animation frame seam, ~60 Hz

# ---------------------------------------------------------------------------
# Task sources (the seam a task was scheduled through)
# ---------------------------------------------------------------------------
SOURCE_TIMEOUT: str = "timeout"
SOURCE_IMMEDIATE: str = "immediate"
SOURCE_FRAME: str = "frame"

# ---------------------------------------------------------------------------
# Teardown leak policies
# ---------------------------------------------------------------------------
LEAK_POLICY_IGNORE: str = "ignore"
LEAK_POLICY_WARN: str = "warn"
LEAK_POLICY_RAISE: str = "raise"
LEAK_POLICIES: tuple[str, ...] = (LEAK_POLICY_IGNORE, LEAK_POLICY_WARN, LEAK_POLICY_RAISE)
DEFAULT_LEAK_POLICY: str = LEAK_POLICY_WARN
