"""Configuration loading for the fake-async harness."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from vtime.constants import DEFAULT_LEAK_POLICY, DEFAULT_MAX_PASSES, LEAK_POLICIES

logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on", "y"}
_FALSE_VALUES = {"0", "false", "no", "off", "n"}


@dataclass(frozen=True, slots=True)
class FakeAsyncConfig:
    """Defaults applied to every harness built from this config."""

    max_passes: int = DEFAULT_MAX_PASSES
    auto_render: bool = False
    leak_policy: str = DEFAULT_LEAK_POLICY
    trace: bool = False


def load_fake_async_config(env_file: str = ".env") -> FakeAsyncConfig:
    """Load harness config from env file with safe parsing defaults."""

    env = parse_env_file(env_file)

    max_passes = env_int(env, "FAKE_ASYNC_MAX_PASSES", default=DEFAULT_MAX_PASSES, minimum=1)
    auto_render = env_bool(env, "FAKE_ASYNC_AUTO_RENDER", default=False)
    leak_policy = env.get("FAKE_ASYNC_LEAK_POLICY", DEFAULT_LEAK_POLICY).strip().lower()
    if leak_policy not in LEAK_POLICIES:
        logger.warning("FAKE_ASYNC_LEAK_POLICY=%r is unknown. Using %r.", leak_policy, DEFAULT_LEAK_POLICY)
        leak_policy = DEFAULT_LEAK_POLICY
    trace = env_bool(env, "FAKE_ASYNC_TRACE", default=False)

    return FakeAsyncConfig(
        max_passes=max_passes,
        auto_render=auto_render,
        leak_policy=leak_policy,
        trace=trace,
    )


def parse_env_file(path: str) -> dict[str, str]:
    """Read KEY=VALUE lines; blank lines, comments and malformed lines are skipped."""
    env_path = Path(path)
    if not env_path.exists():
        return {}

    env: dict[str, str] = {}
    lines = env_path.read_text(encoding="utf-8").splitlines()
    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        text = text.removeprefix("export ").strip()
        key, sep, value = text.partition("=")
        key = key.strip()
        if not sep or not key:
            logger.warning("Ignoring invalid env line %d in %r: %r", lineno, path, line)
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        env[key] = value

    return env


def env_int(env: dict[str, str], key: str, default: int, minimum: int) -> int:
    raw = env.get(key, "")
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        logger.warning("%s must be an integer, got %r. Using %d.", key, raw, default)
        return default
    if parsed < minimum:
        logger.warning("%s must be >= %d, got %d. Using %d.", key, minimum, parsed, default)
        return default
    return parsed


def env_bool(env: dict[str, str], key: str, default: bool) -> bool:
    raw = env.get(key, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logger.warning("%s must be a boolean flag, got %r. Using %s.", key, raw, default)
    return default
