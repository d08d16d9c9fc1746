#!/usr/bin/env python3
"""
Quick-filter walkthrough - deterministic async testing demo

Drives a small grid component through the same filter scenario four ways
and prints the grid model, component and rendered template row counts at
each checkpoint.

Usage:
  python main.py [mode] [options]

Modes:
  fake-async       - virtual time, manual detect_changes() + flush()
  fake-async-auto  - virtual time, auto change detection
  async            - real event loop, manual detect_changes() + when_stable()
  async-auto       - real event loop, auto change detection
  all              - run every mode in order (default)

Options:
  --env-file PATH  Path to env defaults file (default: .env)
  --filter TEXT    Quick filter text to apply (default: Germany)
  --rows N         Number of generated rows (default: 1000)
  --seed N         Row generator seed
  --trace / --no-trace
                   Print the virtual scheduler trace for fake-async modes

Env keys in .env:
  MODE, FILTER, ROWS, SEED, FAKE_ASYNC_TRACE, FAKE_ASYNC_MAX_PASSES,
  FAKE_ASYNC_LEAK_POLICY
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from functools import partial

from demo.component import ComponentFixture, create_component
from demo.data import DEFAULT_ROW_COUNT, DEFAULT_SEED, generate_rows
from fake_async.application.harness import FakeAsyncHarness
from fake_async.config import FakeAsyncConfig, env_bool, env_int, load_fake_async_config, parse_env_file

DEFAULT_ENV_FILE = ".env"
MODES = ("fake-async", "fake-async-auto", "async", "async-auto")


def _checkpoint(fixture: ComponentFixture, label: str) -> None:
    grid = fixture.component.grid
    grid_rows = grid.displayed_row_count() if grid is not None else "-"
    print(
        f"  {label:<34} grid={grid_rows!s:>5}  "
        f"component={fixture.component.displayed_rows:>5}  "
        f"template={fixture.rendered or '<not rendered>'!r}"
    )


def run_fake_async(harness: FakeAsyncHarness, fixture: ComponentFixture, text: str) -> None:
    with harness.fake_async():
        fixture.detect_changes()
        _checkpoint(fixture, "first detect_changes()")
        harness.flush()
        _checkpoint(fixture, "flush()")
        fixture.detect_changes()
        _checkpoint(fixture, "detect_changes()")
        fixture.type_quick_filter(text)
        _checkpoint(fixture, f"typed {text!r}")
        fixture.detect_changes()
        _checkpoint(fixture, "detect_changes()")
        harness.flush()
        _checkpoint(fixture, "flush()")
        fixture.detect_changes()
        _checkpoint(fixture, "detect_changes()")


def run_fake_async_auto(harness: FakeAsyncHarness, fixture: ComponentFixture, text: str) -> None:
    with harness.fake_async():
        fixture.auto_detect_changes()
        harness.flush()
        _checkpoint(fixture, "auto_detect_changes() + flush()")
        fixture.type_quick_filter(text)
        harness.flush()
        _checkpoint(fixture, f"typed {text!r} + flush()")


async def run_async(harness: FakeAsyncHarness, fixture: ComponentFixture, text: str) -> None:
    fixture.detect_changes()
    _checkpoint(fixture, "first detect_changes()")
    await fixture.when_stable()
    _checkpoint(fixture, "await when_stable()")
    fixture.detect_changes()
    _checkpoint(fixture, "detect_changes()")
    fixture.type_quick_filter(text)
    fixture.detect_changes()
    _checkpoint(fixture, f"typed {text!r} + detect_changes()")
    await fixture.when_stable()
    _checkpoint(fixture, "await when_stable()")
    fixture.detect_changes()
    _checkpoint(fixture, "detect_changes()")


async def run_async_auto(harness: FakeAsyncHarness, fixture: ComponentFixture, text: str) -> None:
    fixture.auto_detect_changes()
    _checkpoint(fixture, "auto_detect_changes()")
    await fixture.when_stable()
    _checkpoint(fixture, "await when_stable()")
    fixture.type_quick_filter(text)
    _checkpoint(fixture, f"typed {text!r}")
    await fixture.when_stable()
    _checkpoint(fixture, "await when_stable()")


def run_mode(mode: str, config: FakeAsyncConfig, text: str, rows: int, seed: int) -> FakeAsyncHarness:
    """Run one walkthrough mode on a fresh harness and fixture."""
    harness = FakeAsyncHarness(config)
    fixture = create_component(harness, row_factory=partial(generate_rows, rows, seed))

    print(f"Running '{mode}' walkthrough: {rows} rows, filter={text!r}")
    try:
        if mode == "fake-async":
            run_fake_async(harness, fixture, text)
        elif mode == "fake-async-auto":
            run_fake_async_auto(harness, fixture, text)
        elif mode == "async":
            asyncio.run(run_async(harness, fixture, text))
        elif mode == "async-auto":
            asyncio.run(run_async_auto(harness, fixture, text))
        else:
            raise ValueError(f"Unknown mode: {mode!r}")
    finally:
        fixture.destroy()

    print(f"  virtual time elapsed: {harness.describe_state().now}ms")
    return harness


def _defaults_from_env(env: dict[str, str]) -> dict[str, object]:
    mode = env.get("MODE", "all")
    if mode != "all" and mode not in MODES:
        print(f"Warning: MODE={mode!r} is unknown. Using 'all'.", file=sys.stderr)
        mode = "all"

    return {
        "mode": mode,
        "filter": env.get("FILTER", "Germany") or "Germany",
        "rows": env_int(env, "ROWS", default=DEFAULT_ROW_COUNT, minimum=0),
        "seed": env_int(env, "SEED", default=DEFAULT_SEED, minimum=0),
        "trace": env_bool(env, "FAKE_ASYNC_TRACE", default=False),
    }


def main() -> None:
    argv = sys.argv[1:]

    # Parse env-file first so we can use it for argument defaults.
    env_parser = argparse.ArgumentParser(add_help=False)
    env_parser.add_argument("--env-file", default=DEFAULT_ENV_FILE)
    env_args, _ = env_parser.parse_known_args(argv)
    env = parse_env_file(env_args.env_file)
    defaults = _defaults_from_env(env)

    parser = argparse.ArgumentParser(
        description="Deterministic async testing walkthrough",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--env-file",
        default=env_args.env_file,
        help=f"Path to env defaults file (default: {DEFAULT_ENV_FILE})",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default=defaults["mode"],
        choices=[*MODES, "all"],
        help=f"Walkthrough mode (default: {defaults['mode']})",
    )
    parser.add_argument(
        "--filter",
        default=defaults["filter"],
        help=f"Quick filter text (default: {defaults['filter']})",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=defaults["rows"],
        help=f"Number of generated rows (default: {defaults['rows']})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults["seed"],
        help=f"Row generator seed (default: {defaults['seed']})",
    )
    parser.add_argument(
        "--trace",
        action=argparse.BooleanOptionalAction,
        default=defaults["trace"],
        help=f"Print virtual scheduler trace (default: {'on' if defaults['trace'] else 'off'})",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    config = replace(load_fake_async_config(args.env_file), trace=args.trace)
    modes = MODES if args.mode == "all" else (args.mode,)
    for mode in modes:
        harness = run_mode(mode, config, args.filter, args.rows, args.seed)
        if args.trace and harness.scheduler.trace_log:
            print("\n--- Scheduler Trace ---")
            for line in harness.scheduler.trace_log[-200:]:
                print(line)
            if len(harness.scheduler.trace_log) > 200:
                print(f"... ({len(harness.scheduler.trace_log) - 200} more events)")
        print()


if __name__ == "__main__":
    main()
