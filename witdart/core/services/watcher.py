"""
Watch mode — regenerate whenever a WIT input changes.

Mtime polling on the calling thread.  A change is detected by
comparing the ``(mtime_ns, size)`` signature of every resolved input
file, so the set of watched files
follows the dependency discovery (a new file in ``deps/`` is picked up
on the next regeneration).

Regenerations run on the calling thread, one at a time: each detected
change triggers exactly one full pipeline run.  Failures are passed to
``on_result`` and logged; watching continues.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Callable

from witdart.core.config.cli_args import GeneratorCLIArgs
from witdart.core.errors import GenerationError
from witdart.core.models.config import FileSystemPaths
from witdart.core.models.template import GeneratedFile
from witdart.core.result import Result
from witdart.core.services.generate import DartWitGenerator

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 0.5
"""Seconds between poll cycles."""

Signature = tuple[tuple[str, int, int], ...]


def _signature(paths: list[str]) -> Signature:
    """(path, mtime_ns, size) for each path; missing files count as (-1, -1)."""
    out = []
    for path in sorted(paths):
        try:
            st = os.stat(path)
        except OSError:
            out.append((path, -1, -1))
            continue
        out.append((path, st.st_mtime_ns, st.st_size))
    return tuple(out)


def watched_paths(generator: DartWitGenerator, args: GeneratorCLIArgs) -> list[str]:
    """Files whose changes trigger a regeneration.

    Falls back to the root input path when resolution fails, so that
    creating or fixing the file is noticed.
    """
    inputs = args.config.inputs
    resolved = generator.resolve(inputs)
    if resolved.is_ok:
        return [source.path for source in resolved.value.documents]
    if isinstance(inputs, FileSystemPaths):
        path = inputs.input_path
        if not os.path.isabs(path) and generator.base_path is not None:
            path = os.path.join(generator.base_path, path)
        return [os.path.abspath(path)]
    return []


def watch(
    generator: DartWitGenerator,
    args: GeneratorCLIArgs,
    on_result: Callable[[Result[GeneratedFile, GenerationError]], None],
    *,
    poll_interval: float = POLL_INTERVAL_S,
    stop_event: threading.Event | None = None,
) -> None:
    """Generate once, then again after every input change.

    Blocks until ``stop_event`` is set (forever when None).

    Args:
        generator: Generator bound to the execution environment.
        args: Parsed CLI arguments (config + output path).
        on_result: Called with every generation result, success or failure.
        poll_interval: Seconds between file checks.
        stop_event: Set to stop watching.
    """
    stop = stop_event or threading.Event()

    def run_once() -> Signature:
        # Taken before generating so an edit made mid-run triggers one more run
        signature = _signature(watched_paths(generator, args))
        on_result(generator.generate(args.config, args.dart_file_path))
        return signature

    last = run_once()
    logger.info("Watching %d file(s) for changes", len(last))

    while not stop.wait(poll_interval):
        current = _signature([path for path, _, _ in last])
        if current == last:
            continue
        logger.info("Input changed, regenerating")
        last = run_once()

    logger.info("Watch stopped")
