"""Scheduler: run the warning scan and the execution review on their own intervals."""

import logging
import threading
import time
from typing import Any, Callable, List

from grim_reaper.config import AppConfig
from grim_reaper.handlers import execution_handler, warning_handler

Handler = Callable[[AppConfig], Any]


def run_scheduler_loop(
    handler: Handler,
    config: AppConfig,
    interval_seconds: int,
    name: str = "reaper",
) -> None:
    """Loop: run handler, then sleep interval_seconds.

    A failed run is logged and retried on the next tick.
    """
    log = logging.getLogger(f"grim_reaper.scheduler.{name}")
    while True:
        try:
            handler(config)
        except Exception as e:
            log.exception("Scheduler tick error: %s", e)
        time.sleep(interval_seconds)


def start_scheduler_threads(config: AppConfig) -> List[threading.Thread]:
    """Start warning and execution loops in daemon threads."""
    jobs = [
        ("warning", warning_handler, config.scheduler.warning_interval_seconds),
        ("execution", execution_handler, config.scheduler.execution_interval_seconds),
    ]
    threads = []
    for name, handler, interval in jobs:
        thread = threading.Thread(
            target=run_scheduler_loop,
            args=(handler, config, interval),
            kwargs={"name": name},
            name=f"grim-reaper-{name}",
            daemon=True,
        )
        thread.start()
        threads.append(thread)
    return threads
