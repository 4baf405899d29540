"""PR Grim Reaper entry point.

Three modes: warn (one warning scan), execute (one review of warned PRs) and
daemon (both on their scheduler intervals). Usage: grim-reaper warn | execute | daemon.
"""

import argparse
import logging
import sys
from pathlib import Path

from grim_reaper.config import AppConfig, ConfigError, load_config
from grim_reaper.handlers import execution_handler, warning_handler
from grim_reaper.logging import setup_logging
from grim_reaper.scheduler import start_scheduler_threads

COMMANDS = ("warn", "execute", "daemon")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with subcommand (warn | execute | daemon)."""
    parser = argparse.ArgumentParser(
        prog="grim-reaper",
        description="PR Grim Reaper - warn about and close inactive pull requests",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default="daemon",
        help="warn: post warnings once; execute: close expired PRs once; daemon: run both on schedule",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    return parser.parse_args(argv)


def run_daemon(config: AppConfig) -> None:
    """Run warning and execution loops until interrupted."""
    log = logging.getLogger("grim_reaper.daemon")
    config.require_github_token()
    log.info(
        "PR Grim Reaper daemon started | repos=%s | warn_after=%sd | close_after=%sd | dry_run=%s",
        ",".join(config.reaper.repositories) or "<all accessible>",
        config.reaper.warning_threshold_days,
        config.reaper.execution_threshold_days,
        config.reaper.dry_run,
    )
    for thread in start_scheduler_threads(config):
        thread.join()


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to warn, execute or daemon."""
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("grim_reaper").warning("config.yaml not found, using config.example.yaml")

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger("grim_reaper").error("Invalid configuration: %s", e)
        return 1

    setup_logging(config.logging, dry_run=config.reaper.dry_run)
    log = logging.getLogger("grim_reaper")

    if args.check:
        try:
            config.require_github_token()
        except ConfigError as e:
            log.error("%s", e)
            return 1
        print("Config OK:", ",".join(config.reaper.repositories) or "<all accessible>", config.store.path)
        return 0

    try:
        if args.command == "warn":
            warning_handler(config)
        elif args.command == "execute":
            execution_handler(config)
        else:
            run_daemon(config)
    except KeyboardInterrupt:
        return 0
    except ConfigError as e:
        log.error("Invalid configuration: %s", e)
        return 1
    except Exception as e:
        log.exception("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
