from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import load_config
from .errors import InstallerError
from .lib.cleanup import cleanup_all, cleanup_failed
from .lib.env import InstallPaths
from .lib.hostcheck import TERMUX_HOME, check_platform
from .lib.launcher import write_start_script
from .logging_utils import DEFAULT_LOG_PATH, SUCCESS, configure_logging, format_question
from .pipeline import InstallCtx, new_state, run_pipeline
from .steps import (
    CleanupTempStep,
    ConfigureRootFSStep,
    CreateLauncherStep,
    DetectArchStep,
    DownloadRootFSStep,
    ExtractRootFSStep,
    PreflightStep,
)

logger = logging.getLogger(__name__)

PROG = "ubuntu-installer"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

HELP_TEXT = """\

Ubuntu in Termux - Installer

Usage: {prog} [OPTIONS]

Options:
  -y, --yes          Install without prompts
  -c, --clean        Remove all files
  -h, --help         Show this help

  --dir DIR          Install into DIR (default: current directory)
  --config FILE      YAML file overriding installer defaults
  --log FILE         Log file (default: {log})
  -v, --verbose      Show debug output on the console

IMPORTANT:
  Run from Termux home directory!

  cd ~
  {prog}
"""


class _ArgParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_steps():
    return [
        PreflightStep(),
        DetectArchStep(),
        DownloadRootFSStep(),
        ExtractRootFSStep(),
        ConfigureRootFSStep(),
        CreateLauncherStep(),
        CleanupTempStep(),
    ]


def ask_yes_no(question: str, *, default: bool) -> bool:
    """Prompt on stdin. EOF counts as "no" so piped runs never install by accident."""

    try:
        answer = input(format_question(question, color=sys.stdout.isatty()))
    except EOFError:
        print()
        return False
    answer = answer.strip()
    if not answer:
        return default
    return answer in {"y", "Y"}


def _report_error(e: BaseException, state: Dict[str, Any]) -> None:
    step = (state.get("execution") or {}).get("current_step")
    if step:
        logger.error("Failed at step %s: %s", step, e)
    else:
        logger.error("%s", e)
    for hint in getattr(e, "hints", []):
        logger.info("%s", hint)


def _keep_existing(ctx: InstallCtx) -> int:
    logger.info("Keeping existing installation")
    if not ctx.paths.start_script.exists():
        write_start_script(ctx.paths.start_script, binds_dir=ctx.paths.binds_dir, config=ctx.config)
    logger.info("Start Ubuntu: bash %s", ctx.paths.start_script.name)
    return EXIT_OK


def _print_success(ctx: InstallCtx) -> None:
    logger.log(SUCCESS, "Installation Complete!")
    logger.info("Start Ubuntu:")
    logger.info("  bash %s", ctx.paths.start_script.name)
    logger.info("First-time setup (inside Ubuntu):")
    logger.info("  apt update")
    logger.info("  apt upgrade -y")
    logger.info("  apt install sudo nano vim wget curl -y")
    logger.log(SUCCESS, "Enjoy Ubuntu in Termux!")


def install(ctx: InstallCtx, *, assume_yes: bool = False) -> int:
    """Run the full installation; returns the process exit code."""

    logger.info("Ubuntu in Termux - Installer")
    logger.info("Current location: %s", ctx.paths.base)
    logger.info("Recommended location: %s", TERMUX_HOME)

    state = new_state()

    try:
        check_platform()

        if ctx.paths.rootfs.is_dir():
            logger.warning("Found existing installation!")
            if assume_yes or not ask_yes_no("Remove and reinstall? [y/N] ", default=False):
                return _keep_existing(ctx)
            cleanup_all(ctx.paths)
    except KeyboardInterrupt:
        logger.warning("Interrupted!")
        return EXIT_INTERRUPTED
    except (InstallerError, OSError) as e:
        _report_error(e, state)
        return EXIT_FAILURE

    try:
        result = run_pipeline(ctx=ctx, state=state, steps=build_steps())
    except KeyboardInterrupt:
        logger.warning("Interrupted!")
        cleanup_failed(ctx.paths)
        return EXIT_INTERRUPTED
    except InstallerError as e:
        _report_error(e, state)
        cleanup_failed(ctx.paths)
        return EXIT_FAILURE
    except Exception:
        logger.exception(
            "Installer failed at step %s", (state.get("execution") or {}).get("current_step")
        )
        cleanup_failed(ctx.paths)
        return EXIT_FAILURE

    logger.debug("Ran steps: %s", ", ".join(result.ran_steps))
    logger.debug("Decisions: %s", (result.state.get("execution") or {}).get("decisions"))
    _print_success(ctx)
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    p = _ArgParser(prog=PROG, add_help=False)
    action = p.add_mutually_exclusive_group()
    action.add_argument("-y", "--yes", action="store_true", help="Install without prompts")
    action.add_argument("-c", "--clean", action="store_true", help="Remove all files")
    action.add_argument("-h", "--help", action="store_true", help="Show this help")
    p.add_argument("--dir", default=".", help="Installation directory")
    p.add_argument("--config", default=None, help="YAML config overriding installer defaults")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)

    if args.help:
        print(HELP_TEXT.format(prog=PROG, log=DEFAULT_LOG_PATH))
        return EXIT_OK

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        logger.error("Cannot load config %s: %s", args.config, e)
        return EXIT_FAILURE

    ctx = InstallCtx(config=config, paths=InstallPaths.for_config(config, Path(args.dir)))

    if args.clean:
        cleanup_all(ctx.paths)
        logger.log(SUCCESS, "Cleaned!")
        return EXIT_OK

    if not args.yes:
        try:
            confirmed = ask_yes_no("Install Ubuntu? [Y/n] ", default=True)
        except KeyboardInterrupt:
            logger.warning("Interrupted!")
            return EXIT_INTERRUPTED
        if not confirmed:
            logger.info("Cancelled")
            return EXIT_OK

    return install(ctx, assume_yes=args.yes)


if __name__ == "__main__":
    raise SystemExit(main())
