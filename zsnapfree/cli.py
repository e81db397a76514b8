"""Command-line entry point for zsnapfree."""

import argparse
import sys
import textwrap
from pathlib import Path
from typing import Callable, Iterable, Optional

from zsnapfree import __version__
from zsnapfree.config import Settings, get_settings
from zsnapfree.config.validation import ConfigurationError, validate_configuration
from zsnapfree.errors import ZsnapfreeError
from zsnapfree.logging_config import get_logger, setup_logging
from zsnapfree.services.recompute_loop import RecomputeLoop
from zsnapfree.services.selection import SelectionModel
from zsnapfree.services.zfs_tool import ZfsToolAdapter
from zsnapfree.ui.formatting import format_bytes

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zsnapfree",
        description=(
            "Interactively mark ZFS snapshots and see how much space destroying "
            "them would reclaim. Only dry runs are ever executed."
        ),
    )
    parser.add_argument("dataset", help="Dataset whose snapshots to list, e.g. tank/data")
    parser.add_argument("--config", type=Path, default=None, help="YAML or TOML settings file")
    parser.add_argument("--zfs", default=None, help="zfs binary to run (overrides ZSNAPFREE_ZFS)")
    parser.add_argument(
        "--idle-timeout-ms",
        type=int,
        default=None,
        help="Idle time before the estimate is recomputed",
    )
    parser.add_argument("--log-level", default=None, help="Logging level")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Resolve settings from file and environment, then apply command-line overrides."""
    settings = Settings.from_file(args.config) if args.config else get_settings()
    overrides = {
        "zfs": args.zfs,
        "idle_timeout_ms": args.idle_timeout_ms,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})


def render_summary(loop: RecomputeLoop) -> str:
    """Text printed after the interactive session ends."""
    if not loop.selection.ranges():
        return "No snapshots were marked; nothing would be destroyed.\n"

    return textwrap.dedent(
        """\
        Running the following command should pretend to delete {count} snapshots and
        show that this would reclaim {size}:

        {command}

        run it as root and without `-n` to actually do it.
        """
    ).format(
        count=len(loop.result.destroys),
        size=format_bytes(loop.result.bytes),
        command=loop.equivalent_command_line(),
    )


def _default_ui(loop: RecomputeLoop) -> None:
    from zsnapfree.ui.tui import run_tui

    run_tui(loop)


def main(
    argv: Optional[Iterable[str]] = None,
    ui: Callable[[RecomputeLoop], None] = _default_ui,
) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = load_settings(args)
        validate_configuration(settings)
    except (ConfigurationError, ValueError, FileNotFoundError) as e:
        print(f"zsnapfree: {e}", file=sys.stderr)
        return 1

    # The terminal belongs to the UI from here on; only file logging is safe
    setup_logging(settings, console=False)

    adapter = ZfsToolAdapter(settings.zfs)
    try:
        names = adapter.list_snapshots(args.dataset)
        loop = RecomputeLoop(
            args.dataset,
            SelectionModel(names),
            adapter,
            idle_timeout=settings.idle_timeout,
        )
        ui(loop)
        loop.recompute(force=True)
    except ZsnapfreeError as e:
        logger.error(f"Session aborted: {e.message}")
        print(f"zsnapfree: {e}", file=sys.stderr)
        return 1

    print(render_summary(loop), end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
