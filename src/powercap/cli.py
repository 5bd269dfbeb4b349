"""Command-line interface for powercap."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import PowercapConfig
from .errors import PowercapError
from .rapl import DEFAULT_POWERCAP_ROOT

log = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> PowercapConfig:
    """Parse command-line arguments and return a PowercapConfig."""
    parser = argparse.ArgumentParser(
        prog="powercap",
        description="Read Intel RAPL energy counters from sysfs",
    )
    parser.add_argument(
        "-r",
        "--root",
        type=Path,
        default=DEFAULT_POWERCAP_ROOT,
        help=f"Powercap class directory (default: {DEFAULT_POWERCAP_ROOT})",
    )
    parser.add_argument(
        "--proc-root",
        type=Path,
        default=Path("/proc"),
        help="procfs mount point for the kernel module check (default: /proc)",
    )
    parser.add_argument(
        "--no-module-check",
        action="store_true",
        help="Skip the RAPL kernel module pre-flight check",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation for snapshot output, negative for one line "
        "(default: 2)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log discovery details to stderr",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("snapshot", help="Print every counter as JSON (default)")
    sub.add_parser("total", help="Print the total energy in micro-joules")
    sub.add_parser("modules", help="Report whether the RAPL modules are loaded")
    mock = sub.add_parser("mock", help="Write a fake powercap tree to a directory")
    mock.add_argument("directory", type=Path, help="Target directory")
    mock.add_argument(
        "-s",
        "--sockets",
        type=int,
        default=1,
        help="Number of sockets to create (default: 1)",
    )
    mock.add_argument(
        "--disabled",
        action="store_true",
        help="Mark every zone as disabled",
    )

    args = parser.parse_args(argv)
    command = args.command or "snapshot"

    return PowercapConfig(
        command=command,
        sysfs_root=args.root,
        proc_root=args.proc_root,
        check_modules=not args.no_module_check,
        indent=args.indent if args.indent >= 0 else None,
        verbose=args.verbose,
        mock_dir=getattr(args, "directory", None),
        mock_sockets=getattr(args, "sockets", 1),
        mock_enabled=not getattr(args, "disabled", False),
    )


def _check_modules(config: PowercapConfig) -> None:
    from .modules import modules_loaded

    try:
        loaded = modules_loaded(config.proc_root)
    except OSError as e:
        log.warning("Cannot check RAPL kernel modules: %s", e)
        return
    if not loaded:
        log.warning(
            "RAPL kernel modules are not loaded (try: modprobe intel_rapl_msr)"
        )


def run(config: PowercapConfig) -> int:
    """Execute the configured command and return the exit status."""
    if config.command == "mock":
        from .mock import MockBuilder

        assert config.mock_dir is not None
        builder = MockBuilder(
            enabled=config.mock_enabled,
            sockets=config.mock_sockets,
            domain_names=tuple(config.mock_domains),
        )
        print(builder.build(config.mock_dir))
        return 0

    if config.command == "modules":
        from .modules import modules_loaded

        try:
            loaded = modules_loaded(config.proc_root)
        except OSError as e:
            print(
                f"Error: cannot read {config.proc_root / 'modules'}: {e}",
                file=sys.stderr,
            )
            return 1
        print("loaded" if loaded else "not loaded")
        return 0 if loaded else 1

    if config.check_modules:
        _check_modules(config)

    from .rapl import PowerCap

    try:
        powercap = PowerCap.from_path(config.sysfs_root)
        if config.command == "total":
            print(powercap.total_energy())
        else:
            snapshot = powercap.snapshot()
            print(json.dumps(snapshot.to_dict(), indent=config.indent))
    except PowercapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """Entry point for the powercap CLI."""
    config = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        sys.exit(run(config))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)
