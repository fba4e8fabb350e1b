"""CLI interface for pathgate."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from pathgate import secure_fs
from pathgate.core.config import Config, load_config
from pathgate.core.errors import InitializationError, PathValidationError
from pathgate.core.logging import setup_logging
from pathgate.policy.patterns import ValidationMode
from pathgate.tools.filesystem import format_listing

logger = logging.getLogger(__name__)


def _octal_mode(value: str) -> int:
    try:
        return int(value, 8)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an octal permission mode (e.g. 755)") from None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``pathgate`` command."""
    parser = argparse.ArgumentParser(
        prog="pathgate",
        description="pathgate - confine untrusted paths to a base directory",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "-b",
        "--base-dir",
        type=str,
        help="Base directory (overrides policy.base_directory)",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=[mode.value for mode in ValidationMode],
        help="Validation mode (overrides policy.mode)",
    )
    parser.add_argument(
        "--pattern",
        type=str,
        help="Whitelist regex replacing the mode's default pattern",
    )
    parser.add_argument(
        "--enforce-whitelist",
        action="store_true",
        default=None,
        help="Reject paths that do not match the whitelist pattern",
    )
    parser.add_argument(
        "--resolve-symlinks",
        action="store_true",
        default=None,
        help="Recheck containment after resolving symlinks",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    resolve_parser = subparsers.add_parser("resolve", help="Print the sandboxed absolute path")
    resolve_parser.add_argument("path", help="Path relative to the base directory")

    ls_parser = subparsers.add_parser("ls", help="List a directory inside the sandbox")
    ls_parser.add_argument("path", nargs="?", default=".", help="Directory relative to the base (default: .)")

    perms_parser = subparsers.add_parser(
        "check-perms",
        help="Check permission bits of a sandboxed path (exit 0 if all bits are set)",
    )
    perms_parser.add_argument("path", help="Path relative to the base directory")
    perms_parser.add_argument("mode", type=_octal_mode, help="Required bits in octal, e.g. 755")

    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Collect CLI flags that were actually given into a config overlay."""
    policy: dict[str, Any] = {}
    if args.base_dir is not None:
        policy["base_directory"] = args.base_dir
    if args.mode is not None:
        policy["mode"] = args.mode
    if args.pattern is not None:
        policy["whitelist_pattern"] = args.pattern
    if args.enforce_whitelist is not None:
        policy["enforce_whitelist"] = args.enforce_whitelist
    if args.resolve_symlinks is not None:
        policy["resolve_symlinks"] = args.resolve_symlinks

    overrides: dict[str, Any] = {}
    if policy:
        overrides["policy"] = policy
    if args.verbose:
        overrides["logging"] = {"level": "DEBUG"}
    return overrides


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, initialize the sandbox and run one command.

    Returns:
        Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is None and args.base_dir is None:
        parser.error("Either --config or --base-dir is required")

    config: Config = load_config(args.config, overrides=_overrides_from_args(args))
    setup_logging(
        level=config.logging.level,
        directory=config.logging.directory,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
    )
    secure_fs.initialize_from_config(config)
    logger.debug(f"Running {args.command} for {args.path!r}")

    if args.command == "resolve":
        print(secure_fs.resolve(args.path))
        return 0

    if args.command == "ls":
        entries = secure_fs.list_directory(args.path)
        if not entries:
            print(f"Directory '{args.path}' is empty")
        else:
            print(format_listing(entries))
        return 0

    resolved = secure_fs.resolve(args.path)
    granted = secure_fs.check_directory_permissions(resolved, args.mode)
    print(f"{resolved}: {'granted' if granted else 'denied'} ({args.mode:o})")
    return 0 if granted else 1


def run() -> None:
    """Entry point for the ``pathgate`` console script."""
    try:
        status = main()
    except KeyboardInterrupt:
        return
    except PathValidationError as e:
        print(f"Rejected: {e}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Invalid YAML in configuration: {e}", file=sys.stderr)
        sys.exit(1)
    except (InitializationError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    run()
