"""CLI entrypoints for schemalock commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import LockFileError
from .logging import configure_logging
from .orchestrator import ConcatOutcome, GenerateOutcome, Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemalock",
        description="Fingerprint and version schema sources across generation runs.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write the package lock file for the configured generation targets.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_log_file_option(generate_parser)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the package root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--config",
        default=None,
        help="Configuration file to use instead of the discovered schema.config.*.",
    )

    concat_parser = subparsers.add_parser(
        "concat-lock",
        help="Concatenate package lock files of a monorepo into the root lock file.",
    )
    _add_verbose_option(concat_parser, suppress_default=True)
    _add_log_file_option(concat_parser)
    concat_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the monorepo root (defaults to current directory).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for schemalock commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "generate":
        try:
            outcome = orchestrator.run_generate(args.path, config_path=args.config)
        except LockFileError as exc:
            parser.exit(1, f"schemalock generate failed: {exc}\n")
        except OSError as exc:
            parser.exit(1, f"schemalock generate failed: {exc}\nRun with --verbose for more details.\n")
        _print_generate_summary(outcome)
    elif args.command == "concat-lock":
        try:
            outcome = orchestrator.run_concat(args.path)
        except LockFileError as exc:
            parser.exit(1, f"schemalock concat-lock failed: {exc}\n")
        except OSError as exc:
            parser.exit(1, f"schemalock concat-lock failed: {exc}\nRun with --verbose for more details.\n")
        _print_concat_summary(outcome)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_generate_summary(outcome: GenerateOutcome) -> None:
    for change in outcome.changes:
        if change.previous_version is None:
            print(f"  {change.output}: {change.version} (new)")
        else:
            print(f"  {change.output}: {change.previous_version} -> {change.version} ({change.status})")
    rel_path = _relativize(outcome.path)
    if outcome.previous_version is None:
        print(f"Lock file created at {rel_path} (version {outcome.lock.version})")
    else:
        print(
            f"Lock file updated at {rel_path} "
            f"({outcome.previous_version} -> {outcome.lock.version})"
        )


def _print_concat_summary(outcome: ConcatOutcome) -> None:
    rel_path = _relativize(outcome.path)
    if not outcome.written:
        print("No changes detected in package lock files")
        print(f"Monorepo lock at {rel_path} is up to date (version {outcome.lock.version})")
        return

    print(f"Found {len(outcome.lock.packages)} package(s) with lock files:")
    for package in outcome.lock.packages:
        print(f"   - {package.package_name}@{package.package_version} ({package.file})")
    if outcome.previous_version is None:
        print(f"Generated monorepo lock at {rel_path} (version {outcome.lock.version})")
    else:
        print(
            f"Updated monorepo lock at {rel_path} "
            f"({outcome.previous_version} -> {outcome.lock.version})"
        )


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
