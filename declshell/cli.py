"""CLI entrypoint for declshell."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, ShellConfig, UsageError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator
from .provider import MetadataFormatError, MetadataResolutionError

USAGE_MESSAGE = "You must specify a library metadata document to parse."


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="declshell",
        description="Generate a stubbed C# declaration shell from a library's structural metadata.",
    )
    parser.add_argument(
        "library",
        nargs="?",
        default=None,
        help="Path to the library metadata document (JSON or YAML).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the shell to this file instead of stdout.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .declshell.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=None,
        metavar="NAME",
        help="Namespace or top-level type name to leave out (repeatable).",
    )
    parser.add_argument(
        "--search-path",
        action="append",
        default=None,
        metavar="DIR",
        help="Extra directory to search for referenced libraries (repeatable).",
    )
    parser.add_argument(
        "--no-assembly-info",
        action="store_true",
        help="Skip the assembly-level attribute block.",
    )
    parser.add_argument(
        "--force-virtual",
        action="store_true",
        help="Declare every instance method virtual (or override).",
    )
    parser.add_argument(
        "--tabs",
        action="store_true",
        help="Indent with tabs instead of spaces.",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        metavar="N",
        help="Number of spaces per indentation level (default 4).",
    )
    parser.add_argument(
        "--no-aliases",
        action="store_true",
        help="Keep System type names instead of C# keyword aliases.",
    )
    parser.add_argument(
        "--no-banner",
        action="store_true",
        help="Omit the generated-file comment banner.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only report warnings and errors on stderr.",
    )
    parser.add_argument(
        "--log-file",
        help="Also write a debug-level log of the run to this file.",
    )
    return parser


def _resolve_config(parser: argparse.ArgumentParser, args: argparse.Namespace) -> ShellConfig:
    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    return config.with_overrides(
        library_path=args.library,
        output_path=args.output,
        ignored=args.ignore,
        search_paths=args.search_path,
        disable_assembly_info=True if args.no_assembly_info else None,
        force_virtual=True if args.force_virtual else None,
        use_tabs=True if args.tabs else None,
        indent_size=args.indent,
        keyword_aliases=False if args.no_aliases else None,
        emit_banner=False if args.no_banner else None,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for declshell."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.indent is not None and args.indent < 0:
        parser.exit(2, "--indent must not be negative\n")

    config = _resolve_config(parser, args)
    orchestrator = Orchestrator(config)

    try:
        result = orchestrator.run()
    except UsageError:
        print(USAGE_MESSAGE)
        parser.print_usage(sys.stdout)
        return
    except (MetadataResolutionError, MetadataFormatError) as exc:
        parser.exit(1, f"declshell failed: {exc}\n")
    except Exception as exc:  # pragma: no cover - defensive guard
        parser.exit(1, f"declshell failed: {exc}\nRun with --verbose for more details.\n")

    if result.path is None:
        sys.stdout.write(result.text)
    else:
        print(f"Shell with {result.type_count} types written to {_relativize(result.path)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
