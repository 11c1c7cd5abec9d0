"""CLI for attaching persisted document ids to compiled GraphQL units."""

import argparse
import asyncio
import sys
from pathlib import Path

from .exceptions import PersistedDocumentError
from .loader import BuildSession, LocalUnitSource, ProcessedUnit
from .logging import setup_logging
from .options import LoaderOptions


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphql-persisted-document",
        description="Compute persisted document ids for compiled GraphQL units and append them to each unit.",
    )
    parser.add_argument("units", nargs="+", type=Path, help="Compiled unit files to process")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Directory dependency references resolve under (default: cwd)")
    parser.add_argument("--out-dir", type=Path, default=None, help="Write rewritten units here, mirroring their path under --root")
    parser.add_argument("--add-typename", action="store_true", default=None, help="Insert __typename into every selection set before signing")
    parser.add_argument(
        "--preserve-literals",
        action="store_true",
        default=None,
        help="Keep string and numeric literals in signatures instead of hiding them",
    )
    parser.add_argument("--list", action="store_true", help="Print operation names and document ids instead of sources")
    parser.add_argument("--log-level", default=None, help="Log level override (DEBUG, INFO, WARNING, ...)")
    return parser


def _options_from_args(args: argparse.Namespace) -> LoaderOptions:
    """Command-line flags override environment defaults only when given."""
    overrides = {}
    if args.add_typename is not None:
        overrides["add_typename"] = args.add_typename
    if args.preserve_literals is not None:
        overrides["preserve_string_and_numeric_literals"] = args.preserve_literals
    return LoaderOptions(**overrides)


async def _build_all(session: BuildSession, paths: list[str]) -> list[ProcessedUnit]:
    return list(await asyncio.gather(*[session.build(path) for path in paths]))


def _emit(paths: list[str], units: list[ProcessedUnit], args: argparse.Namespace) -> None:
    for path, unit in zip(paths, units, strict=True):
        if args.list:
            for name, document_id in unit.document_ids.items():
                print(f"{name}\t{document_id}")
        elif args.out_dir is not None:
            target = args.out_dir / path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(unit.source, encoding="utf-8")
        else:
            sys.stdout.write(unit.source)
            if not unit.source.endswith("\n"):
                sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    """Entry point. Returns the process exit status."""
    args = _build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    source = LocalUnitSource(args.root)
    try:
        paths = [source.relative_path(unit) for unit in args.units]
    except ValueError:
        print(f"error: every unit must live under --root ({source.root})", file=sys.stderr)
        return 2

    session = BuildSession(source, _options_from_args(args))
    try:
        units = asyncio.run(_build_all(session, paths))
    except PersistedDocumentError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    _emit(paths, units, args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
