#!/usr/bin/env python3
"""Showcase of graphql_persisted_document.

Writes two compiled units into a directory and builds them:
  • fragments/user.graphql.py defines the UserFields fragment
  • queries/user.graphql.py defines GetUser and requires the fragment unit

Each unit is built once per BuildSession; the query unit sees the fragment
through its dependency, so GetUser is signed together with UserFields.

Usage:
  python examples/showcase.py ./build
  python examples/showcase.py ./build --add-typename --log-level DEBUG
"""

import argparse
import asyncio
from pathlib import Path
from pprint import pformat

from graphql_persisted_document import BuildSession, LoaderOptions, LocalUnitSource, get_logger, setup_logging


def _name(value: str) -> dict:
    return {"kind": "Name", "value": value}


def _field(name: str, selections: list | None = None, arguments: list | None = None) -> dict:
    field = {"kind": "Field", "name": _name(name), "arguments": arguments or [], "directives": []}
    if selections is not None:
        field["selectionSet"] = {"kind": "SelectionSet", "selections": selections}
    return field


USER_FIELDS = {
    "kind": "Document",
    "definitions": [
        {
            "kind": "FragmentDefinition",
            "name": _name("UserFields"),
            "typeCondition": {"kind": "NamedType", "name": _name("User")},
            "directives": [],
            "selectionSet": {"kind": "SelectionSet", "selections": [_field("id"), _field("name")]},
        }
    ],
}

GET_USER = {
    "kind": "Document",
    "definitions": [
        {
            "kind": "OperationDefinition",
            "operation": "query",
            "name": _name("GetUser"),
            "variableDefinitions": [
                {
                    "kind": "VariableDefinition",
                    "variable": {"kind": "Variable", "name": _name("id")},
                    "type": {"kind": "NonNullType", "type": {"kind": "NamedType", "name": _name("ID")}},
                    "directives": [],
                }
            ],
            "directives": [],
            "selectionSet": {
                "kind": "SelectionSet",
                "selections": [
                    _field(
                        "user",
                        selections=[{"kind": "FragmentSpread", "name": _name("UserFields"), "directives": []}],
                        arguments=[{"kind": "Argument", "name": _name("id"), "value": {"kind": "Variable", "name": _name("id")}}],
                    )
                ],
            },
        }
    ],
}


def write_units(root: Path) -> None:
    """Write the compiled fragment and query units under ``root``."""
    fragments = root / "fragments" / "user.graphql.py"
    queries = root / "queries" / "user.graphql.py"
    fragments.parent.mkdir(parents=True, exist_ok=True)
    queries.parent.mkdir(parents=True, exist_ok=True)

    fragments.write_text(f'"""fragments/user.graphql"""\nexports = {pformat(USER_FIELDS, width=120)}\n', encoding="utf-8")
    queries.write_text(
        '"""queries/user.graphql"""\n'
        f"document = {pformat(GET_USER, width=120)}\n"
        'fragments = require("../fragments/user.graphql")\n'
        'document["definitions"] += fragments["definitions"]\n'
        "exports = {**fragments, **document}\n"
        'exports["GetUser"] = {"kind": "Document", "definitions": [document["definitions"][0]]}\n',
        encoding="utf-8",
    )


async def build(root: Path, options: LoaderOptions) -> None:
    logger = get_logger("showcase")
    session = BuildSession(LocalUnitSource(root), options)

    unit = await session.build("queries/user.graphql")
    for operation in unit.operations:
        logger.info(f"{operation.name}: {operation.signature}")
        logger.info(f"{operation.name} -> {operation.document_id}")

    logger.info(f"Rewritten tail of {unit.path}:\n{unit.source.splitlines()[-1]}")


def main():
    parser = argparse.ArgumentParser(description="graphql_persisted_document showcase")
    parser.add_argument("output", type=Path, help="Directory to write compiled units into")
    parser.add_argument("--add-typename", action="store_true", help="Insert __typename before signing")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    setup_logging(level=args.log_level)
    write_units(args.output)
    asyncio.run(build(args.output, LoaderOptions(add_typename=args.add_typename)))


if __name__ == "__main__":
    main()
