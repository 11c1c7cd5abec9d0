"""Test helpers for building compiled units from GraphQL text."""

from collections.abc import Sequence
from enum import Enum
from pprint import pformat
from typing import Any

from graphql import DocumentNode, Node, OperationDefinitionNode, parse, print_ast

from graphql_persisted_document.loader import ResolvedUnit


def _camel_case(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Node):
        return node_to_dict(value)
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


def node_to_dict(node: Node) -> dict[str, Any]:
    """Convert a graphql-core node into the graphql-js dict shape compilers emit."""
    data: dict[str, Any] = {"kind": type(node).__name__.removesuffix("Node")}
    for key in node.keys:
        if key == "loc":
            continue
        value = getattr(node, key)
        if value is None:
            continue
        data[_camel_case(key)] = _to_plain(value)
    return data


def compile_unit(graphql_source: str = "", requires: Sequence[str] = ()) -> str:
    """Generate compiled unit source for a GraphQL document and its imports.

    The unit re-exports its dependencies' operations and exports each of its
    own operations as ``exports["<name>"]``.
    """
    document = parse(graphql_source) if graphql_source.strip() else DocumentNode(definitions=())
    lines = [
        '"""Generated from GraphQL source."""',
        f"document = {pformat(node_to_dict(document), width=120)}",
    ]
    dependencies = [f"dependency_{index}" for index in range(len(requires))]
    for name, reference in zip(dependencies, requires, strict=True):
        lines.append(f"{name} = require({reference!r})")
        lines.append(f'document["definitions"] = document["definitions"] + {name}["definitions"]')
    lines.append("exports = {" + "".join(f"**{name}, " for name in dependencies) + "**document}")
    for index, definition in enumerate(document.definitions):
        if isinstance(definition, OperationDefinitionNode) and definition.name is not None:
            lines.append(
                f'exports[{definition.name.value!r}] = {{"kind": "Document", "definitions": [document["definitions"][{index}]]}}'
            )
    return "\n".join(lines) + "\n"


def run_unit(source: str, dependencies: dict[str, dict[str, Any]] | None = None) -> dict[str, Any]:
    """Execute a compiled unit as plain Python and return its ``exports``."""
    namespace: dict[str, Any] = {"require": (dependencies or {}).__getitem__}
    exec(compile(source, "<unit>", "exec"), namespace)
    return namespace["exports"]


def resolved(*graphql_sources: str) -> ResolvedUnit:
    """A ResolvedUnit whose aggregate list is the parsed sources, in order."""
    documents = [parse(text) for text in graphql_sources]
    return ResolvedUnit(document=documents[0], further_documents=tuple(documents[1:]))


def printed(document: DocumentNode) -> str:
    return print_ast(document)


def definition_names(document: DocumentNode) -> list[str]:
    return [definition.name.value for definition in document.definitions]
