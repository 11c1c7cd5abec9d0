"""Sandboxed extraction of GraphQL documents from compiled units.

A compiled unit is generated Python source that builds a graphql-js style
dict AST and binds it to ``exports``. Dependencies on other units are pulled in
with ``require("./other.graphql")``, which returns that unit's ``exports``.
Next to the Document keys, ``exports`` maps each operation name to a Document
dict for that operation; document ids are later attached to those values.
The unit is never imported or exec'd here: its syntax tree is walked by a
small evaluator that understands only the constructs the compiler emits, so
evaluation has no side effects.

Example unit:
    >>> document = {"kind": "Document", "definitions": [...]}
    >>> fragments = require("./fragments.graphql")
    >>> document["definitions"] += fragments["definitions"]
    >>> exports = {**fragments, **document}
    >>> exports["GetUser"] = {"kind": "Document", "definitions": [document["definitions"][0]]}
"""

import ast
import re
from dataclasses import dataclass
from typing import Any

import graphql.language.ast as graphql_ast
from graphql import DocumentNode, Node, OperationType

from graphql_persisted_document.exceptions import ExtractionError
from graphql_persisted_document.logging import get_logger

logger = get_logger(__name__)

EXPORTS_NAME = "exports"
REQUIRE_NAME = "require"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class ExtractedUnit:
    """The document a unit defines and the units it requires, unresolved."""

    document: DocumentNode
    dependencies: tuple[str, ...]


def empty_document_dict() -> dict[str, Any]:
    """Placeholder returned for every ``require`` call during extraction."""
    return {"kind": "Document", "definitions": []}


class _Sandbox:
    """Evaluates the restricted statement subset of a compiled unit."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        self.namespace: dict[str, Any] = {}
        self.dependencies: list[str] = []

    def fail(self, message: str, node: ast.AST | None = None) -> ExtractionError:
        return ExtractionError(message, filename=self.filename, lineno=getattr(node, "lineno", None))

    def require(self, reference: Any, node: ast.AST) -> dict[str, Any]:
        if not isinstance(reference, str) or not reference:
            raise self.fail(f"{REQUIRE_NAME}() expects a non-empty string reference", node)
        if reference not in self.dependencies:
            self.dependencies.append(reference)
        return empty_document_dict()

    def run(self, tree: ast.Module) -> None:
        for statement in tree.body:
            self.execute(statement)

    def execute(self, node: ast.stmt) -> None:
        if isinstance(node, ast.Assign):
            value = self.evaluate(node.value)
            for target in node.targets:
                self.assign(target, value)
            return

        if isinstance(node, ast.AugAssign):
            if not isinstance(node.op, ast.Add):
                raise self.fail(f"Unsupported augmented operator: {type(node.op).__name__}", node)
            current = self.evaluate(self._as_load(node.target))
            self.assign(node.target, self._add(current, self.evaluate(node.value), node))
            return

        if isinstance(node, ast.Expr):
            # Docstrings and bare require() calls
            self.evaluate(node.value)
            return

        if isinstance(node, ast.Pass):
            return

        raise self.fail(f"Unsupported statement: {type(node).__name__}", node)

    def assign(self, target: ast.expr, value: Any) -> None:
        if isinstance(target, ast.Name):
            if target.id == REQUIRE_NAME:
                raise self.fail(f"Cannot rebind {REQUIRE_NAME}", target)
            self.namespace[target.id] = value
            return

        if isinstance(target, ast.Subscript):
            container = self.evaluate(target.value)
            key = self.evaluate(target.slice)
            if isinstance(container, dict):
                container[self._hashable(key, target)] = value
                return
            if isinstance(container, list) and isinstance(key, int):
                try:
                    container[key] = value
                except IndexError:
                    raise self.fail(f"List index out of range: {key}", target) from None
                return
            raise self.fail(f"Cannot assign into {type(container).__name__}", target)

        raise self.fail(f"Unsupported assignment target: {type(target).__name__}", target)

    def evaluate(self, node: ast.expr) -> Any:  # noqa: C901, PLR0911
        if isinstance(node, ast.Constant):
            if isinstance(node.value, (str, int, float, bool)) or node.value is None:
                return node.value
            raise self.fail(f"Unsupported literal: {type(node.value).__name__}", node)

        if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.USub):
            operand = self.evaluate(node.operand)
            if isinstance(operand, bool) or not isinstance(operand, (int, float)):
                raise self.fail("Unary minus requires a number", node)
            return -operand

        if isinstance(node, ast.Dict):
            result: dict[Any, Any] = {}
            for key, value in zip(node.keys, node.values, strict=True):
                if key is None:
                    # {**require("./other.graphql"), ...} re-exports another unit's operations
                    unpacked = self.evaluate(value)
                    if not isinstance(unpacked, dict):
                        raise self.fail(f"Cannot unpack {type(unpacked).__name__} into a dict", node)
                    result.update(unpacked)
                    continue
                result[self._hashable(self.evaluate(key), node)] = self.evaluate(value)
            return result

        if isinstance(node, (ast.List, ast.Tuple)):
            if any(isinstance(element, ast.Starred) for element in node.elts):
                raise self.fail("Starred expressions are not supported", node)
            return [self.evaluate(element) for element in node.elts]

        if isinstance(node, ast.Name):
            if node.id not in self.namespace:
                raise self.fail(f"Unknown name: {node.id}", node)
            return self.namespace[node.id]

        if isinstance(node, ast.Subscript):
            container = self.evaluate(node.value)
            key = self.evaluate(node.slice)
            try:
                return container[key]
            except (KeyError, IndexError, TypeError) as exc:
                raise self.fail(f"Invalid subscript {key!r}: {exc}", node) from None

        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.Add):
            return self._add(self.evaluate(node.left), self.evaluate(node.right), node)

        if isinstance(node, ast.Call):
            if not (isinstance(node.func, ast.Name) and node.func.id == REQUIRE_NAME):
                raise self.fail(f"Only {REQUIRE_NAME}() may be called", node)
            if len(node.args) != 1 or node.keywords:
                raise self.fail(f"{REQUIRE_NAME}() takes exactly one positional argument", node)
            return self.require(self.evaluate(node.args[0]), node)

        raise self.fail(f"Unsupported expression: {type(node).__name__}", node)

    def _add(self, left: Any, right: Any, node: ast.AST) -> Any:
        if isinstance(left, list) and isinstance(right, list):
            return left + right
        if isinstance(left, str) and isinstance(right, str):
            return left + right
        raise self.fail(f"Cannot add {type(left).__name__} and {type(right).__name__}", node)

    def _hashable(self, key: Any, node: ast.AST) -> Any:
        if isinstance(key, (list, dict)):
            raise self.fail(f"Unhashable key: {type(key).__name__}", node)
        return key

    @staticmethod
    def _as_load(target: ast.expr) -> ast.expr:
        if isinstance(target, ast.Name):
            return ast.copy_location(ast.Name(id=target.id, ctx=ast.Load()), target)
        if isinstance(target, ast.Subscript):
            return ast.copy_location(ast.Subscript(value=target.value, slice=target.slice, ctx=ast.Load()), target)
        return target


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _node_class(kind: Any) -> type[Node]:
    node_class = getattr(graphql_ast, f"{kind}Node", None) if isinstance(kind, str) else None
    if not (isinstance(node_class, type) and issubclass(node_class, Node)) or node_class is Node:
        raise ValueError(f"Unknown AST node kind: {kind!r}")
    return node_class


def _convert(value: Any) -> Any:
    if isinstance(value, dict):
        if "kind" in value:
            return node_from_dict(value)
        return {key: _convert(item) for key, item in value.items()}
    if isinstance(value, list):
        # graphql-core only walks node sequences stored as tuples
        return tuple(_convert(item) for item in value)
    return value


def node_from_dict(data: dict[str, Any]) -> Node:
    """Convert a graphql-js style dict AST node into a graphql-core node.

    Keys are camelCase in the dict form and snake_case on graphql-core nodes.
    Location information is dropped.
    """
    node_class = _node_class(data.get("kind"))
    fields: dict[str, Any] = {}
    for key, value in data.items():
        if key in ("kind", "loc"):
            continue
        attribute = _snake_case(key)
        if attribute not in node_class.keys:
            continue
        if attribute == "operation" and isinstance(value, str):
            fields[attribute] = OperationType(value)
        else:
            fields[attribute] = _convert(value)
    return node_class(**fields)


def document_from_dict(data: Any) -> DocumentNode:
    """Convert an exported dict AST into a DocumentNode.

    Only ``definitions`` is read from the Document dict. Other keys, such as the
    per-operation exports a unit binds next to them, are ignored.

    Raises:
        ValueError: If the value is not a Document dict or holds unknown node kinds.
    """
    if not isinstance(data, dict) or data.get("kind") != "Document":
        raise ValueError(f"Exported value is not a GraphQL Document: {type(data).__name__}")
    definitions = data.get("definitions") or []
    if not isinstance(definitions, list):
        raise ValueError(f"Document definitions must be a list, not {type(definitions).__name__}")
    for definition in definitions:
        if not isinstance(definition, dict):
            raise ValueError(f"Document definition is not an AST node: {type(definition).__name__}")
    return DocumentNode(definitions=tuple(node_from_dict(definition) for definition in definitions))


def extract_unit(source: str, *, filename: str = "<unit>") -> ExtractedUnit:
    """Evaluate a compiled unit and return its document and dependency references.

    Dependency references are returned once each, in the order first required.
    Every ``require`` call yields an empty placeholder document, so the unit's
    own document contains only the definitions it declares itself.

    Raises:
        ExtractionError: If the source is not valid, uses constructs outside
            the compiled-unit subset, or does not export a Document.
    """
    try:
        tree = ast.parse(source, filename=filename, mode="exec")
    except SyntaxError as exc:
        raise ExtractionError(f"Invalid unit source: {exc.msg}", filename=filename, lineno=exc.lineno) from exc

    sandbox = _Sandbox(filename)
    sandbox.run(tree)

    if EXPORTS_NAME not in sandbox.namespace:
        raise ExtractionError(f"Unit does not bind '{EXPORTS_NAME}'", filename=filename)
    try:
        document = document_from_dict(sandbox.namespace[EXPORTS_NAME])
    except (ValueError, TypeError) as exc:
        raise ExtractionError(str(exc), filename=filename) from exc

    logger.debug(f"Extracted {len(document.definitions)} definitions and {len(sandbox.dependencies)} dependencies from {filename}")
    return ExtractedUnit(document=document, dependencies=tuple(sandbox.dependencies))


__all__ = ["ExtractedUnit", "document_from_dict", "empty_document_dict", "extract_unit", "node_from_dict"]
