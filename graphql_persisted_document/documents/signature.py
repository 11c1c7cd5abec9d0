"""Operation registry signatures and document identifiers.

The default signer follows apollo-graphql's ``operationRegistrySignature``:
drop unused definitions, optionally hide string and numeric literals, sort the
AST into a deterministic order, then print it with reduced whitespace. The
identifier is the SHA256 hex digest of that printed signature, so any two
documents that differ only in formatting, comments or selection order share it.
"""

import hashlib
import json
import re
from collections.abc import Sequence
from copy import copy
from typing import Any, Protocol

from graphql import DocumentNode, Visitor, print_ast, visit
from graphql import separate_operations as graphql_separate_operations

from graphql_persisted_document.exceptions import SigningError
from graphql_persisted_document.options import LoaderOptions

from ._types import DocumentId, OperationName, PersistedOperation

_WHITESPACE = re.compile(r"\s+")
_SPACE_AFTER_PUNCTUATOR = re.compile(r"([^_a-zA-Z0-9]) ")
_SPACE_BEFORE_PUNCTUATOR = re.compile(r" ([^_a-zA-Z0-9])")
_HEX_STRING = re.compile(r'"([a-f0-9]+)"')


class Signer(Protocol):
    """Produces the canonical signature string of one operation document."""

    def __call__(
        self,
        document: DocumentNode,
        operation_name: str,
        *,
        preserve_string_and_numeric_literals: bool = False,
    ) -> str: ...


def drop_unused_definitions(document: DocumentNode, operation_name: str) -> DocumentNode:
    """Keep only the named operation and the fragments it reaches.

    Raises:
        SigningError: If the document has no operation with that name.
    """
    separated = graphql_separate_operations(document)
    if operation_name not in separated:
        raise SigningError(f"Operation '{operation_name}' not found in document")
    return separated[operation_name]


class _HideLiteralsVisitor(Visitor):
    def leave_int_value(self, node: Any, *_args: Any) -> Any:
        return _with(node, value="0")

    def leave_float_value(self, node: Any, *_args: Any) -> Any:
        return _with(node, value="0")

    def leave_string_value(self, node: Any, *_args: Any) -> Any:
        return _with(node, value="", block=False)


def hide_string_and_numeric_literals(document: DocumentNode) -> DocumentNode:
    """Replace int and float literals with ``0`` and string literals with ``""``."""
    return visit(document, _HideLiteralsVisitor())


def _name_key(node: Any) -> tuple[bool, str]:
    name = getattr(node, "name", None)
    if name is None:
        return (True, "")
    return (False, name.value)


# Node sequences stay tuples; graphql-core's visit does not walk lists.


def _sorted_by_kind_and_name(nodes: Sequence[Any] | None) -> tuple[Any, ...] | None:
    if nodes is None:
        return None
    return tuple(sorted(nodes, key=lambda node: (node.kind, *_name_key(node))))


def _sorted_by_name(nodes: Sequence[Any] | None) -> tuple[Any, ...] | None:
    if nodes is None:
        return None
    return tuple(sorted(nodes, key=_name_key))


def _sorted_variable_definitions(nodes: Sequence[Any] | None) -> tuple[Any, ...] | None:
    if nodes is None:
        return None
    return tuple(sorted(nodes, key=lambda node: node.variable.name.value))


class _SortVisitor(Visitor):
    def leave_document(self, node: Any, *_args: Any) -> Any:
        return _with(node, definitions=_sorted_by_kind_and_name(node.definitions))

    def leave_operation_definition(self, node: Any, *_args: Any) -> Any:
        return _with(node, variable_definitions=_sorted_variable_definitions(node.variable_definitions))

    def leave_selection_set(self, node: Any, *_args: Any) -> Any:
        return _with(node, selections=_sorted_by_kind_and_name(node.selections))

    def leave_field(self, node: Any, *_args: Any) -> Any:
        return _with(node, arguments=_sorted_by_name(node.arguments))

    def leave_fragment_spread(self, node: Any, *_args: Any) -> Any:
        return _with(node, directives=_sorted_by_name(node.directives))

    def leave_inline_fragment(self, node: Any, *_args: Any) -> Any:
        return _with(node, directives=_sorted_by_name(node.directives))

    def leave_fragment_definition(self, node: Any, *_args: Any) -> Any:
        return _with(
            node,
            directives=_sorted_by_name(node.directives),
            variable_definitions=_sorted_variable_definitions(node.variable_definitions),
        )

    def leave_directive(self, node: Any, *_args: Any) -> Any:
        return _with(node, arguments=_sorted_by_name(node.arguments))


def sort_ast(document: DocumentNode) -> DocumentNode:
    """Sort definitions, selections, arguments, directives and variables deterministically.

    Definitions and selections sort by kind, then name; nodes without a name
    (inline fragments) sort after named ones of the same kind. Sorting is
    stable, so equal keys keep document order.
    """
    return visit(document, _SortVisitor())


class _HexStringVisitor(Visitor):
    def leave_string_value(self, node: Any, *_args: Any) -> Any:
        return _with(node, value=node.value.encode("utf-8").hex(), block=False)


def print_with_reduced_whitespace(document: DocumentNode) -> str:
    """Print a document on one line with only the whitespace GraphQL requires.

    String literals are hex-encoded while whitespace is collapsed and decoded
    back afterwards, so their content is never touched.
    """
    printed = print_ast(visit(document, _HexStringVisitor()))
    printed = _WHITESPACE.sub(" ", printed)
    printed = _SPACE_AFTER_PUNCTUATOR.sub(r"\1", printed)
    printed = _SPACE_BEFORE_PUNCTUATOR.sub(r"\1", printed)
    return _HEX_STRING.sub(
        lambda match: json.dumps(bytes.fromhex(match.group(1)).decode("utf-8"), ensure_ascii=False),
        printed.strip(),
    )


def operation_registry_signature(
    document: DocumentNode,
    operation_name: str,
    *,
    preserve_string_and_numeric_literals: bool = False,
) -> str:
    """Canonical signature of one operation as stored in an operation registry."""
    without_unused = drop_unused_definitions(document, operation_name)
    if not preserve_string_and_numeric_literals:
        without_unused = hide_string_and_numeric_literals(without_unused)
    return print_with_reduced_whitespace(sort_ast(without_unused))


def operation_hash(signature: str) -> DocumentId:
    """SHA256 hex digest of a signature; the persisted document identifier."""
    return DocumentId(hashlib.sha256(signature.encode("utf-8")).hexdigest())


def sign_operation(
    name: OperationName,
    document: DocumentNode,
    options: LoaderOptions,
    signer: Signer = operation_registry_signature,
) -> PersistedOperation:
    """Sign a closed operation document and derive its identifier.

    Errors raised by the signer propagate unchanged.
    """
    signature = signer(
        document,
        name,
        preserve_string_and_numeric_literals=options.preserve_string_and_numeric_literals,
    )
    return PersistedOperation(name=name, document=document, signature=signature, document_id=operation_hash(signature))


def _with(node: Any, **changes: Any) -> Any:
    edited = copy(node)
    for key, value in changes.items():
        setattr(edited, key, value)
    return edited


__all__ = [
    "Signer",
    "drop_unused_definitions",
    "hide_string_and_numeric_literals",
    "operation_hash",
    "operation_registry_signature",
    "print_with_reduced_whitespace",
    "sign_operation",
    "sort_ast",
]
