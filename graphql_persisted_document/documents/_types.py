"""Domain-specific types for the document pipeline."""

from dataclasses import dataclass
from typing import NewType

from graphql import DocumentNode, FragmentDefinitionNode, OperationDefinitionNode

OperationName = NewType("OperationName", str)
"""Name of a GraphQL operation, unique within one unit's merged operations."""

DocumentId = NewType("DocumentId", str)
"""Lowercase hex SHA256 of an operation's canonical signature."""


@dataclass(frozen=True)
class MergedDefinitions:
    """Fragments and operations of a unit's aggregate documents, keyed by name.

    Both mappings keep first-insertion order of their keys; a later definition
    with the same name replaces the value in place.
    """

    fragments: dict[str, FragmentDefinitionNode]
    operations: dict[OperationName, OperationDefinitionNode]


@dataclass(frozen=True)
class PersistedOperation:
    """A single operation's closed document with its signature and identifier."""

    name: OperationName
    document: DocumentNode
    signature: str
    document_id: DocumentId


__all__ = ["DocumentId", "MergedDefinitions", "OperationName", "PersistedOperation"]
