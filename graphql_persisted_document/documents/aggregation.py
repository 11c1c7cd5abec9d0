"""Aggregation of a unit's documents into name-keyed definitions.

A unit's aggregate document list is its own document followed by the aggregate
lists of its dependencies, in declared dependency order. Merging that list is
positional: when two definitions share a name, the one appearing later in the
list replaces the earlier one without any diagnostic. Two unrelated units
defining the same fragment name therefore silently shadow each other.
"""

from collections.abc import Iterable, Sequence

from graphql import DocumentNode, FragmentDefinitionNode, OperationDefinitionNode

from graphql_persisted_document.exceptions import AnonymousOperationError

from ._types import MergedDefinitions, OperationName


def aggregate_documents(document: DocumentNode, resolved: Iterable[Sequence[DocumentNode]]) -> list[DocumentNode]:
    """Flatten a unit's own document and its resolved dependency lists, in order."""
    documents = [document]
    for dependency_documents in resolved:
        documents.extend(dependency_documents)
    return documents


def collect_fragments(documents: Iterable[DocumentNode]) -> dict[str, FragmentDefinitionNode]:
    """Map fragment names to definitions; later definitions win."""
    fragments: dict[str, FragmentDefinitionNode] = {}
    for document in documents:
        for definition in document.definitions:
            if isinstance(definition, FragmentDefinitionNode):
                fragments[definition.name.value] = definition
    return fragments


def collect_operations(documents: Iterable[DocumentNode]) -> dict[OperationName, OperationDefinitionNode]:
    """Map operation names to definitions; later definitions win.

    Raises:
        AnonymousOperationError: If any operation has no name.
    """
    operations: dict[OperationName, OperationDefinitionNode] = {}
    for document in documents:
        for definition in document.definitions:
            if isinstance(definition, OperationDefinitionNode):
                if definition.name is None or not definition.name.value:
                    raise AnonymousOperationError("Apollo does not support anonymous operations", definition)
                operations[OperationName(definition.name.value)] = definition
    return operations


def merge_definitions(documents: Sequence[DocumentNode]) -> MergedDefinitions:
    """Merge an aggregate document list into fragments and operations by name."""
    return MergedDefinitions(
        fragments=collect_fragments(documents),
        operations=collect_operations(documents),
    )


def merged_document(merged: MergedDefinitions) -> DocumentNode:
    """Build a single document holding every merged fragment, then every operation."""
    return DocumentNode(definitions=(*merged.fragments.values(), *merged.operations.values()))


__all__ = [
    "aggregate_documents",
    "collect_fragments",
    "collect_operations",
    "merge_definitions",
    "merged_document",
]
