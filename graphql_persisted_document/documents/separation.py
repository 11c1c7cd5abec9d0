"""Split merged definitions into one closed document per operation."""

from graphql import DocumentNode
from graphql import separate_operations as graphql_separate_operations

from ._types import MergedDefinitions, OperationName
from .aggregation import merged_document


def separate_operations(merged: MergedDefinitions) -> dict[OperationName, DocumentNode]:
    """Return a standalone document for each merged operation.

    Each document holds the operation and every fragment reachable from it
    through fragment spreads, transitively. Unreachable fragments and other
    operations are left out. Definitions keep their merged order: fragments
    first, then the operation.
    """
    separated = graphql_separate_operations(merged_document(merged))
    return {OperationName(name): separated[name] for name in merged.operations}


__all__ = ["separate_operations"]
