"""Host loader protocol and unit result types.

The core never loads units by itself. Whatever drives the build hands it a
UnitLoader that turns a dependency reference into that unit's documents.
Implementations: BuildSession (units read from a UnitSource and processed on
demand).
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from graphql import DocumentNode

from graphql_persisted_document.documents import DocumentId, OperationName, PersistedOperation


@dataclass(frozen=True)
class ResolvedUnit:
    """A dependency's own document and every document it aggregated in turn."""

    document: DocumentNode
    further_documents: tuple[DocumentNode, ...] = ()

    @property
    def documents(self) -> tuple[DocumentNode, ...]:
        """The dependency's aggregate list: own document first."""
        return (self.document, *self.further_documents)


@dataclass(frozen=True)
class ProcessedUnit:
    """Result of processing one compiled unit.

    Attributes:
        path: Location of the unit, if it came from a unit source.
        source: Rewritten unit source with document ids attached.
        documents: The unit's aggregate document list, own document first.
        operations: Every signed operation, in merged order.
    """

    path: str | None
    source: str
    documents: tuple[DocumentNode, ...]
    operations: tuple[PersistedOperation, ...]

    @property
    def document_ids(self) -> dict[OperationName, DocumentId]:
        """Operation name to document id, in merged order."""
        return {operation.name: operation.document_id for operation in self.operations}

    def to_resolved(self) -> ResolvedUnit:
        """View of this unit as a dependency of another unit."""
        return ResolvedUnit(document=self.documents[0], further_documents=self.documents[1:])


@runtime_checkable
class UnitLoader(Protocol):
    """Protocol for host loaders that resolve dependency references.

    Implementations must allow concurrent calls. A reference that names no
    unit raises UnitNotFoundError; any other failure raises another
    exception, typically a LoaderError.
    """

    async def resolve(self, reference: str, *, issuer: str | None = None) -> ResolvedUnit:
        """Load the unit ``reference`` points to, relative to ``issuer`` when given."""
        ...


__all__ = ["ProcessedUnit", "ResolvedUnit", "UnitLoader"]
