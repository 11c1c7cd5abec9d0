"""Exception hierarchy for graphql-persisted-document.

All exceptions inherit from PersistedDocumentError. Problems with the GraphQL
content itself derive from DocumentDomainError; problems obtaining or evaluating
compiled units derive from LoaderError.
"""

from collections.abc import Sequence
from typing import Any


class PersistedDocumentError(Exception):
    """Base exception for all graphql-persisted-document errors."""


class DocumentDomainError(PersistedDocumentError):
    """Raised when the GraphQL documents of a unit cannot be persisted as written."""


class AnonymousOperationError(DocumentDomainError):
    """Raised when a merged document contains an operation without a name."""

    def __init__(self, message: str, definition: Any) -> None:
        super().__init__(message)
        self.definition = definition

    @property
    def nodes(self) -> list[Any]:
        """AST nodes the error refers to, in GraphQLError style."""
        return [self.definition]


class LoaderError(PersistedDocumentError):
    """Base exception for failures obtaining or evaluating compiled units."""


class ExtractionError(LoaderError):
    """Raised when generated unit source cannot be evaluated to a document."""

    def __init__(self, message: str, *, filename: str = "<unit>", lineno: int | None = None) -> None:
        location = f"{filename}:{lineno}" if lineno is not None else filename
        super().__init__(f"{location}: {message}")
        self.filename = filename
        self.lineno = lineno


class UnitNotFoundError(LoaderError):
    """Raised by a unit source when a reference does not name any unit."""

    def __init__(self, reference: str, path: str | None = None) -> None:
        detail = f" (looked for {path})" if path and path != reference else ""
        super().__init__(f"Compiled unit not found: {reference}{detail}")
        self.reference = reference
        self.path = path


class DependencyCycleError(LoaderError):
    """Raised when a unit requires, directly or transitively, a unit still being built."""

    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__("Dependency cycle: " + " -> ".join(chain))
        self.chain = tuple(chain)


class DependencyResolutionError(LoaderError):
    """Raised when one or more dependencies of a unit fail to resolve."""

    def __init__(self, failures: Sequence[tuple[str, BaseException]], total: int) -> None:
        lines = [f"  {reference}: {type(exc).__name__}: {exc}" for reference, exc in failures]
        super().__init__(f"Failed to resolve {len(failures)}/{total} dependencies:\n" + "\n".join(lines))
        self.failures = tuple(failures)


class SigningError(PersistedDocumentError):
    """Raised when an operation document cannot be canonically signed."""
