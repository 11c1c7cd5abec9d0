"""graphql-persisted-document - stable document ids for GraphQL operations at build time.

Every GraphQL operation compiled into a build unit gets a persisted document id:
the SHA256 of its canonical operation registry signature. Fragments are merged
across the unit's dependency graph, each operation is closed over the fragments
it uses, ``__typename`` can be injected the way the client will send it, and
the id is appended to the unit's generated source.

Quick Start:
    >>> from pathlib import Path
    >>> from graphql_persisted_document import BuildSession, LoaderOptions, LocalUnitSource
    >>>
    >>> session = BuildSession(LocalUnitSource(Path("build")), LoaderOptions(add_typename=True))
    >>> unit = await session.build("queries/user.graphql")
    >>> print(unit.source)  # ends with: exports["GetUser"]["documentId"] = "..."

Environment Variables:
    - GRAPHQL_PERSISTED_ADD_TYPENAME: Default for LoaderOptions.add_typename
    - GRAPHQL_PERSISTED_PRESERVE_STRING_AND_NUMERIC_LITERALS: Default for
      LoaderOptions.preserve_string_and_numeric_literals
    - GRAPHQL_PERSISTED_LOG_LEVEL: Log level for the package loggers
"""

from .documents import (
    DocumentId,
    OperationName,
    PersistedOperation,
    Signer,
    add_typename_fields,
    extract_unit,
    operation_hash,
    operation_registry_signature,
)
from .exceptions import (
    AnonymousOperationError,
    DependencyCycleError,
    DependencyResolutionError,
    DocumentDomainError,
    ExtractionError,
    LoaderError,
    PersistedDocumentError,
    SigningError,
    UnitNotFoundError,
)
from .loader import (
    BuildSession,
    LocalUnitSource,
    MemoryUnitSource,
    ProcessedUnit,
    ResolvedUnit,
    UnitLoader,
    UnitSource,
    process_unit,
)
from .logging import LoggingConfig, get_logger, setup_logging
from .options import LoaderOptions

__version__ = "0.1.0"

__all__ = [
    # Config
    "LoaderOptions",
    # Logging
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    # Documents
    "DocumentId",
    "OperationName",
    "PersistedOperation",
    "Signer",
    "add_typename_fields",
    "extract_unit",
    "operation_hash",
    "operation_registry_signature",
    # Loading
    "BuildSession",
    "LocalUnitSource",
    "MemoryUnitSource",
    "ProcessedUnit",
    "ResolvedUnit",
    "UnitLoader",
    "UnitSource",
    "process_unit",
    # Errors
    "AnonymousOperationError",
    "DependencyCycleError",
    "DependencyResolutionError",
    "DocumentDomainError",
    "ExtractionError",
    "LoaderError",
    "PersistedDocumentError",
    "SigningError",
    "UnitNotFoundError",
]
