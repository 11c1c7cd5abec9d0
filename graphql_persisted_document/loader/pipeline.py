"""Processing of a single compiled unit.

Pipeline, in order:
    1. Extract the unit's own document and its dependency references.
    2. Resolve all dependencies concurrently through the host loader.
    3. Aggregate own and dependency documents; merge definitions by name.
    4. Separate one closed document per operation.
    5. Optionally add ``__typename`` selections.
    6. Sign each operation and derive its document id.
    7. Append the document ids to the unit's source.

Any failure aborts the unit: either every operation gets an id or the call
raises and none do.
"""

from graphql_persisted_document.documents import (
    add_typename_fields,
    aggregate_documents,
    extract_unit,
    merge_definitions,
    separate_operations,
    sign_operation,
)
from graphql_persisted_document.documents._types import PersistedOperation
from graphql_persisted_document.documents.signature import Signer, operation_registry_signature
from graphql_persisted_document.logging import get_logger
from graphql_persisted_document.options import LoaderOptions

from .protocol import ProcessedUnit, UnitLoader
from .resolver import resolve_dependencies
from .rewriter import rewrite_source

logger = get_logger(__name__)


async def process_unit(
    source: str,
    *,
    loader: UnitLoader,
    options: LoaderOptions | None = None,
    path: str | None = None,
    signer: Signer = operation_registry_signature,
) -> ProcessedUnit:
    """Compute document ids for every operation a unit can see and attach them.

    Args:
        source: Generated source of the compiled unit.
        loader: Host loader used to resolve the unit's dependencies.
        options: Loader options; defaults read from the environment.
        path: Location of the unit, passed to the loader as the issuer of
            its dependency references.
        signer: Signature function; the operation registry signature by default.

    Returns:
        ProcessedUnit with the rewritten source, the unit's aggregate
        documents (for units that require it) and every signed operation.

    Raises:
        ExtractionError: If the unit source cannot be evaluated.
        DependencyResolutionError: If any dependency fails to resolve.
        AnonymousOperationError: If a merged document has an unnamed operation.

    Example:
        >>> unit = await process_unit(source, loader=session, path="queries/user.graphql.py")
        >>> unit.document_ids
        {'GetUser': '5f1e...'}
        >>> unit.source.splitlines()[-1]
        'exports["GetUser"]["documentId"] = "5f1e..."'

    Note:
        Operations reached through dependencies get ids too, since the unit
        re-exports them. Ids depend only on the canonical signature, so the
        same operation signed in two units gets the same id.
    """
    options = options or LoaderOptions()
    filename = path or "<unit>"

    try:
        extracted = extract_unit(source, filename=filename)
        resolved = await resolve_dependencies(extracted.dependencies, loader, issuer=path)
        documents = aggregate_documents(extracted.document, resolved)
        merged = merge_definitions(documents)

        operations: list[PersistedOperation] = []
        for name, document in separate_operations(merged).items():
            if options.add_typename:
                document = add_typename_fields(document)
            operation = sign_operation(name, document, options, signer)
            logger.debug(f"{filename}: {name} -> {operation.document_id}")
            operations.append(operation)
    except Exception as e:
        logger.error(f"Failed to process {filename}: {type(e).__name__}: {e}")
        raise

    rewritten = rewrite_source(source, {operation.name: operation.document_id for operation in operations})
    logger.info(f"Attached {len(operations)} document ids to {filename}")
    return ProcessedUnit(path=path, source=rewritten, documents=tuple(documents), operations=tuple(operations))


__all__ = ["process_unit"]
