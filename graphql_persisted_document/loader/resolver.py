"""Concurrent resolution of a unit's dependencies."""

import asyncio
from collections.abc import Sequence
from typing import cast

from graphql import DocumentNode

from graphql_persisted_document.exceptions import DependencyResolutionError
from graphql_persisted_document.logging import get_logger

from .protocol import ResolvedUnit, UnitLoader

logger = get_logger(__name__)


async def resolve_dependencies(
    references: Sequence[str],
    loader: UnitLoader,
    *,
    issuer: str | None = None,
) -> list[tuple[DocumentNode, ...]]:
    """Resolve every dependency reference concurrently.

    Results are in reference order, whatever order the loads finish in. Each
    item is the dependency's aggregate document list.

    All requests run to completion even when some fail; a single failure
    fails the whole resolution and no partial result is returned.

    Raises:
        DependencyResolutionError: Listing every reference that failed, chained
            to the first failure.

    Example:
        >>> resolved = await resolve_dependencies(["./fragments.graphql"], session, issuer="queries/user.graphql.py")
        >>> [len(documents) for documents in resolved]
        [1]

    Note:
        Typed errors from a dependency (ExtractionError, AnonymousOperationError)
        are wrapped as well. Inspect ``failures`` or ``__cause__`` for them.
    """
    if not references:
        return []

    logger.debug(f"Resolving {len(references)} dependencies of {issuer or '<unit>'}")
    results = await asyncio.gather(
        *[loader.resolve(reference, issuer=issuer) for reference in references],
        return_exceptions=True,
    )

    failures = [(reference, result) for reference, result in zip(references, results, strict=True) if isinstance(result, BaseException)]
    if failures:
        raise DependencyResolutionError(failures, total=len(references)) from failures[0][1]
    return [cast(ResolvedUnit, result).documents for result in results]


__all__ = ["resolve_dependencies"]
