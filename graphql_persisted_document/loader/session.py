"""Build session: the host loader for a set of compiled units.

A BuildSession reads units from a UnitSource and processes each one at most
once per session. Dependencies are built on demand when another unit requires
them, so diamond-shaped graphs share the work. The per-session task cache is
the only state shared between units.
"""

import asyncio

from graphql_persisted_document.documents.signature import Signer, operation_registry_signature
from graphql_persisted_document.exceptions import DependencyCycleError
from graphql_persisted_document.logging import get_logger
from graphql_persisted_document.options import LoaderOptions

from .pipeline import process_unit
from .protocol import ProcessedUnit, ResolvedUnit
from .sources import UnitSource

logger = get_logger(__name__)


class BuildSession:
    """UnitLoader that builds units from a UnitSource, caching them per session.

    Example:
        >>> session = BuildSession(LocalUnitSource(Path("build/graphql")))
        >>> unit = await session.build("queries/user.graphql")
        >>> unit.document_ids
        {'GetUser': '5f1e...'}
    """

    def __init__(
        self,
        source: UnitSource,
        options: LoaderOptions | None = None,
        *,
        signer: Signer = operation_registry_signature,
    ) -> None:
        self._source = source
        self._options = options or LoaderOptions()
        self._signer = signer
        self._units: dict[str, asyncio.Task[ProcessedUnit]] = {}
        self._waiting: dict[str, set[str]] = {}  # issuer -> paths it is awaiting

    @property
    def options(self) -> LoaderOptions:
        return self._options

    async def build(self, reference: str) -> ProcessedUnit:
        """Build the unit ``reference`` names, relative to the source root."""
        path = await self._source.locate(reference)
        return await self._unit_task(path)

    async def resolve(self, reference: str, *, issuer: str | None = None) -> ResolvedUnit:
        """Resolve a dependency of ``issuer`` to its aggregate documents.

        Raises:
            UnitNotFoundError: If the reference names no unit.
            DependencyCycleError: If awaiting the unit would wait on ``issuer`` itself.
        """
        path = await self._source.locate(reference, issuer)
        if issuer is None:
            unit = await self._unit_task(path)
            return unit.to_resolved()

        if cycle := self._find_cycle(issuer, path):
            raise DependencyCycleError(cycle)

        task = self._unit_task(path)
        waiting = self._waiting.setdefault(issuer, set())
        waiting.add(path)
        try:
            unit = await task
        finally:
            waiting.discard(path)
        return unit.to_resolved()

    def _unit_task(self, path: str) -> asyncio.Task[ProcessedUnit]:
        task = self._units.get(path)
        if task is None:
            logger.debug(f"Building {path}")
            task = asyncio.create_task(self._process(path))
            self._units[path] = task
        return task

    async def _process(self, path: str) -> ProcessedUnit:
        source = await self._source.read(path)
        return await process_unit(source, loader=self, options=self._options, path=path, signer=self._signer)

    def _find_cycle(self, issuer: str, path: str) -> list[str] | None:
        """Return the wait chain from ``issuer`` back to itself through ``path``, if any."""
        stack = [(path, [issuer, path])]
        seen: set[str] = set()
        while stack:
            current, chain = stack.pop()
            if current == issuer:
                return chain
            if current in seen:
                continue
            seen.add(current)
            for awaited in self._waiting.get(current, ()):
                stack.append((awaited, [*chain, awaited]))
        return None


__all__ = ["BuildSession"]
