"""Host-side loading of compiled units.

Provides the UnitLoader protocol the core resolves dependencies through, the
single-unit processing pipeline, and BuildSession, a loader that builds units
from a UnitSource on demand.
"""

from .pipeline import process_unit
from .protocol import ProcessedUnit, ResolvedUnit, UnitLoader
from .resolver import resolve_dependencies
from .rewriter import document_id_statement, rewrite_source
from .session import BuildSession
from .sources import LocalUnitSource, MemoryUnitSource, UnitSource

__all__ = [
    "BuildSession",
    "LocalUnitSource",
    "MemoryUnitSource",
    "ProcessedUnit",
    "ResolvedUnit",
    "UnitLoader",
    "UnitSource",
    "document_id_statement",
    "process_unit",
    "resolve_dependencies",
    "rewrite_source",
]
