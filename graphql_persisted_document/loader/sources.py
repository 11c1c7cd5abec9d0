"""Unit sources: where a BuildSession reads compiled units from.

References are POSIX-style paths. A reference is resolved against the
directory of the unit requiring it, or against the source root when there is
no requiring unit or the reference starts with ``/``. A reference naming a
missing file falls back to the same path with ``.py`` appended, since
compilers commonly emit ``query.graphql.py`` for ``query.graphql``.
"""

import asyncio
import posixpath
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from graphql_persisted_document.exceptions import UnitNotFoundError

UNIT_SUFFIX = ".py"


def join_reference(reference: str, issuer: str | None = None) -> str:
    """Normalize ``reference`` relative to the directory of ``issuer``.

    A reference starting with ``/`` is relative to the source root whatever
    the issuer.

    Raises:
        UnitNotFoundError: If the result escapes the source root.
    """
    base = "" if reference.startswith("/") or not issuer else posixpath.dirname(issuer)
    path = posixpath.normpath(posixpath.join(base, reference.lstrip("/")))
    if path == ".." or path.startswith("../"):
        raise UnitNotFoundError(reference, path)
    return path


def _candidates(path: str) -> tuple[str, ...]:
    if path.endswith(UNIT_SUFFIX):
        return (path,)
    return (path, path + UNIT_SUFFIX)


@runtime_checkable
class UnitSource(Protocol):
    """Protocol for compiled unit storage.

    Implementations: LocalUnitSource (filesystem), MemoryUnitSource (testing).
    """

    async def locate(self, reference: str, issuer: str | None = None) -> str:
        """Return the canonical path of the unit ``reference`` names.

        Raises:
            UnitNotFoundError: If no unit exists for the reference.
        """
        ...

    async def read(self, path: str) -> str:
        """Return the source text of a located unit."""
        ...


class LocalUnitSource:
    """Filesystem unit source rooted at a directory.

    Paths are returned relative to the root, POSIX-style.
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root = (root or Path.cwd()).resolve()

    @property
    def root(self) -> Path:
        return self._root

    async def locate(self, reference: str, issuer: str | None = None) -> str:
        path = join_reference(reference, issuer)

        def _find() -> str | None:
            for candidate in _candidates(path):
                if (self._root / candidate).is_file():
                    return candidate
            return None

        found = await asyncio.to_thread(_find)
        if found is None:
            raise UnitNotFoundError(reference, path)
        return found

    async def read(self, path: str) -> str:
        file_path = self._root / path
        try:
            return await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except FileNotFoundError:
            raise UnitNotFoundError(path) from None

    def relative_path(self, file_path: Path) -> str:
        """Path of a file under the root, in the form ``locate`` returns."""
        return file_path.resolve().relative_to(self._root).as_posix()


class MemoryUnitSource:
    """Dict-based unit source for unit tests.

    Keys are unit paths relative to an implicit root.
    """

    def __init__(self, units: Mapping[str, str] | None = None) -> None:
        self._units: dict[str, str] = {posixpath.normpath(path): source for path, source in (units or {}).items()}

    def add(self, path: str, source: str) -> None:
        """Register or replace a unit."""
        self._units[posixpath.normpath(path)] = source

    async def locate(self, reference: str, issuer: str | None = None) -> str:
        path = join_reference(reference, issuer)
        for candidate in _candidates(path):
            if candidate in self._units:
                return candidate
        raise UnitNotFoundError(reference, path)

    async def read(self, path: str) -> str:
        if path not in self._units:
            raise UnitNotFoundError(path)
        return self._units[path]


__all__ = ["LocalUnitSource", "MemoryUnitSource", "UnitSource", "join_reference"]
