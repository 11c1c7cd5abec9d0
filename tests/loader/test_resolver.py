"""Tests for concurrent dependency resolution."""

import asyncio

import pytest

from graphql_persisted_document.exceptions import DependencyResolutionError, ExtractionError, UnitNotFoundError
from graphql_persisted_document.loader import ResolvedUnit, UnitLoader, resolve_dependencies
from tests.support.helpers import definition_names, resolved


class FakeLoader:
    """Loader returning canned units after per-reference delays."""

    def __init__(self, units: dict[str, ResolvedUnit], delays: dict[str, float] | None = None):
        self.units = units
        self.delays = delays or {}
        self.calls: list[tuple[str, str | None]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def resolve(self, reference: str, *, issuer: str | None = None) -> ResolvedUnit:
        self.calls.append((reference, issuer))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(reference, 0))
            if reference not in self.units:
                raise UnitNotFoundError(reference)
            return self.units[reference]
        finally:
            self.in_flight -= 1


class TestResolveDependencies:
    def test_fake_loader_satisfies_protocol(self):
        assert isinstance(FakeLoader({}), UnitLoader)

    async def test_no_references(self):
        loader = FakeLoader({})

        assert await resolve_dependencies([], loader) == []
        assert loader.calls == []

    async def test_results_in_reference_order(self):
        loader = FakeLoader(
            {
                "./slow.graphql": resolved("fragment Slow on T { a }"),
                "./fast.graphql": resolved("fragment Fast on T { b }", "fragment Nested on T { c }"),
            },
            delays={"./slow.graphql": 0.05, "./fast.graphql": 0},
        )

        results = await resolve_dependencies(["./slow.graphql", "./fast.graphql"], loader)

        assert [[definition_names(document)[0] for document in documents] for documents in results] == [["Slow"], ["Fast", "Nested"]]

    async def test_requests_run_concurrently(self):
        units = {f"./u{i}.graphql": resolved(f"fragment F{i} on T {{ a }}") for i in range(3)}
        loader = FakeLoader(units, delays=dict.fromkeys(units, 0.02))

        await resolve_dependencies(list(units), loader)

        assert loader.max_in_flight == 3

    async def test_issuer_forwarded(self):
        loader = FakeLoader({"./a.graphql": resolved("fragment A on T { a }")})

        await resolve_dependencies(["./a.graphql"], loader, issuer="queries/user.graphql.py")

        assert loader.calls == [("./a.graphql", "queries/user.graphql.py")]

    async def test_single_failure_fails_whole_resolution(self):
        loader = FakeLoader(
            {"./a.graphql": resolved("fragment A on T { a }"), "./c.graphql": resolved("fragment C on T { c }")},
            delays={"./a.graphql": 0.02, "./c.graphql": 0.02},
        )

        with pytest.raises(DependencyResolutionError, match="1/3") as exc_info:
            await resolve_dependencies(["./a.graphql", "./missing.graphql", "./c.graphql"], loader)

        error = exc_info.value
        assert [reference for reference, _ in error.failures] == ["./missing.graphql"]
        assert isinstance(error.failures[0][1], UnitNotFoundError)
        assert error.__cause__ is error.failures[0][1]
        # Remaining requests still ran to completion
        assert len(loader.calls) == 3
        assert loader.in_flight == 0

    async def test_every_failure_reported(self):
        loader = FakeLoader({})

        with pytest.raises(DependencyResolutionError) as exc_info:
            await resolve_dependencies(["./x.graphql", "./y.graphql"], loader)

        assert [reference for reference, _ in exc_info.value.failures] == ["./x.graphql", "./y.graphql"]
        assert "./x.graphql: UnitNotFoundError" in str(exc_info.value)

    async def test_typed_errors_are_wrapped(self):
        class FailingLoader:
            async def resolve(self, reference: str, *, issuer: str | None = None) -> ResolvedUnit:
                raise ExtractionError("bad unit", filename=reference)

        with pytest.raises(DependencyResolutionError) as exc_info:
            await resolve_dependencies(["./bad.graphql"], FailingLoader())

        assert isinstance(exc_info.value.__cause__, ExtractionError)
        assert isinstance(exc_info.value.failures[0][1], ExtractionError)
