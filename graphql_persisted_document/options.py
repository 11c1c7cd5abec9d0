"""Loader options for persisted document processing.

Options are read from keyword arguments, from a loader-style camelCase
mapping, or from environment variables with the ``GRAPHQL_PERSISTED_`` prefix.

Example:
    >>> LoaderOptions(add_typename=True)
    >>> LoaderOptions.from_mapping({"addTypename": True, "preserveStringAndNumericLiterals": False})
"""

import re
from collections.abc import Mapping
from typing import Any, Self

from pydantic_settings import BaseSettings, SettingsConfigDict

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class LoaderOptions(BaseSettings):
    """Options recognised by the persisted document loader.

    Attributes:
        add_typename: Insert a leading ``__typename`` into every selection set
            that can have sub-selections before signing.
        preserve_string_and_numeric_literals: Keep literal values verbatim in the
            signature instead of replacing them with ``""`` and ``0``.
    """

    model_config = SettingsConfigDict(env_prefix="GRAPHQL_PERSISTED_", frozen=True, extra="ignore")

    add_typename: bool = False
    preserve_string_and_numeric_literals: bool = False

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> Self:
        """Build options from a mapping with camelCase or snake_case keys."""
        if not values:
            return cls()
        return cls(**{_CAMEL_BOUNDARY.sub("_", key).lower(): value for key, value in values.items()})


__all__ = ["LoaderOptions"]
