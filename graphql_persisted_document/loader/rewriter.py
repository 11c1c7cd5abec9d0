"""Attach document ids to a unit's exported operations.

Each operation a unit exports is a Document dict bound to
``exports["<name>"]``; its id is stored on that value under ``documentId``.
"""

import json
from collections.abc import Mapping

from graphql_persisted_document.documents.extraction import EXPORTS_NAME

LINE_SEPARATOR = "\n"
DOCUMENT_ID_KEY = "documentId"


def document_id_statement(operation_name: str, document_id: str) -> str:
    """Statement binding ``document_id`` to the exported operation value."""
    return f"{EXPORTS_NAME}[{json.dumps(operation_name)}][{json.dumps(DOCUMENT_ID_KEY)}] = {json.dumps(document_id)}"


def rewrite_source(source: str, document_ids: Mapping[str, str]) -> str:
    """Append one document id statement per operation to ``source``.

    The original text is kept byte for byte; statements follow it in mapping
    order, each on its own line.
    """
    statements = [LINE_SEPARATOR + document_id_statement(name, document_id) for name, document_id in document_ids.items()]
    return source + "".join(statements)


__all__ = ["DOCUMENT_ID_KEY", "document_id_statement", "rewrite_source"]
