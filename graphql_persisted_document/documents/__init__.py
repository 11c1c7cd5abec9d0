"""GraphQL document processing for persisted operations.

Extracts documents from compiled units, merges definitions across a unit's
dependency graph, separates one closed document per operation, normalizes
``__typename`` selections, and derives stable document identifiers.
"""

from ._types import DocumentId, MergedDefinitions, OperationName, PersistedOperation
from .aggregation import aggregate_documents, merge_definitions, merged_document
from .extraction import ExtractedUnit, document_from_dict, extract_unit
from .separation import separate_operations
from .signature import Signer, operation_hash, operation_registry_signature, sign_operation
from .typename import add_typename_fields

__all__ = [
    "DocumentId",
    "ExtractedUnit",
    "MergedDefinitions",
    "OperationName",
    "PersistedOperation",
    "Signer",
    "add_typename_fields",
    "aggregate_documents",
    "document_from_dict",
    "extract_unit",
    "merge_definitions",
    "merged_document",
    "operation_hash",
    "operation_registry_signature",
    "separate_operations",
    "sign_operation",
]
