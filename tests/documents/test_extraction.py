"""Tests for sandboxed extraction of compiled units."""

import pytest
from graphql import FieldNode, FragmentDefinitionNode, OperationDefinitionNode, OperationType

from graphql_persisted_document.documents.extraction import (
    ExtractedUnit,
    document_from_dict,
    empty_document_dict,
    extract_unit,
)
from graphql_persisted_document.exceptions import ExtractionError
from tests.support.helpers import compile_unit, definition_names, printed

HAND_WRITTEN_UNIT = '''
"""Generated from user.graphql."""
document = {
    "kind": "Document",
    "definitions": [
        {
            "kind": "OperationDefinition",
            "operation": "query",
            "name": {"kind": "Name", "value": "GetUser"},
            "variableDefinitions": [],
            "directives": [],
            "selectionSet": {
                "kind": "SelectionSet",
                "selections": [
                    {
                        "kind": "Field",
                        "name": {"kind": "Name", "value": "user"},
                        "arguments": [],
                        "directives": [],
                        "selectionSet": {
                            "kind": "SelectionSet",
                            "selections": [
                                {"kind": "FragmentSpread", "name": {"kind": "Name", "value": "UserFields"}, "directives": []}
                            ],
                        },
                    }
                ],
            },
        }
    ],
    "loc": {"start": 0, "end": 52},
}
document["definitions"] = document["definitions"] + require("./fragments.graphql")["definitions"]
exports = document
'''


class TestExtractUnit:
    def test_hand_written_unit(self):
        unit = extract_unit(HAND_WRITTEN_UNIT, filename="user.graphql.py")

        assert isinstance(unit, ExtractedUnit)
        assert unit.dependencies == ("./fragments.graphql",)
        (operation,) = unit.document.definitions
        assert isinstance(operation, OperationDefinitionNode)
        assert operation.operation is OperationType.QUERY
        assert operation.name.value == "GetUser"
        field = operation.selection_set.selections[0]
        assert isinstance(field, FieldNode)
        assert field.name.value == "user"

    def test_required_documents_are_empty_placeholders(self):
        """Definitions of required units never leak into the unit's own document."""
        source = compile_unit("fragment A on T { id }", requires=["./b.graphql", "./c.graphql"])
        unit = extract_unit(source)

        assert definition_names(unit.document) == ["A"]
        assert unit.dependencies == ("./b.graphql", "./c.graphql")

    def test_dependencies_are_distinct_in_encounter_order(self):
        source = compile_unit("fragment A on T { id }", requires=["./c.graphql", "./b.graphql", "./c.graphql"])
        assert extract_unit(source).dependencies == ("./c.graphql", "./b.graphql")

    def test_unit_without_dependencies(self):
        unit = extract_unit(compile_unit("query Q { a }"))
        assert unit.dependencies == ()
        assert printed(unit.document) == "query Q {\n  a\n}"

    def test_round_trips_compiled_graphql(self):
        text = 'query Q($id: ID = "x", $n: Int = -1) @live { a(id: $id, n: 1.5, e: RED, l: [1, 2], o: {k: null}) { ... on T { b } } }'
        unit = extract_unit(compile_unit(text))
        assert printed(unit.document) == printed(extract_unit(compile_unit(printed(unit.document))).document)
        assert "-1" in printed(unit.document)
        assert '"x"' in printed(unit.document)

    def test_augmented_assignment(self):
        source = '\n'.join([
            'exports = {"kind": "Document", "definitions": []}',
            'exports["definitions"] += require("./a.graphql")["definitions"]',
        ])
        unit = extract_unit(source)
        assert unit.dependencies == ("./a.graphql",)
        assert unit.document.definitions == ()

    def test_bare_require_statement_is_recorded(self):
        source = 'require("./side.graphql")\nexports = {"kind": "Document", "definitions": []}\n'
        assert extract_unit(source).dependencies == ("./side.graphql",)

    def test_extra_export_keys_are_ignored(self):
        source = compile_unit("query Q { a }") + 'exports["Q"] = exports["definitions"][0]\n'
        unit = extract_unit(source)
        assert definition_names(unit.document) == ["Q"]

    def test_dependency_operations_reexported_by_unpacking(self):
        source = compile_unit("query Q { ...F }", requires=["./f.graphql"])
        unit = extract_unit(source)
        assert definition_names(unit.document) == ["Q"]
        assert unit.dependencies == ("./f.graphql",)

    def test_unit_with_attached_document_ids(self):
        source = compile_unit("query A { a } query B { b }") + "\n".join([
            'exports["A"]["documentId"] = "id-a"',
            'exports["B"]["documentId"] = "id-b"',
        ])
        assert definition_names(extract_unit(source).document) == ["A", "B"]


class TestExtractionErrors:
    @pytest.mark.parametrize(
        "source",
        [
            "import os\nexports = {}",
            'exports = open("/etc/passwd")',
            'exports = __import__("os")',
            "exports = {'kind': 'Document', 'definitions': [x for x in []]}",
            "exports = lambda: None",
            'require = 1\nexports = {"kind": "Document", "definitions": []}',
            "def f():\n    pass\nexports = {}",
            'exports = {"kind": "Document", "definitions": []}.copy()',
        ],
    )
    def test_constructs_outside_the_unit_subset_fail(self, source: str):
        with pytest.raises(ExtractionError):
            extract_unit(source)

    def test_syntax_error(self):
        with pytest.raises(ExtractionError) as exc_info:
            extract_unit("exports = {", filename="broken.py")
        assert "broken.py" in str(exc_info.value)
        assert exc_info.value.filename == "broken.py"

    def test_error_reports_line_number(self):
        with pytest.raises(ExtractionError) as exc_info:
            extract_unit('exports = {"kind": "Document", "definitions": []}\nmissing_name\n')
        assert exc_info.value.lineno == 2

    def test_missing_exports(self):
        with pytest.raises(ExtractionError, match="exports"):
            extract_unit('document = {"kind": "Document", "definitions": []}')

    def test_export_that_is_not_a_document(self):
        with pytest.raises(ExtractionError, match="not a GraphQL Document"):
            extract_unit('exports = {"kind": "Field"}')

    def test_unknown_node_kind(self):
        with pytest.raises(ExtractionError, match="Unknown AST node kind"):
            extract_unit('exports = {"kind": "Document", "definitions": [{"kind": "Bogus"}]}')

    def test_unpacking_a_non_dict(self):
        with pytest.raises(ExtractionError, match="Cannot unpack"):
            extract_unit('exports = {**[1], "kind": "Document", "definitions": []}')

    def test_definition_that_is_not_a_node(self):
        with pytest.raises(ExtractionError, match="not an AST node"):
            extract_unit('exports = {"kind": "Document", "definitions": ["query Q { a }"]}')

    def test_require_needs_string(self):
        with pytest.raises(ExtractionError, match="string reference"):
            extract_unit('require(42)\nexports = {"kind": "Document", "definitions": []}')

    def test_require_takes_one_argument(self):
        with pytest.raises(ExtractionError):
            extract_unit('require("./a", "./b")\nexports = {"kind": "Document", "definitions": []}')

    def test_invalid_operation_type(self):
        source = (
            'exports = {"kind": "Document", "definitions": [{"kind": "OperationDefinition", "operation": "fetch",'
            ' "selectionSet": {"kind": "SelectionSet", "selections": []}}]}'
        )
        with pytest.raises(ExtractionError):
            extract_unit(source)


class TestDocumentFromDict:
    def test_fragment_definition(self):
        document = document_from_dict({
            "kind": "Document",
            "definitions": [
                {
                    "kind": "FragmentDefinition",
                    "name": {"kind": "Name", "value": "F"},
                    "typeCondition": {"kind": "NamedType", "name": {"kind": "Name", "value": "User"}},
                    "directives": [],
                    "selectionSet": {"kind": "SelectionSet", "selections": []},
                }
            ],
        })
        (fragment,) = document.definitions
        assert isinstance(fragment, FragmentDefinitionNode)
        assert fragment.type_condition.name.value == "User"

    def test_placeholder_is_empty_document(self):
        assert document_from_dict(empty_document_dict()).definitions == ()

    def test_placeholders_are_independent(self):
        first = empty_document_dict()
        first["definitions"].append({"kind": "Name", "value": "x"})
        assert empty_document_dict()["definitions"] == []

    def test_rejects_non_document(self):
        with pytest.raises(ValueError):
            document_from_dict(["not", "a", "document"])
