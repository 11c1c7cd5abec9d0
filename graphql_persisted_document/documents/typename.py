"""``__typename`` injection for operation documents."""

from copy import copy
from typing import Any

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    NameNode,
    OperationDefinitionNode,
    SelectionSetNode,
    Visitor,
    visit,
)

TYPENAME = "__typename"

_OWNERS_OF_TYPENAME = (FieldNode, FragmentDefinitionNode, OperationDefinitionNode)


def _is_typename_field(selection: Any) -> bool:
    return isinstance(selection, FieldNode) and selection.name.value == TYPENAME


def typename_field() -> FieldNode:
    """A fresh ``__typename`` field selection."""
    return FieldNode(name=NameNode(value=TYPENAME), arguments=(), directives=())


class TypenameVisitor(Visitor):
    """Strips every ``__typename`` selection, then prepends exactly one where owned.

    Stripping happens on entering each selection set; prepending happens on
    leaving fields, fragment definitions and operations that own a selection
    set. Inline fragments lose their own ``__typename`` and rely on the
    enclosing field's.
    """

    def enter_selection_set(self, node: SelectionSetNode, *_args: Any) -> SelectionSetNode | None:
        selections = [selection for selection in node.selections if not _is_typename_field(selection)]
        if len(selections) == len(node.selections):
            return None
        stripped = copy(node)
        stripped.selections = tuple(selections)
        return stripped

    def leave(self, node: Any, *_args: Any) -> Any:
        if not isinstance(node, _OWNERS_OF_TYPENAME) or node.selection_set is None:
            return None
        selection_set = copy(node.selection_set)
        selection_set.selections = (typename_field(), *node.selection_set.selections)
        edited = copy(node)
        edited.selection_set = selection_set
        return edited


def add_typename_fields(document: DocumentNode) -> DocumentNode:
    """Return a copy of ``document`` with one leading ``__typename`` per selection set.

    Idempotent: selections already named ``__typename`` are removed before the
    canonical one is inserted, so applying this twice changes nothing further.
    Unchanged subtrees are shared with the input.

    Example:
        >>> print(print_ast(add_typename_fields(parse("query Q { user { id } }"))))
        query Q {
          __typename
          user {
            __typename
            id
          }
        }

    Note:
        Aliased ``__typename`` selections (``kind: __typename``) are dropped
        too; only the unaliased leading field remains.
    """
    return visit(document, TypenameVisitor())


__all__ = ["TYPENAME", "TypenameVisitor", "add_typename_fields", "typename_field"]
