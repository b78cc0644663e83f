""" Selection Tree: the fields a GraphQL query has selected at one object """

from __future__ import annotations

from collections import abc
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Optional, Union


@dataclass(frozen=True)
class SelectionTree:
    """ The shape of a query as seen at one field

    Immutable once built. Compared by value; not hashable because of `nested`.

    Example:
        Query: '{ post(id: 1) { id title author { name } } }'
        At the `post` field:
            SelectionTree(
                type_name='Post',
                fields=frozenset({'id', 'title'}),
                nested={'author': SelectionTree(type_name='User', fields=frozenset({'name'}))},
            )
    """
    # The resolved type name in scope. Used to interpret type-conditional fragments
    type_name: Optional[str] = None

    # Leaf fields: scalars on the current type. Schema names, not aliases
    fields: frozenset[str] = frozenset()

    # Nested selections: relation name => its own tree
    nested: abc.Mapping[str, SelectionTree] = field(default_factory=dict)

    # Type-conditional fragments: `... on Droid { }` for types other than `type_name`
    fragments: tuple[Fragment, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'fields', frozenset(self.fields))
        object.__setattr__(self, 'nested', MappingProxyType(dict(self.nested)))
        object.__setattr__(self, 'fragments', tuple(self.fragments))

    __hash__ = None  # type: ignore[assignment]

    @cached_property
    def names(self) -> frozenset[str]:
        """ Get the set of selected field and relation names at this level (fragments not included) """
        return self.fields | frozenset(self.nested)

    def __contains__(self, name: str):
        return name in self.names

    def __bool__(self):
        return bool(self.fields or self.nested or self.fragments)

    def get(self, name: str) -> Optional[SelectionTree]:
        """ Get the tree of a nested selection, if selected """
        return self.nested.get(name)

    def applicable_fragments(self, type_name: Optional[str] = None) -> abc.Iterator[Fragment]:
        """ Iterate the fragments that apply to the type. Default: the type in scope """
        type_name = type_name or self.type_name
        return (
            fragment
            for fragment in self.fragments
            if fragment.applies_to(type_name)
        )

    def leaf_fields_for(self, type_name: Optional[str] = None) -> frozenset[str]:
        """ Get leaf fields merged with those of every applicable fragment """
        names = set(self.fields)
        for fragment in self.applicable_fragments(type_name):
            names.update(fragment.selection.leaf_fields_for(type_name or self.type_name))
        return frozenset(names)

    def names_for(self, type_name: Optional[str] = None) -> frozenset[str]:
        """ Get leaf and nested names merged with those of every applicable fragment """
        names = set(self.names)
        for fragment in self.applicable_fragments(type_name):
            names.update(fragment.selection.names_for(type_name or self.type_name))
        return frozenset(names)

    @classmethod
    def from_list(cls, selection: abc.Iterable[Union[str, dict]], type_name: str = None) -> SelectionTree:
        """ Build a tree from the nested-list notation

        Example:
            SelectionTree.from_list(['id', 'title', {'author': ['id', 'name']}], 'Post')
        """
        fields = set()
        nested = {}
        for item in selection:
            if isinstance(item, str):
                fields.add(item)
            elif isinstance(item, dict):
                for name, sub_selection in item.items():
                    nested[name] = cls.from_list(sub_selection)
            else:
                raise NotImplementedError(type(item))

        return cls(type_name=type_name, fields=frozenset(fields), nested=nested)


@dataclass(frozen=True)
class Fragment:
    """ A type-conditional fragment: `... on Droid { }` or `...fragmentName` """
    # The type name the fragment is declared on
    type_condition: str

    # Concrete object types the fragment applies to. For object types, that's just the type itself
    possible_types: frozenset[str]

    # Fields selected within the fragment
    selection: SelectionTree

    __hash__ = None  # type: ignore[assignment]

    def applies_to(self, type_name: Optional[str]) -> bool:
        if type_name is None:
            return False
        return type_name == self.type_condition or type_name in self.possible_types


# An empty selection: nothing requested
EMPTY_SELECTION = SelectionTree()
