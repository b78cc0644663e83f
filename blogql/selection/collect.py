""" Build a Selection Tree from the GraphQL query """

from __future__ import annotations

from collections import abc, defaultdict
from typing import Any, Optional, Union

import graphql
from graphql.execution.values import get_directive_values

from .tree import SelectionTree, Fragment


def selection_tree_from_info(info: graphql.GraphQLResolveInfo, runtime_type: Union[str, graphql.GraphQLObjectType] = None) -> SelectionTree:
    """ Shortcut: selection_tree() when used in a resolve function

    Example:
        def resolve_post_author(post, info):
            selection = selection_tree_from_info(info)

    Args:
        info: The `info` object from your field resolver function
        runtime_type: The name/object of the current object type.
            Default: the named type the field returns.
            Provide it when the field returns an interface or a union and you know the concrete type.
    """
    if runtime_type is None:
        runtime_type = graphql.get_named_type(info.return_type)

    return selection_tree(
        info.schema,
        info.fragments,
        info.variable_values,
        [field_node.selection_set for field_node in info.field_nodes if field_node.selection_set],
        type_name=runtime_type,
    )


def selection_tree(
        schema: graphql.GraphQLSchema,
        fragments: abc.Mapping[str, graphql.FragmentDefinitionNode],
        variable_values: abc.Mapping[str, Any],
        selection_sets: abc.Iterable[graphql.SelectionSetNode], *,
        type_name: Union[str, graphql.GraphQLNamedType, None] = None) -> SelectionTree:
    """ Get the tree of selected fields

    Supports:
    * fields
    * aliases: merged by the schema field name
    * nested selections: recursively
    * fragment spreads (`... fragmentName`)
    * inline fragments (`... on Droid { }`)
    * @skip and @include directives

    Fragments on the type in scope are merged into the current level.
    Fragments on other types become `Fragment`s: whether they apply is decided later, by the type of the object.

    Args:
        schema: The GraphQL schema we query against
        fragments:
            Fragments defined in the query. Used to resolve fragment spreads
            Typically: info.fragments
        variable_values: Values for the variables. Used to evaluate directives
            Typically: info.variable_values
        selection_sets: Selection sets to start traversing from. Multiple sets are merged.
            Typically: [info.field_nodes[0].selection_set]
        type_name: The name/object of the type in scope.

    Example:
        With a query like this:
            query {
                id
                object { id name }
                field(arg: "value")
            }
        this function would give:
            SelectionTree(type_name='Query', fields={'id', 'field'}, nested={'object': SelectionTree(...)})
    """

    # Resolve `type_name`
    if isinstance(type_name, graphql.GraphQLNamedType):
        type_name = type_name.name

    # Collect
    collector = SelectionCollector(schema, fragments, variable_values)
    collected = _Collected()
    for selection_set in selection_sets:
        collector.collect(selection_set, type_name, collected)

    # Build
    return collector.build(collected, type_name)


class SelectionCollector:
    """ Walks selection sets and collects fields, nested selections, and fragments """

    def __init__(self,
                 schema: graphql.GraphQLSchema,
                 fragments: abc.Mapping[str, graphql.FragmentDefinitionNode],
                 variable_values: abc.Mapping[str, Any]):
        self.schema = schema
        self.fragments = fragments
        self.variable_values = variable_values

    def collect(self, selection_set: graphql.SelectionSetNode, type_name: Optional[str], collected: _Collected, visited_fragment_names: set[str] = None):
        """ Collect fields from a selection set into `collected` (out) """
        assert isinstance(selection_set, graphql.SelectionSetNode)
        visited_fragment_names = set() if visited_fragment_names is None else visited_fragment_names

        for node in selection_set.selections:
            # Directives: @skip, @include
            if not self.should_include_node(node):
                continue

            # Field
            if isinstance(node, graphql.FieldNode):
                # NOTE: in case of an alias, we still use the actual field name, not the alias!
                name = node.name.value
                if node.selection_set:
                    collected.nested[name].append(node.selection_set)
                else:
                    collected.fields.add(name)
            # Inline fragment (`... on Droid { }`)
            elif isinstance(node, graphql.InlineFragmentNode):
                type_condition = node.type_condition.name.value if node.type_condition else None
                self._collect_fragment(node.selection_set, type_condition, type_name, collected, visited_fragment_names)
            # Fragment spread (`... fragmentName`)
            elif isinstance(node, graphql.FragmentSpreadNode):
                fragment_name = node.name.value
                if fragment_name in visited_fragment_names:
                    continue
                visited_fragment_names.add(fragment_name)

                fragment = self.fragments.get(fragment_name)
                if fragment is None:
                    # Let GraphQL fail for us
                    continue
                self._collect_fragment(fragment.selection_set, fragment.type_condition.name.value, type_name, collected, visited_fragment_names)
            # Something new
            else:
                raise NotImplementedError(str(type(node)))

    def _collect_fragment(self, selection_set: graphql.SelectionSetNode, type_condition: Optional[str], type_name: Optional[str], collected: _Collected, visited_fragment_names: set[str]):
        # Same type (or no condition): merge into the current level
        if type_condition is None or type_condition == type_name:
            self.collect(selection_set, type_name, collected, visited_fragment_names)
        # Other type: collect separately
        else:
            self.collect(selection_set, type_condition, collected.fragments[type_condition], visited_fragment_names)

    def build(self, collected: _Collected, type_name: Optional[str]) -> SelectionTree:
        """ Convert collected fields into a SelectionTree """
        return SelectionTree(
            type_name=type_name,
            fields=frozenset(collected.fields),
            nested={
                name: self._build_nested(type_name, name, selection_sets)
                for name, selection_sets in collected.nested.items()
            },
            fragments=tuple(
                Fragment(
                    type_condition=type_condition,
                    possible_types=self.possible_types(type_condition),
                    selection=self.build(fragment_collected, type_condition),
                )
                for type_condition, fragment_collected in collected.fragments.items()
            ),
        )

    def _build_nested(self, parent_type_name: Optional[str], field_name: str, selection_sets: list[graphql.SelectionSetNode]) -> SelectionTree:
        type_name = self.field_type_name(parent_type_name, field_name)

        collected = _Collected()
        for selection_set in selection_sets:
            self.collect(selection_set, type_name, collected)
        return self.build(collected, type_name)

    def field_type_name(self, parent_type_name: Optional[str], field_name: str) -> Optional[str]:
        """ Get the name of the type a field returns, unwrapped. None if unknown """
        parent_type = self.schema.type_map.get(parent_type_name) if parent_type_name else None
        if not isinstance(parent_type, (graphql.GraphQLObjectType, graphql.GraphQLInterfaceType)):
            return None

        try:
            field_def = parent_type.fields[field_name]
        except KeyError:
            # It fails when the user gives a bad field name.
            # We will not fail. Let GraphQL fail for us.
            return None

        return graphql.get_named_type(field_def.type).name

    def possible_types(self, type_condition: str) -> frozenset[str]:
        """ Get the names of concrete object types a fragment on `type_condition` applies to """
        condition_type = self.schema.type_map.get(type_condition)
        if graphql.is_abstract_type(condition_type):
            return frozenset(
                object_type.name
                for object_type in self.schema.get_possible_types(condition_type)  # type: ignore[arg-type]
            )
        else:
            return frozenset((type_condition,))

    def should_include_node(self, node: Union[graphql.FieldNode, graphql.FragmentSpreadNode, graphql.InlineFragmentNode]) -> bool:
        """ Evaluate @skip and @include directives """
        skip = get_directive_values(graphql.GraphQLSkipDirective, node, self.variable_values)
        if skip and skip['if'] is True:
            return False

        include = get_directive_values(graphql.GraphQLIncludeDirective, node, self.variable_values)
        if include and include['if'] is False:
            return False

        return True


class _Collected:
    """ Fields collected at one level, before they become a SelectionTree """
    __slots__ = 'fields', 'nested', 'fragments'

    def __init__(self):
        # Leaf field names
        self.fields: set[str] = set()
        # Nested field name => selection sets (many, if aliased)
        self.nested: dict[str, list[graphql.SelectionSetNode]] = defaultdict(list)
        # Type condition => fields collected in fragments on it
        self.fragments: dict[str, _Collected] = defaultdict(_Collected)
