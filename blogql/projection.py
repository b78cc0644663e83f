""" Projection: the minimal set of columns a selection needs """

from __future__ import annotations

import dataclasses
from collections import abc
from typing import Optional

from blogql.selection import SelectionTree, EMPTY_SELECTION
from blogql.typing import ColumnSet


@dataclasses.dataclass(frozen=True)
class ProjectionOptions:
    """ Per call site projection policy

    Example:
        ProjectionOptions(keep={'id'}, exclude={'posts'})
    """
    # Columns always included, regardless of the selection
    keep: frozenset[str] = frozenset()

    # Columns never included, even if selected or kept. Exclusion overrides everything
    exclude: frozenset[str] = frozenset()

    # Columns that a selected field needs: { field name => column names }
    # Use it with relations: selecting `author { }` needs the `author_id` foreign key
    requires: abc.Mapping[str, abc.Iterable[str]] = dataclasses.field(default_factory=dict)

    # Column-backed names. When given, leaf fields outside it are computed fields and are not fetched
    columns: Optional[frozenset[str]] = None

    def __post_init__(self):
        object.__setattr__(self, 'keep', frozenset(self.keep))
        object.__setattr__(self, 'exclude', frozenset(self.exclude))
        if self.columns is not None:
            object.__setattr__(self, 'columns', frozenset(self.columns))

    __hash__ = None  # type: ignore[assignment]

    def merge(self, other: Optional[ProjectionOptions]) -> ProjectionOptions:
        """ Combine two option sets: `other` adds to this one """
        if other is None:
            return self

        return ProjectionOptions(
            keep=self.keep | other.keep,
            exclude=self.exclude | other.exclude,
            requires={**self.requires, **other.requires},
            columns=other.columns if other.columns is not None else self.columns,
        )


# No policy at all: just the selection
DEFAULT_OPTIONS = ProjectionOptions()


def resolve_projection(selection: Optional[SelectionTree], options: ProjectionOptions = None) -> ColumnSet:
    """ Get the columns to fetch to satisfy the selection

    1. Leaf fields of the selection, including those of fragments applicable to its type.
       Nested fields are relations resolved by loaders: they never become columns.
    2. Columns `requires`-d by any selected field
    3. `keep` columns, unconditionally
    4. minus `exclude` columns: exclusion always wins

    An empty selection gives just the `keep` columns. Never fails.

    Returns:
        Sorted tuple of column names: the canonical form, usable as a key
    """
    options = options or DEFAULT_OPTIONS
    selection = selection or EMPTY_SELECTION

    # Leaf fields
    names = selection.leaf_fields_for()
    columns = {
        name
        for name in names
        if not _is_introspection_field(name)
        and (options.columns is None or name in options.columns)
    }

    # Required by fields: both leaves and relations
    if options.requires:
        for name in selection.names_for():
            columns.update(options.requires.get(name, ()))

    # Keep, exclude
    columns |= options.keep
    columns -= options.exclude

    # Canonicalize
    return tuple(sorted(columns))


def _is_introspection_field(name: str) -> bool:
    # `__typename` and friends are answered by GraphQL itself
    return name.startswith('__')
