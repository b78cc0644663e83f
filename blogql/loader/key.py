from __future__ import annotations

import dataclasses
from typing import Optional

from blogql.projection import ProjectionOptions, resolve_projection
from blogql.selection import SelectionTree
from blogql.typing import ColumnSet, EntityId


@dataclasses.dataclass(frozen=True)
class LoadKey:
    """ A request to load an entity: id + the selection that produced it

    Two keys are the same iff both the id and the resolved column set match.
    The selection itself does not count: same fields requested via different aliases make the same key.

    Example:
        key = LoadKey.resolve(1, selection, ProjectionOptions(keep={'id'}))
    """
    id: EntityId
    columns: ColumnSet
    selection: Optional[SelectionTree] = dataclasses.field(default=None, compare=False, hash=False, repr=False)

    @classmethod
    def resolve(cls, id: EntityId, selection: Optional[SelectionTree], options: ProjectionOptions = None) -> LoadKey:
        """ Make a key: resolve the column set for the selection """
        return cls(id=id, columns=resolve_projection(selection, options), selection=selection)
