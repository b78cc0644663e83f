""" An in-memory Store: for testing loaders without a database """

from __future__ import annotations

import asyncio
from collections import abc
from contextlib import asynccontextmanager
from typing import Any, Optional

from blogql import exc
from blogql.store import Store
from blogql.typing import EntityId, RowDict


class MemoryStore(Store):
    """ A Store that keeps rows in a dict and records every fetch

    Example:
        store = MemoryStore('users', [dict(id=1, name='a'), dict(id=2, name='b')])
        ...
        assert store.calls == [((1, 2), ('id', 'name'))]
    """

    def __init__(self, name: str, rows: abc.Iterable[RowDict] = (), *, primary_key: str = 'id'):
        self.name = name
        self.primary_key = primary_key
        self.rows: dict[EntityId, RowDict] = {row[primary_key]: dict(row) for row in rows}

        # Every find_all() call: (filter values, columns)
        self.calls: list[tuple[Any, tuple[str, ...]]] = []

        # Set an exception to fail the next fetch with
        self.fail_with: Optional[BaseException] = None

    @asynccontextmanager
    async def transaction(self):
        yield None

    async def find_by_id(self, id: EntityId, columns: abc.Iterable[str], *, connection: Any = None) -> Optional[RowDict]:
        rows = await self.find_all(filter={self.primary_key: id}, columns=columns, limit=1)
        return rows[0] if rows else None

    async def find_all(self, *,
                       filter: abc.Mapping[str, Any] = None,
                       columns: abc.Iterable[str],
                       limit: Optional[int] = None,
                       offset: Optional[int] = None,
                       connection: Any = None) -> list[RowDict]:
        filter = filter or {}
        columns = tuple(columns)
        self.calls.append((_freeze_filter(filter), columns))

        # Suspend: like a real database would
        await asyncio.sleep(0)

        if self.fail_with is not None:
            e, self.fail_with = self.fail_with, None
            raise e

        # Rows come in primary key order, regardless of the order of requested values
        rows = [
            row
            for _, row in sorted(self.rows.items())
            if _matches(row, filter)
        ]
        rows = rows[offset or 0:]
        if limit is not None:
            rows = rows[:limit]

        return [self._project(row, columns) for row in rows]

    async def create(self, values: abc.Mapping[str, Any], *, connection: Any = None) -> RowDict:
        id = max(self.rows, default=0) + 1
        self.rows[id] = {self.primary_key: id, **values}
        return dict(self.rows[id])

    async def update(self, id: EntityId, values: abc.Mapping[str, Any], *, connection: Any = None) -> Optional[RowDict]:
        if id not in self.rows:
            return None
        self.rows[id].update(values)
        return dict(self.rows[id])

    async def destroy(self, id: EntityId, *, connection: Any = None) -> bool:
        return self.rows.pop(id, None) is not None

    def _project(self, row: RowDict, columns: tuple[str, ...]) -> RowDict:
        try:
            return {name: row[name] for name in columns}
        except KeyError as e:
            raise exc.InvalidColumnError(self.name, e.args[0], where='columns') from e


def _matches(row: RowDict, filter: abc.Mapping[str, Any]) -> bool:
    for name, value in filter.items():
        if isinstance(value, (list, tuple, set, frozenset)):
            if row.get(name) not in value:
                return False
        elif row.get(name) != value:
            return False
    return True


def _freeze_filter(filter: abc.Mapping[str, Any]):
    # A single-key filter gives just its values: that's what loaders use
    if len(filter) == 1:
        value, = filter.values()
        return tuple(value) if isinstance(value, (list, tuple)) else value
    return tuple(sorted(filter.items()))
