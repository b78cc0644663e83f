""" Backing store on SqlAlchemy: async core statements against a table """

from __future__ import annotations

from collections import abc
from contextlib import asynccontextmanager
from typing import Any, Optional

import sqlalchemy as sa
import sqlalchemy.exc
import sqlalchemy.ext.asyncio

from blogql import exc
from blogql.typing import EntityId, RowDict, SAConnection

from .base import Store


class SAStore(Store):
    """ Store for one SqlAlchemy table

    Example:
        engine = create_async_engine('sqlite+aiosqlite:///./blogql.db')
        posts = SAStore(models.posts, engine)
        rows = await posts.find_all(filter={'author_id': [1, 2]}, columns=['id', 'title'])
    """

    def __init__(self, table: sa.Table, engine: sa.ext.asyncio.AsyncEngine, *, primary_key: str = 'id'):
        self.table = table
        self.engine = engine
        self.name = table.name
        self.primary_key = primary_key

    @asynccontextmanager
    async def transaction(self):
        async with self.engine.begin() as connection:
            yield connection

    async def find_by_id(self, id: EntityId, columns: abc.Iterable[str], *, connection: SAConnection = None) -> Optional[RowDict]:
        rows = await self.find_all(filter={self.primary_key: id}, columns=columns, limit=1, connection=connection)
        return rows[0] if rows else None

    async def find_all(self, *,
                       filter: abc.Mapping[str, Any] = None,
                       columns: abc.Iterable[str],
                       limit: Optional[int] = None,
                       offset: Optional[int] = None,
                       connection: SAConnection = None) -> list[RowDict]:
        # SELECT needs at least one column
        columns = list(columns) or [self.primary_key]

        stmt = sa.select(*self.resolve_columns(columns, where='columns'))
        stmt = stmt.where(*self.filter_conditions(filter or {}))
        stmt = stmt.order_by(*self.table.primary_key.columns)

        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        async with self._connection(connection) as conn:
            res = await self._execute(conn, stmt)
            # We use `.mappings()` to convert a list of rows `list[RowMapping]` into a list of dicts `list[dict]`
            return [dict(row) for row in res.mappings()]

    async def create(self, values: abc.Mapping[str, Any], *, connection: SAConnection) -> RowDict:
        stmt = sa.insert(self.table).values(**self._check_values(values))
        res = await self._execute(connection, stmt)

        id = res.inserted_primary_key[0]
        return await self.find_by_id(id, self.table.columns.keys(), connection=connection)  # type: ignore[return-value]

    async def update(self, id: EntityId, values: abc.Mapping[str, Any], *, connection: SAConnection) -> Optional[RowDict]:
        stmt = (
            sa.update(self.table)
            .where(self.table.c[self.primary_key] == id)
            .values(**self._check_values(values))
        )
        res = await self._execute(connection, stmt)
        if res.rowcount == 0:
            return None

        return await self.find_by_id(id, self.table.columns.keys(), connection=connection)

    async def destroy(self, id: EntityId, *, connection: SAConnection) -> bool:
        stmt = sa.delete(self.table).where(self.table.c[self.primary_key] == id)
        res = await self._execute(connection, stmt)
        return res.rowcount > 0

    def resolve_columns(self, names: abc.Iterable[str], *, where: str) -> list[sa.Column]:
        """ Get columns by name

        Raises:
            exc.InvalidColumnError
        """
        try:
            return [self.table.c[name] for name in names]
        except KeyError as e:
            raise exc.InvalidColumnError(self.name, e.args[0], where=where) from e

    def filter_conditions(self, filter: abc.Mapping[str, Any]) -> abc.Iterator[sa.sql.ColumnElement]:
        """ Convert { column => value } into conditions. A list value becomes an IN """
        for name, value in filter.items():
            column, = self.resolve_columns((name,), where='filter')
            if isinstance(value, (list, tuple, set, frozenset)):
                yield column.in_(list(value))
            else:
                yield column == value

    def _check_values(self, values: abc.Mapping[str, Any]) -> dict[str, Any]:
        self.resolve_columns(values, where='values')
        return dict(values)

    @asynccontextmanager
    async def _connection(self, connection: Optional[SAConnection]):
        # Use the given connection (e.g. a transaction), or take one from the pool
        if connection is not None:
            yield connection
        else:
            async with self.engine.connect() as conn:
                yield conn

    async def _execute(self, connection: SAConnection, stmt: sa.sql.Executable):
        try:
            return await connection.execute(stmt)
        except sa.exc.SQLAlchemyError as e:
            raise exc.StoreError(f'{self.name}: {e}') from e
