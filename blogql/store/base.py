""" Backing store: the persistence engine, as loaders and resolvers see it """

from __future__ import annotations

from collections import abc
from typing import Any, AsyncContextManager, Optional

from blogql.typing import EntityId, RowDict


class Store:
    """ Store base

    Base for classes that implement:
    * Fetch rows by id or by filter, with a given set of columns
    * Create, update, destroy rows under a transaction

    All methods are asynchronous. Nothing is retried: the caller decides.
    Rows are dicts.
    """
    # Name of the entity, for error messages
    name: str

    # Name of the identifier column
    primary_key: str = 'id'

    def transaction(self) -> AsyncContextManager[Any]:
        """ Begin a transaction. Yields the connection to pass to create(), update(), destroy()

        Example:
            async with store.transaction() as connection:
                await store.create({...}, connection=connection)
        """
        raise NotImplementedError

    async def find_by_id(self, id: EntityId, columns: abc.Iterable[str], *, connection: Any = None) -> Optional[RowDict]:
        """ Fetch one row by id, or None """
        raise NotImplementedError

    async def find_all(self, *,
                       filter: abc.Mapping[str, Any] = None,
                       columns: abc.Iterable[str],
                       limit: Optional[int] = None,
                       offset: Optional[int] = None,
                       connection: Any = None) -> list[RowDict]:
        """ Fetch many rows, ordered by primary key

        Args:
            filter: { column => value }. A list value means "any of": IN
            columns: Columns to fetch
            limit: Max number of rows
            offset: Rows to skip
        """
        raise NotImplementedError

    async def create(self, values: abc.Mapping[str, Any], *, connection: Any) -> RowDict:
        """ Insert a row, return it with all columns """
        raise NotImplementedError

    async def update(self, id: EntityId, values: abc.Mapping[str, Any], *, connection: Any) -> Optional[RowDict]:
        """ Update a row, return it with all columns. None if not found """
        raise NotImplementedError

    async def destroy(self, id: EntityId, *, connection: Any) -> bool:
        """ Delete a row. Tell whether it existed """
        raise NotImplementedError
