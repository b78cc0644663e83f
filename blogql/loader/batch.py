""" Batched loader: solves the N+1 problem for graph edges

The N+1 Problem
===============

A query like this:

    query {
        posts { title author { name } }
    }

resolves `author` once for every post. Done naively, that's one query for the posts, and N more queries
for authors: one per post.

The Solution
============

`BatchedLoader.load()` does not fetch anything right away. Requests are grouped by the set of columns they need:
the column set is computed from the selection. Every group is a strawberry `DataLoader`: it queues ids,
and once every sibling resolver has had a chance to queue its own, fetches all of them with exactly one query.

Results are cached for the lifetime of the loader, which is one request: never keep a loader around for longer than that!

    loaders = Loaders(stores)  # once per request
    author = await loaders.users.load(post['author_id'], selection)
"""

from __future__ import annotations

import asyncio
from collections import abc
from functools import partial
from typing import Any, Optional

from strawberry.dataloader import DataLoader

from blogql.projection import ProjectionOptions, DEFAULT_OPTIONS
from blogql.selection import SelectionTree
from blogql.store import Store
from blogql.typing import ColumnSet, EntityId, RowDict

from .key import LoadKey


class BatchedLoader:
    """ Loader for one-to-one edges: entity by key

    Every column set gets its own DataLoader: ids requested with the same columns are batched together,
    ids requested with different columns never share a query or a cache entry.

    Example:
        users = BatchedLoader(stores.users, options=ProjectionOptions(keep={'id'}))
        user = await users.load(1, SelectionTree.from_list(['name']))
    """

    def __init__(self, store: Store, *, key: str = 'id', options: ProjectionOptions = None):
        """ Prepare a loader

        Args:
            store: The store to fetch rows from
            key: The column to match ids against. Always fetched.
            options: Default projection options for every load()
        """
        self.store = store
        self.key = key
        self.options = options or DEFAULT_OPTIONS

        # Batch groups: column set => DataLoader that fetches these columns
        self._groups: dict[ColumnSet, DataLoader] = {}

    def load(self, id: EntityId, selection: Optional[SelectionTree], options: ProjectionOptions = None) -> abc.Awaitable[Any]:
        """ Load an entity by id, with the columns the selection needs

        Must be called with the event loop running: i.e. from a resolver.

        Args:
            id: The value of the key column
            selection: The selection at the field being resolved
            options: Projection options, layered over the loader's

        Returns:
            Awaitable: the row, or None if not found
        """
        key = self.make_key(id, selection, options)

        # Awaiting callers may get cancelled; other callers wait for the same future
        return asyncio.shield(self.group(key.columns).load(key.id))

    def load_many(self, ids: abc.Iterable[EntityId], selection: Optional[SelectionTree], options: ProjectionOptions = None) -> abc.Awaitable[list[Any]]:
        """ Load many entities by id. Results come in the order of `ids`

        Returns:
            Awaitable: list of rows, None for those not found
        """
        return asyncio.gather(*(
            self.load(id, selection, options)
            for id in ids
        ))

    def make_key(self, id: EntityId, selection: Optional[SelectionTree], options: ProjectionOptions = None) -> LoadKey:
        """ Make a key for the id: resolve the column set """
        return LoadKey.resolve(id, selection, self.options.merge(options))

    def group(self, columns: ColumnSet) -> DataLoader:
        """ Get the DataLoader for a column set """
        loader = self._groups.get(columns)
        if loader is None:
            loader = self._groups[columns] = DataLoader(load_fn=partial(self._load_group, columns))
        return loader

    def clear(self, id: EntityId, selection: Optional[SelectionTree], options: ProjectionOptions = None):
        """ Forget a cached result. The next load() will fetch it again """
        key = self.make_key(id, selection, options)
        if key.columns in self._groups:
            self._groups[key.columns].clear(key.id)

    def clear_all(self):
        """ Forget all cached results """
        for loader in self._groups.values():
            loader.clear_all()

    async def _load_group(self, columns: ColumnSet, ids: list[EntityId]) -> list[Any]:
        # One fetch for the whole group. Results in the order of `ids`
        try:
            rows = await self.fetch(ids, columns)
        except Exception:
            # Every slot of the group fails. Failures are not cached: the next load() fetches again
            self._groups[columns].clear_many(ids)
            raise

        index = self.index_rows([self.deliver(row, columns) for row in rows], rows)
        return [index.get(id, self.missing_value()) for id in ids]

    # ### Hooks for subclasses

    def fetch_columns(self, columns: ColumnSet) -> list[str]:
        """ Columns to actually fetch: the key column is always needed to match rows with ids """
        return [*columns, self.key] if self.key not in columns else list(columns)

    async def fetch(self, ids: list[EntityId], columns: ColumnSet) -> list[RowDict]:
        """ Fetch rows for a group: one call to the store """
        return await self.store.find_all(
            filter={self.key: ids},
            columns=self.fetch_columns(columns),
        )

    def deliver(self, row: RowDict, columns: ColumnSet) -> RowDict:
        """ Give the caller only the columns of its projection: the key column goes away unless it was projected """
        if self.key in columns:
            return row
        return {name: value for name, value in row.items() if name != self.key}

    def index_rows(self, delivered: list[RowDict], fetched: list[RowDict]) -> dict[EntityId, Any]:
        """ Map delivered rows to ids. `fetched` has the key column """
        return {row[self.key]: result for result, row in zip(delivered, fetched)}

    def missing_value(self) -> Any:
        """ The result for ids that have no rows """
        return None


class BatchedManyLoader(BatchedLoader):
    """ Loader for one-to-many edges: list of entities by a foreign key

    Example:
        comments_by_post = BatchedManyLoader(stores.comments, key='post_id')
        comments = await comments_by_post.load(post['id'], selection)
    """

    def index_rows(self, delivered: list[RowDict], fetched: list[RowDict]) -> dict[EntityId, list[RowDict]]:
        # Rows stay in store order within every list
        index: dict[EntityId, list[RowDict]] = {}
        for result, row in zip(delivered, fetched):
            index.setdefault(row[self.key], []).append(result)
        return index

    def missing_value(self) -> list:
        return []
