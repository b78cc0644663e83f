from collections import abc
from typing import Any, Union

import sqlalchemy as sa
import sqlalchemy.ext.asyncio


# Identifier of an entity: primary key or foreign key value
EntityId = Union[int, str]

# Annotation for dict rows (result rows returned as dicts)
RowDict = dict

# Canonical, sorted set of column names. Hashable: used as a group & cache key
ColumnSet = tuple[str, ...]

# A graphql-core field resolver: (obj, info, **args) -> value or awaitable
Resolver = abc.Callable[..., Any]

# A higher-order function that wraps a resolver
ResolverDecorator = abc.Callable[[Resolver], Resolver]

# An SqlAlchemy async connection
SAConnection = sa.ext.asyncio.AsyncConnection
