""" Resolver helpers: error handling, pagination """

from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

import graphql

from blogql import exc
from blogql.context import AuthUser, ResolverContext
from blogql.projection import ProjectionOptions, resolve_projection
from blogql.selection import selection_tree_from_info
from blogql.typing import ColumnSet, Resolver


logger = logging.getLogger(__name__)

# Errors the user has caused. Not system faults
USER_ERRORS = (exc.AuthorizationError, exc.NotFoundError)


def handles_errors(resolver: Resolver) -> Resolver:
    """ Decorator for async resolvers: log errors, re-raise them

    GraphQL puts the error into the response; sibling fields are still resolved.
    """
    @wraps(resolver)
    async def wrapper(obj, info: graphql.GraphQLResolveInfo, **kwargs):
        try:
            return await resolver(obj, info, **kwargs)
        except USER_ERRORS as e:
            logger.debug('%s.%s: %s', info.parent_type.name, info.field_name, e)
            raise
        except Exception:
            logger.exception('%s.%s failed', info.parent_type.name, info.field_name)
            raise
    return wrapper


def projection_for(info: graphql.GraphQLResolveInfo, options: ProjectionOptions) -> ColumnSet:
    """ Get the columns the current field needs """
    return resolve_projection(selection_tree_from_info(info), options)


def require_user(context: ResolverContext) -> AuthUser:
    """ Get the authenticated user, or fail """
    if context.auth_user is None:
        raise exc.AuthorizationError()
    return context.auth_user


def paginate(rows: list, context: ResolverContext, first: Optional[int], offset: Optional[int]) -> list:
    """ Slice a list of loaded rows like `first` and `offset` say """
    first = context.settings.get_final_first(first)
    offset = offset or 0
    return rows[offset:offset + first] if first is not None else rows[offset:]


def ensure_id(id) -> int:
    """ Convert a GraphQL ID (a string) into a primary key value """
    try:
        return int(id)
    except (TypeError, ValueError) as e:
        raise exc.NotFoundError('Entity', id) from e


def ensure_found(row: Optional[dict], entity: str, id) -> dict:
    if row is None:
        raise exc.NotFoundError(entity, id)
    return row


def check_owner(row: dict, column: str, user: AuthUser, err: str):
    """ Only let the user change what they own """
    if row[column] != user.id:
        raise exc.AuthorizationError(err)

