""" Resolvers: User """

from typing import Optional

import graphql

from blogql import exc, models
from blogql.composable import compose, AUTH_RESOLVERS
from blogql.selection import selection_tree_from_info

from .util import handles_errors, projection_for, require_user, paginate, ensure_id, ensure_found


# ### User fields

@handles_errors
async def resolve_user_posts(user: dict, info: graphql.GraphQLResolveInfo, first: Optional[int] = None, offset: Optional[int] = None):
    context = info.context
    posts = await context.loaders.posts_by_author.load(user['id'], selection_tree_from_info(info))
    return paginate(posts, context, first, offset)


# ### Query

@handles_errors
async def resolve_users(root, info: graphql.GraphQLResolveInfo, first: Optional[int] = None, offset: Optional[int] = None):
    context = info.context
    return await context.stores.users.find_all(
        columns=projection_for(info, models.user_projection),
        limit=context.settings.get_final_first(first),
        offset=offset,
    )


@handles_errors
async def resolve_user(root, info: graphql.GraphQLResolveInfo, id: str):
    id = ensure_id(id)
    user = await info.context.stores.users.find_by_id(id, projection_for(info, models.user_projection))
    return ensure_found(user, 'User', id)


@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_current_user(root, info: graphql.GraphQLResolveInfo):
    context = info.context
    auth_user = require_user(context)

    user = await context.stores.users.find_by_id(auth_user.id, projection_for(info, models.user_projection))
    return ensure_found(user, 'User', auth_user.id)


# ### Mutation

@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_update_user(root, info: graphql.GraphQLResolveInfo, input: dict):
    context = info.context
    auth_user = require_user(context)
    users = context.stores.users

    async with users.transaction() as connection:
        user = await users.update(auth_user.id, input, connection=connection)
        return ensure_found(user, 'User', auth_user.id)


@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_delete_user(root, info: graphql.GraphQLResolveInfo):
    context = info.context
    auth_user = require_user(context)
    users = context.stores.users

    async with users.transaction() as connection:
        deleted = await users.destroy(auth_user.id, connection=connection)
        if not deleted:
            raise exc.NotFoundError('User', auth_user.id)
        return deleted
