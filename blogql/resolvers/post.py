""" Resolvers: Post """

from typing import Optional

import graphql

from blogql import models
from blogql.composable import compose, AUTH_RESOLVERS
from blogql.selection import selection_tree_from_info

from .util import handles_errors, projection_for, require_user, paginate, ensure_id, ensure_found, check_owner


# ### Post fields

@handles_errors
async def resolve_post_author(post: dict, info: graphql.GraphQLResolveInfo):
    return await info.context.loaders.users.load(post['author_id'], selection_tree_from_info(info))


@handles_errors
async def resolve_post_comments(post: dict, info: graphql.GraphQLResolveInfo, first: Optional[int] = None, offset: Optional[int] = None):
    context = info.context
    comments = await context.loaders.comments_by_post.load(post['id'], selection_tree_from_info(info))
    return paginate(comments, context, first, offset)


# ### Query

@handles_errors
async def resolve_posts(root, info: graphql.GraphQLResolveInfo, first: Optional[int] = None, offset: Optional[int] = None):
    context = info.context
    return await context.stores.posts.find_all(
        columns=projection_for(info, models.post_projection),
        limit=context.settings.get_final_first(first),
        offset=offset,
    )


@handles_errors
async def resolve_post(root, info: graphql.GraphQLResolveInfo, id: str):
    id = ensure_id(id)
    post = await info.context.stores.posts.find_by_id(id, projection_for(info, models.post_projection))
    return ensure_found(post, 'Post', id)


# ### Mutation
# Fields of the returned post (e.g. `author`) are resolved by loaders outside of the transaction

@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_create_post(root, info: graphql.GraphQLResolveInfo, input: dict):
    context = info.context
    auth_user = require_user(context)
    posts = context.stores.posts

    async with posts.transaction() as connection:
        return await posts.create({**input, 'author_id': auth_user.id}, connection=connection)


@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_update_post(root, info: graphql.GraphQLResolveInfo, id: str, input: dict):
    context = info.context
    auth_user = require_user(context)
    posts = context.stores.posts
    id = ensure_id(id)

    async with posts.transaction() as connection:
        post = ensure_found(await posts.find_by_id(id, ('id', 'author_id'), connection=connection), 'Post', id)
        check_owner(post, 'author_id', auth_user, 'Unauthorized! You can only edit posts by yourself!')
        return await posts.update(id, input, connection=connection)


@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_delete_post(root, info: graphql.GraphQLResolveInfo, id: str):
    context = info.context
    auth_user = require_user(context)
    posts = context.stores.posts
    id = ensure_id(id)

    async with posts.transaction() as connection:
        post = ensure_found(await posts.find_by_id(id, ('id', 'author_id'), connection=connection), 'Post', id)
        check_owner(post, 'author_id', auth_user, 'Unauthorized! You can only delete posts by yourself!')
        return await posts.destroy(id, connection=connection)
