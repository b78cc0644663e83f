""" Resolvers: Comment """

from typing import Optional

import graphql

from blogql import models
from blogql.composable import compose, AUTH_RESOLVERS
from blogql.selection import selection_tree_from_info

from .util import handles_errors, projection_for, require_user, ensure_id, ensure_found, check_owner


# ### Comment fields

@handles_errors
async def resolve_comment_user(comment: dict, info: graphql.GraphQLResolveInfo):
    return await info.context.loaders.users.load(comment['user_id'], selection_tree_from_info(info))


@handles_errors
async def resolve_comment_post(comment: dict, info: graphql.GraphQLResolveInfo):
    return await info.context.loaders.posts.load(comment['post_id'], selection_tree_from_info(info))


# ### Query

@handles_errors
async def resolve_comments_by_post(root, info: graphql.GraphQLResolveInfo, postId: str, first: Optional[int] = None, offset: Optional[int] = None):
    context = info.context
    return await context.stores.comments.find_all(
        filter={'post_id': ensure_id(postId)},
        columns=projection_for(info, models.comment_projection),
        limit=context.settings.get_final_first(first),
        offset=offset,
    )


# ### Mutation

def comment_values(input: dict) -> dict:
    """ CommentInput => column values """
    return {'comment': input['comment'], 'post_id': ensure_id(input['post'])}


@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_create_comment(root, info: graphql.GraphQLResolveInfo, input: dict):
    context = info.context
    auth_user = require_user(context)
    comments = context.stores.comments

    async with comments.transaction() as connection:
        return await comments.create({**comment_values(input), 'user_id': auth_user.id}, connection=connection)


@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_update_comment(root, info: graphql.GraphQLResolveInfo, id: str, input: dict):
    context = info.context
    auth_user = require_user(context)
    comments = context.stores.comments
    id = ensure_id(id)

    async with comments.transaction() as connection:
        comment = ensure_found(await comments.find_by_id(id, ('id', 'user_id'), connection=connection), 'Comment', id)
        check_owner(comment, 'user_id', auth_user, 'Unauthorized! You can only edit comments by yourself!')
        return await comments.update(id, comment_values(input), connection=connection)


@compose(*AUTH_RESOLVERS)
@handles_errors
async def resolve_delete_comment(root, info: graphql.GraphQLResolveInfo, id: str):
    context = info.context
    auth_user = require_user(context)
    comments = context.stores.comments
    id = ensure_id(id)

    async with comments.transaction() as connection:
        comment = ensure_found(await comments.find_by_id(id, ('id', 'user_id'), connection=connection), 'Comment', id)
        check_owner(comment, 'user_id', auth_user, 'Unauthorized! You can only delete comments by yourself!')
        return await comments.destroy(id, connection=connection)
