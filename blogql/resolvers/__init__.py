""" Blog resolvers: graphql-core field resolvers that use loaders and projections

Example:
    schema = graphql.build_schema(sdl)
    bind_resolvers(schema, RESOLVERS)
    await graphql.graphql(schema, query, context_value=make_context(stores, settings))
"""

from collections import abc

import graphql

from blogql.typing import Resolver

from . import user, post, comment


RESOLVERS: dict[str, dict[str, Resolver]] = {
    'User': {
        'posts': user.resolve_user_posts,
    },
    'Post': {
        'author': post.resolve_post_author,
        'comments': post.resolve_post_comments,
    },
    'Comment': {
        'user': comment.resolve_comment_user,
        'post': comment.resolve_comment_post,
    },
    'Query': {
        'users': user.resolve_users,
        'user': user.resolve_user,
        'currentUser': user.resolve_current_user,
        'posts': post.resolve_posts,
        'post': post.resolve_post,
        'commentsByPost': comment.resolve_comments_by_post,
    },
    'Mutation': {
        'updateUser': user.resolve_update_user,
        'deleteUser': user.resolve_delete_user,
        'createPost': post.resolve_create_post,
        'updatePost': post.resolve_update_post,
        'deletePost': post.resolve_delete_post,
        'createComment': comment.resolve_create_comment,
        'updateComment': comment.resolve_update_comment,
        'deleteComment': comment.resolve_delete_comment,
    },
}


def bind_resolvers(schema: graphql.GraphQLSchema, resolvers: abc.Mapping[str, abc.Mapping[str, Resolver]]) -> graphql.GraphQLSchema:
    """ Bind resolvers to fields of the schema

    Types and fields missing from the schema are skipped: bind a partial schema, if you like.
    """
    for type_name, fields in resolvers.items():
        type_ = schema.type_map.get(type_name)
        if not isinstance(type_, graphql.GraphQLObjectType):
            continue

        for field_name, resolver in fields.items():
            if field_name in type_.fields:
                type_.fields[field_name].resolve = resolver

    return schema
