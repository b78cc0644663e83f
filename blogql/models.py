""" Blog tables and their projection policies """

import sqlalchemy as sa

from blogql.projection import ProjectionOptions


metadata = sa.MetaData()


users = sa.Table(
    'users', metadata,
    sa.Column('id', sa.Integer, primary_key=True),
    sa.Column('name', sa.String(128), nullable=False),
    sa.Column('email', sa.String(128), nullable=False, unique=True),
    sa.Column('password', sa.String(128), nullable=False),
    sa.Column('photo', sa.Text, nullable=True),
)

posts = sa.Table(
    'posts', metadata,
    sa.Column('id', sa.Integer, primary_key=True),
    sa.Column('title', sa.String(255), nullable=False),
    sa.Column('content', sa.Text, nullable=False),
    sa.Column('photo', sa.Text, nullable=False),
    sa.Column('author_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
)

comments = sa.Table(
    'comments', metadata,
    sa.Column('id', sa.Integer, primary_key=True),
    sa.Column('comment', sa.Text, nullable=False),
    sa.Column('post_id', sa.Integer, sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False),
    sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
)


# Projection policies: hard-coded per entity, as resolvers need them.
# `id` is kept: relations are resolved by it. Relations are excluded: they are never columns.
# `password` is never fetched.

user_projection = ProjectionOptions(
    keep={'id'},
    exclude={'posts', 'password'},
    columns=frozenset(users.columns.keys()),
)

post_projection = ProjectionOptions(
    keep={'id'},
    exclude={'comments'},
    requires={'author': ('author_id',)},
    columns=frozenset(posts.columns.keys()),
)

comment_projection = ProjectionOptions(
    keep={'id'},
    requires={'user': ('user_id',), 'post': ('post_id',)},
    columns=frozenset(comments.columns.keys()),
)
