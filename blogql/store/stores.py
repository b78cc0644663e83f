from __future__ import annotations

import sqlalchemy as sa
import sqlalchemy.ext.asyncio

from blogql import models

from .base import Store
from .sa import SAStore


class Stores:
    """ The stores of the blog: users, posts, comments """
    __slots__ = 'users', 'posts', 'comments'

    def __init__(self, users: Store, posts: Store, comments: Store):
        self.users = users
        self.posts = posts
        self.comments = comments

    @classmethod
    def for_engine(cls, engine: sa.ext.asyncio.AsyncEngine) -> Stores:
        return cls(
            users=SAStore(models.users, engine),
            posts=SAStore(models.posts, engine),
            comments=SAStore(models.comments, engine),
        )
