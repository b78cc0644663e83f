from __future__ import annotations

from blogql import models
from blogql.store import Stores

from .batch import BatchedLoader, BatchedManyLoader


class Loaders:
    """ The set of loaders for one request

    Create a new one for every request: caches must never outlive it.
    """
    __slots__ = 'users', 'posts', 'comments_by_post', 'posts_by_author'

    def __init__(self, stores: Stores):
        # One-to-one: Post.author, Comment.user, Comment.post
        self.users = BatchedLoader(stores.users, options=models.user_projection)
        self.posts = BatchedLoader(stores.posts, options=models.post_projection)

        # One-to-many: Post.comments, User.posts
        self.comments_by_post = BatchedManyLoader(stores.comments, key='post_id', options=models.comment_projection)
        self.posts_by_author = BatchedManyLoader(stores.posts, key='author_id', options=models.post_projection)

    def clear_all(self):
        """ Forget everything cached """
        for name in self.__slots__:
            getattr(self, name).clear_all()
