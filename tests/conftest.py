import os

import pytest
import pytest_asyncio
import sqlalchemy as sa
import sqlalchemy.ext.asyncio

from blogql import models
from blogql.store import Stores
from blogql.testing import insert


@pytest_asyncio.fixture(scope='function')
async def engine(tmp_path) -> sa.ext.asyncio.AsyncEngine:
    # A file database: every connection sees the same data
    url = os.getenv('DATABASE_URL') or f'sqlite+aiosqlite:///{tmp_path / "test_blogql.db"}'
    engine = sa.ext.asyncio.create_async_engine(url)

    async with engine.begin() as connection:
        await connection.run_sync(models.metadata.drop_all)
        await connection.run_sync(models.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope='function')
async def stores(engine: sa.ext.asyncio.AsyncEngine) -> Stores:
    """ Stores with some data: 2 users, 3 posts, 3 comments """
    async with engine.begin() as connection:
        await insert(connection, models.users,
            dict(id=1, name='Armando', email='armando@example.com', password='1234', photo=None),
            dict(id=2, name='Bianca', email='bianca@example.com', password='1234', photo='bianca.png'),
        )
        await insert(connection, models.posts,
            dict(id=1, title='post 1', content='Post content 1', photo='image_1.png', author_id=1),
            dict(id=2, title='post 2', content='Post content 2', photo='image_2.png', author_id=2),
            dict(id=3, title='post 3', content='Post content 3', photo='image_3.png', author_id=1),
        )
        await insert(connection, models.comments,
            dict(id=1, comment='comment 1', post_id=1, user_id=2),
            dict(id=2, comment='comment 2', post_id=1, user_id=1),
            dict(id=3, comment='comment 3', post_id=2, user_id=1),
        )

    return Stores.for_engine(engine)
