import pytest

from blogql.settings import BlogSettings


def test_from_env():
    # Defaults
    settings = BlogSettings.from_env({})
    assert settings == BlogSettings()

    # Everything
    settings = BlogSettings.from_env({
        'DATABASE_URL': 'postgresql+asyncpg://localhost/blog',
        'JWT_SECRET': 'xxx',
        'JWT_ALGORITHM': 'HS512',
        'DEFAULT_FIRST': '20',
        'MAX_FIRST': '100',
    })
    assert settings == BlogSettings(
        database_url='postgresql+asyncpg://localhost/blog',
        jwt_secret='xxx',
        jwt_algorithm='HS512',
        default_first=20,
        max_first=100,
    )


@pytest.mark.parametrize(('default_first', 'max_first', 'first', 'expected'), [
    # Default
    (10, None, None, 10),
    (10, None, 5, 5),
    # Max
    (10, 3, None, 3),
    (10, 3, 5, 3),
    (10, 30, 20, 20),
])
def test_get_final_first(default_first, max_first, first, expected):
    settings = BlogSettings(default_first=default_first, max_first=max_first)
    assert settings.get_final_first(first) == expected
