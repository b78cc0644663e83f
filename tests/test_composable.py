import time
from types import SimpleNamespace

import jwt
import pytest

from blogql import exc
from blogql.composable import compose, authenticated, verify_token, bearer_token, AUTH_RESOLVERS
from blogql.context import AuthUser
from blogql.settings import BlogSettings


def test_compose_order():
    """ The first decorator is the outermost """
    calls = []

    def decorator(name):
        def wrap(resolver):
            def wrapper(obj, info, **kwargs):
                calls.append(name)
                return resolver(obj, info, **kwargs)
            return wrapper
        return wrap

    def resolver(obj, info, **kwargs):
        calls.append('resolver')
        return kwargs

    wrapped = compose(decorator('a'), decorator('b'), decorator('c'))(resolver)
    assert wrapped(None, None, x=1) == {'x': 1}
    assert calls == ['a', 'b', 'c', 'resolver']

    # No decorators: the resolver itself
    assert compose()(resolver) is resolver


def test_compose_short_circuit():
    """ An outer decorator that fails stops the chain; errors propagate unchanged """
    calls = []

    def failing(resolver):
        def wrapper(obj, info, **kwargs):
            raise RuntimeError('stop')
        return wrapper

    def counting(resolver):
        def wrapper(obj, info, **kwargs):
            calls.append('counting')
            return resolver(obj, info, **kwargs)
        return wrapper

    wrapped = compose(failing, counting)(lambda obj, info: calls.append('resolver'))
    with pytest.raises(RuntimeError, match='stop'):
        wrapped(None, None)
    assert calls == []


@pytest.mark.parametrize(('auth_user', 'authorization', 'expect_invoked'), [
    # No identity, no credential: fails
    (None, None, False),
    (None, '', False),
    # Identity
    (AuthUser(id=1, email='a@example.com'), None, True),
    # Raw credential
    (None, 'Bearer token', True),
])
def test_authenticated(auth_user, authorization, expect_invoked: bool):
    """ authenticated: short-circuits without an identity """
    counter = Counter()
    wrapped = compose(authenticated)(counter)
    info = info_with(auth_user=auth_user, authorization=authorization)

    if expect_invoked:
        result = wrapped('root', info, id=1)
        assert counter.n == 1
        assert result is counter.result
        assert counter.args == ('root', info, {'id': 1})
    else:
        with pytest.raises(exc.AuthorizationError):
            wrapped('root', info, id=1)
        assert counter.n == 0


def test_authenticated_returns_awaitables_verbatim():
    """ The result is returned as is: coroutines are not awaited by the decorator """
    async def resolver(obj, info):
        return 'result'

    wrapped = authenticated(resolver)
    coroutine = wrapped(None, info_with(auth_user=AuthUser(id=1, email='a@example.com')))
    try:
        assert coroutine.__name__ == 'resolver'
    finally:
        coroutine.close()


def test_verify_token():
    settings = BlogSettings(jwt_secret=SECRET)
    counter = Counter()
    wrapped = verify_token(counter)

    # No credential: pass through
    wrapped(None, info_with(settings=settings, auth_user=AuthUser(id=1, email='a@example.com')))
    assert counter.n == 1

    # Valid token
    token = jwt.encode({'sub': '1'}, SECRET, algorithm='HS256')
    wrapped(None, info_with(settings=settings, authorization=f'Bearer {token}'))
    assert counter.n == 2

    # Wrong signature
    token = jwt.encode({'sub': '1'}, 'wrong-secret-wrong-secret-wrong-secret', algorithm='HS256')
    with pytest.raises(exc.InvalidTokenError, match='InvalidSignatureError'):
        wrapped(None, info_with(settings=settings, authorization=f'Bearer {token}'))

    # Expired
    token = jwt.encode({'sub': '1', 'exp': int(time.time()) - 60}, SECRET, algorithm='HS256')
    with pytest.raises(exc.InvalidTokenError, match='ExpiredSignatureError'):
        wrapped(None, info_with(settings=settings, authorization=f'Bearer {token}'))

    # No token after "Bearer"
    with pytest.raises(exc.InvalidTokenError):
        wrapped(None, info_with(settings=settings, authorization='Bearer'))

    assert counter.n == 2


def test_auth_resolvers_chain():
    """ The mutation chain: authenticated first, then verify_token """
    settings = BlogSettings(jwt_secret=SECRET)
    counter = Counter()
    wrapped = compose(*AUTH_RESOLVERS)(counter)

    # Nothing: authorization error, not a token error
    with pytest.raises(exc.AuthorizationError) as e:
        wrapped(None, info_with(settings=settings))
    assert not isinstance(e.value, exc.InvalidTokenError)

    # Bad token: token error
    with pytest.raises(exc.InvalidTokenError):
        wrapped(None, info_with(settings=settings, authorization='Bearer nonsense'))

    assert counter.n == 0


@pytest.mark.parametrize(('authorization', 'expected'), [
    (None, None),
    ('', None),
    ('Bearer', None),
    ('Bearer abc', 'abc'),
])
def test_bearer_token(authorization, expected):
    assert bearer_token(authorization) == expected


class Counter:
    """ A resolver that counts its calls """

    def __init__(self):
        self.n = 0
        self.args = None
        self.result = object()

    def __call__(self, obj, info, **kwargs):
        self.n += 1
        self.args = (obj, info, kwargs)
        return self.result


def info_with(*, auth_user=None, authorization=None, settings=None) -> SimpleNamespace:
    """ Make a fake `info` with a context """
    context = SimpleNamespace(auth_user=auth_user, authorization=authorization, settings=settings or BlogSettings())
    return SimpleNamespace(context=context)


# Long enough for HS256
SECRET = 'blogql-test-secret-blogql-test-secret'
