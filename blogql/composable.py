""" Composable resolvers: wrap a resolver with cross-cutting behavior

Example:
    resolve_create_post = compose(*AUTH_RESOLVERS)(resolve_create_post)
"""

from functools import reduce, wraps
from typing import Optional

import graphql
import jwt

from blogql import exc
from blogql.typing import Resolver, ResolverDecorator


def compose(*decorators: ResolverDecorator) -> ResolverDecorator:
    """ Compose resolver decorators

    The first decorator is the outermost: it runs first, and decides whether to invoke the rest of the chain at all.

        compose(a, b)(resolver) == a(b(resolver))
    """
    def composed(resolver: Resolver) -> Resolver:
        return reduce(lambda wrapped, decorator: decorator(wrapped), reversed(decorators), resolver)
    return composed


def authenticated(resolver: Resolver) -> Resolver:
    """ Decorator: only invoke the resolver when there's an authenticated identity or a credential in the context

    Otherwise, fail with AuthorizationError: the resolver is not invoked at all.
    """
    @wraps(resolver)
    def wrapper(obj, info: graphql.GraphQLResolveInfo, **kwargs):
        context = info.context
        if getattr(context, 'auth_user', None) or getattr(context, 'authorization', None):
            return resolver(obj, info, **kwargs)

        raise exc.AuthorizationError()
    return wrapper


def verify_token(resolver: Resolver) -> Resolver:
    """ Decorator: verify the bearer token from the context, if there is one

    Fails with InvalidTokenError when the token is bad: expired, malformed, wrong signature.
    """
    @wraps(resolver)
    def wrapper(obj, info: graphql.GraphQLResolveInfo, **kwargs):
        context = info.context
        authorization = getattr(context, 'authorization', None)
        if authorization:
            decode_token(bearer_token(authorization), context.settings.jwt_secret, context.settings.jwt_algorithm)

        return resolver(obj, info, **kwargs)
    return wrapper


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """ Get the token from an "Authorization: Bearer <token>" value """
    if not authorization:
        return None

    _, _, token = authorization.partition(' ')
    return token or None


def decode_token(token: Optional[str], secret: str, algorithm: str) -> dict:
    """ Verify a token, give its payload

    Raises:
        exc.InvalidTokenError
    """
    if not token:
        raise exc.InvalidTokenError('JsonWebTokenError', 'jwt must be provided')

    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.PyJWTError as e:
        raise exc.InvalidTokenError(type(e).__name__, str(e)) from e


# The chain that gates every mutation
AUTH_RESOLVERS = (authenticated, verify_token)
