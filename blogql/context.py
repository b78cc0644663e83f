""" Resolver context: per-request state passed to resolvers as `info.context` """

from __future__ import annotations

import dataclasses
from typing import Optional

from blogql import exc
from blogql.composable import bearer_token, decode_token
from blogql.loader import Loaders
from blogql.settings import BlogSettings
from blogql.store import Stores


@dataclasses.dataclass(frozen=True)
class AuthUser:
    """ The authenticated user """
    id: int
    email: str


@dataclasses.dataclass
class ResolverContext:
    """ Everything a resolver needs. One per request """
    stores: Stores
    loaders: Loaders
    settings: BlogSettings

    # The authenticated user, if any
    auth_user: Optional[AuthUser] = None

    # The raw "Authorization" header value, if any
    authorization: Optional[str] = None


def make_context(stores: Stores, settings: BlogSettings, *, auth_user: AuthUser = None, authorization: str = None) -> ResolverContext:
    """ Make a context for a new request: with a new set of loaders """
    return ResolverContext(
        stores=stores,
        loaders=Loaders(stores),
        settings=settings,
        auth_user=auth_user,
        authorization=authorization,
    )


async def authenticate(authorization: Optional[str], stores: Stores, settings: BlogSettings) -> Optional[AuthUser]:
    """ Get the user a bearer token was issued to

    Returns None when there's no token, the token is invalid, or the user does not exist:
    the request proceeds anonymously, and the resolver chain decides.
    """
    token = bearer_token(authorization)
    if not token:
        return None

    try:
        payload = decode_token(token, settings.jwt_secret, settings.jwt_algorithm)
    except exc.InvalidTokenError:
        return None

    # "sub" is a string: the user id
    try:
        user_id = int(payload['sub'])
    except (KeyError, TypeError, ValueError):
        return None

    user = await stores.users.find_by_id(user_id, ('id', 'email'))
    if user is None:
        return None

    return AuthUser(id=user['id'], email=user['email'])
