from __future__ import annotations

import os
import dataclasses
from typing import Optional


@dataclasses.dataclass
class BlogSettings:
    """ Settings for the blog API

    Read from the environment with `BlogSettings.from_env()`, or created directly in tests.
    """
    # Database to connect to
    database_url: str = 'sqlite+aiosqlite:///./blogql.db'

    # Secret to verify tokens with
    jwt_secret: str = 'secret'
    jwt_algorithm: str = 'HS256'

    # The `first` you get by default on list fields, if not specified
    default_first: int = 10

    # The max number of items you get, regardless of `first`
    max_first: Optional[int] = None

    @classmethod
    def from_env(cls, environ: dict[str, str] = None) -> BlogSettings:
        """ Read settings from environment variables """
        environ = os.environ if environ is None else environ
        defaults = cls()

        max_first = environ.get('MAX_FIRST')
        return cls(
            database_url=environ.get('DATABASE_URL', defaults.database_url),
            jwt_secret=environ.get('JWT_SECRET', defaults.jwt_secret),
            jwt_algorithm=environ.get('JWT_ALGORITHM', defaults.jwt_algorithm),
            default_first=int(environ.get('DEFAULT_FIRST', defaults.default_first)),
            max_first=int(max_first) if max_first else None,
        )

    def get_final_first(self, first: Optional[int]) -> Optional[int]:
        """ Fine-tune the `first` argument of a list field by applying default and max values """
        # Apply default
        if not first:
            first = self.default_first

        # Apply max
        if first and self.max_first:
            first = min(first, self.max_first)

        # Done
        return first
