__version__ = __import__('importlib.metadata').metadata.version('blogql')

from .selection import SelectionTree, Fragment
from .selection import selection_tree_from_info, selection_tree
from .projection import ProjectionOptions, resolve_projection
from .loader import BatchedLoader, BatchedManyLoader, LoadKey, Loaders
from .composable import compose, authenticated, verify_token, AUTH_RESOLVERS
from .settings import BlogSettings

from . import exc
