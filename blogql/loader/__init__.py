""" Batched, deduplicating, cached loaders for graph edges """

from .key import LoadKey
from .batch import BatchedLoader, BatchedManyLoader
from .loaders import Loaders
