""" Backing stores: find by id, find many by filter, create/update/destroy under a transaction """

from .base import Store
from .sa import SAStore
from .stores import Stores
