""" Tools for testing """

from .memory_store import MemoryStore
from .query_log import QueryLog, statement_table
from .table_data import insert
from .graphql import graphql_query, graphql_execution_context_for_query
