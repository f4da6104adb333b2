"""
MiniRDBMS Engine Package
"""

from minirdbms.database import Database
from minirdbms.parser import QueryParser, parse, parse_query
from minirdbms.storage import FileStore, MemoryStore, SnapshotStore
from minirdbms.table import Table
from minirdbms.tokenizer import tokenize
from minirdbms.types import OK, Column, CommandType, IndexInfo, QueryResult
from minirdbms.errors import (
    MiniRDBMSError,
    ParseError,
    EmptyInputError,
    UnsupportedCommandError,
    MissingClauseError,
    ExecutionError,
    TableExistsError,
    TableNotFoundError,
    SchemaError,
    ColumnCountMismatchError,
    UnknownColumnError,
    ConstraintError,
    DuplicateValueError,
    StorageError,
)

__version__ = "1.0.0"

__all__ = [
    'Database',
    'QueryParser',
    'parse',
    'parse_query',
    'tokenize',
    'Table',
    'SnapshotStore',
    'MemoryStore',
    'FileStore',
    'OK',
    'Column',
    'CommandType',
    'IndexInfo',
    'QueryResult',
    'MiniRDBMSError',
    'ParseError',
    'EmptyInputError',
    'UnsupportedCommandError',
    'MissingClauseError',
    'ExecutionError',
    'TableExistsError',
    'TableNotFoundError',
    'SchemaError',
    'ColumnCountMismatchError',
    'UnknownColumnError',
    'ConstraintError',
    'DuplicateValueError',
    'StorageError',
]
