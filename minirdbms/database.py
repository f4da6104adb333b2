"""
Database: owns the tables, executes queries and persists snapshots
"""

import logging
from typing import Any, Dict, List, Optional

from minirdbms.errors import (
    StorageError,
    TableExistsError,
    TableNotFoundError,
    UnsupportedCommandError,
)
from minirdbms.join_executor import JoinExecutor
from minirdbms.parser import (
    Command,
    CreateTableCommand,
    DeleteCommand,
    InsertCommand,
    SelectCommand,
    ShowIndexCommand,
    UpdateCommand,
    parse,
)
from minirdbms.storage import MemoryStore, Snapshot, SnapshotStore
from minirdbms.table import Table
from minirdbms.tokenizer import tokenize
from minirdbms.types import OK, Row

logger = logging.getLogger(__name__)


class Database:
    """Named tables plus the store their snapshot is saved to.

    The snapshot is loaded once at construction and saved after every
    successful command, reads included.
    """

    def __init__(self, store: Optional[SnapshotStore] = None, refresh_indexes: bool = False):
        self.store = store if store is not None else MemoryStore()
        self.refresh_indexes = refresh_indexes
        self.tables: Dict[str, Table] = {}
        self.load()

    def load(self):
        """Replace the tables with the stored snapshot, if there is one"""
        snapshot = self.store.load()
        if snapshot is None:
            return

        tables = {}
        for table_name, data in snapshot.items():
            tables[table_name] = Table.from_snapshot(data, refresh_indexes=self.refresh_indexes)
        self.tables = tables
        logger.info(f"Loaded {len(tables)} table(s) from snapshot")

    def snapshot(self) -> Snapshot:
        return {name: table.to_snapshot() for name, table in self.tables.items()}

    def persist(self):
        try:
            self.store.save(self.snapshot())
        except StorageError:
            raise
        except (OSError, TypeError, ValueError) as e:
            logger.error("Snapshot save failed", exc_info=True)
            raise StorageError(f"Snapshot save failed: {e}") from e

    def execute(self, query: str) -> Any:
        """Run one query and persist; the result is valid only if both succeed"""
        command = parse(tokenize(query))
        result = self.execute_command(command)
        self.persist()
        return result

    def execute_command(self, command: Command) -> Any:
        if isinstance(command, CreateTableCommand):
            return self._execute_create_table(command)
        elif isinstance(command, InsertCommand):
            self.get_table(command.table).insert(command.values)
            return OK
        elif isinstance(command, SelectCommand):
            return self._execute_select(command)
        elif isinstance(command, UpdateCommand):
            self.get_table(command.table).update_rows(command.column, command.value, command.where)
            return OK
        elif isinstance(command, DeleteCommand):
            self.get_table(command.table).delete_rows(command.where)
            return OK
        elif isinstance(command, ShowIndexCommand):
            return [info.to_dict() for info in self.get_table(command.table).show_indexes()]
        raise UnsupportedCommandError(type(command).__name__)

    def get_table(self, name: str) -> Table:
        if name not in self.tables:
            raise TableNotFoundError(name)
        return self.tables[name]

    def list_tables(self) -> List[str]:
        return list(self.tables.keys())

    def _execute_create_table(self, command: CreateTableCommand) -> str:
        if command.table in self.tables:
            raise TableExistsError(command.table)
        self.tables[command.table] = Table(
            command.table, command.columns, refresh_indexes=self.refresh_indexes
        )
        logger.info(f"Created table {command.table} with {len(command.columns)} column(s)")
        return OK

    def _execute_select(self, command: SelectCommand) -> List[Row]:
        rows = self.get_table(command.table).select(command.where)

        if command.join is not None:
            right = self.get_table(command.join.table)
            rows = JoinExecutor.inner_join(
                rows, right.rows, command.join.left_column, command.join.right_column
            )

        return rows

