"""
Index Manager for MiniRDBMS
Keeps the uniqueness indexes of a single table
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from minirdbms.errors import DuplicateValueError
from minirdbms.types import Column, Row

logger = logging.getLogger(__name__)


class IndexManager:
    """Value -> row lookups for every PRIMARY or UNIQUE column.

    Only inserts maintain the indexes. After UPDATE or DELETE the entries
    are left as they were (stale) unless ``refresh_on_write`` is set, in
    which case they are rebuilt from the surviving rows.
    """

    def __init__(self, table_name: str, columns: Iterable[Column], refresh_on_write: bool = False):
        self.table_name = table_name
        self.refresh_on_write = refresh_on_write
        self.indexes: Dict[str, Dict[Any, Row]] = {
            col.name: {} for col in columns if col.indexed
        }

    def check(self, row: Row):
        """Raise DuplicateValueError if any indexed value is taken"""
        for col_name, index in self.indexes.items():
            value = row.get(col_name)
            if value in index:
                raise DuplicateValueError(col_name, value, self.table_name)

    def add(self, row: Row):
        """Register a row in every index"""
        for col_name, index in self.indexes.items():
            index[row.get(col_name)] = row

    def insert(self, row: Row):
        """Check every index first, then register"""
        self.check(row)
        self.add(row)

    def lookup(self, column: str, value: Any) -> Optional[Row]:
        """Row registered for a value; tests use it to show stale entries"""
        index = self.indexes.get(column)
        if index is None:
            return None
        return index.get(value)

    def list_indexes(self) -> List[str]:
        return list(self.indexes.keys())

    def rebuild(self, rows: Iterable[Row]):
        """Replay rows through the insert check into fresh indexes"""
        for index in self.indexes.values():
            index.clear()
        for row in rows:
            self.insert(row)

    def validate(self, rows: Iterable[Row]):
        """Raise if the rows could not all be indexed together"""
        seen = {col_name: set() for col_name in self.indexes}
        for row in rows:
            for col_name, values in seen.items():
                value = row.get(col_name)
                if value in values:
                    raise DuplicateValueError(col_name, value, self.table_name)
                values.add(value)

    def before_update(self, rows: List[Row], column: str, value: Any, matches):
        """Reject an UPDATE that would break uniqueness when refreshing"""
        if not self.refresh_on_write or column not in self.indexes:
            return
        self.validate(
            {**row, column: value} if matches(row) else row
            for row in rows
        )

    def rows_changed(self, rows: List[Row]):
        """Called after UPDATE/DELETE"""
        if self.refresh_on_write:
            self.rebuild(rows)
            logger.debug(f"Rebuilt indexes for {self.table_name}: {self.list_indexes()}")
