"""
Table class with schema-bound rows and uniqueness indexes
"""

from typing import Any, Dict, List, Optional, Sequence

from minirdbms.errors import ColumnCountMismatchError, SchemaError, UnknownColumnError
from minirdbms.index_manager import IndexManager
from minirdbms.parser import WhereClause
from minirdbms.types import Column, IndexInfo, Row

# Cell values a loaded snapshot may hold; None comes from an UPDATE with no value token
_SCALARS = (str, int, float, type(None))


class Table:
    """In-memory table: ordered rows plus uniqueness indexes"""

    def __init__(self, name: str, columns: Sequence[Column], refresh_indexes: bool = False):
        self.name = name
        self.columns: List[Column] = list(columns)
        self.rows: List[Row] = []
        self.index_manager = IndexManager(name, self.columns, refresh_on_write=refresh_indexes)

    @property
    def indexes(self) -> Dict[str, Dict[Any, Row]]:
        """Raw index maps, exposed so tests can observe stale entries"""
        return self.index_manager.indexes

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def get_column(self, name: str) -> Optional[Column]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def _matches(self, where: Optional[WhereClause]):
        if where is None:
            return lambda row: True
        return where.matches

    def insert(self, values: Sequence[Any]) -> Row:
        """Append a row built positionally from values.

        Every index is checked before anything changes, so a duplicate on
        any indexed column leaves rows and indexes untouched.
        """
        if len(values) != len(self.columns):
            raise ColumnCountMismatchError(self.name, len(self.columns), len(values))

        row = {col.name: value for col, value in zip(self.columns, values)}
        self.index_manager.check(row)
        self.rows.append(row)
        self.index_manager.add(row)
        return row

    def select(self, where: Optional[WhereClause] = None) -> List[Row]:
        """Copies of the rows matching the filter, in insertion order"""
        matches = self._matches(where)
        return [dict(row) for row in self.rows if matches(row)]

    def update_rows(self, column: str, value: Any, where: Optional[WhereClause] = None) -> int:
        """Set column to value in place on every matching row"""
        if self.get_column(column) is None:
            raise UnknownColumnError(self.name, column)

        matches = self._matches(where)
        self.index_manager.before_update(self.rows, column, value, matches)

        updated_count = 0
        for row in self.rows:
            if matches(row):
                row[column] = value
                updated_count += 1

        self.index_manager.rows_changed(self.rows)
        return updated_count

    def delete_rows(self, where: Optional[WhereClause] = None) -> int:
        """Keep only the rows that do not match the filter"""
        if where is None:
            deleted_count = len(self.rows)
            self.rows = []
        else:
            kept = [row for row in self.rows if not where.matches(row)]
            deleted_count = len(self.rows) - len(kept)
            self.rows = kept

        self.index_manager.rows_changed(self.rows)
        return deleted_count

    def show_indexes(self) -> List[IndexInfo]:
        """Indexed columns in registration order"""
        info = []
        for col_name in self.index_manager.list_indexes():
            col = self.get_column(col_name)
            info.append(IndexInfo(column=col_name, unique=col.primary or col.unique))
        return info

    def to_snapshot(self) -> Dict[str, Any]:
        """Schema and rows; indexes are never serialized"""
        return {
            'name': self.name,
            'columns': [col.to_dict() for col in self.columns],
            'rows': [dict(row) for row in self.rows],
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any], refresh_indexes: bool = False) -> "Table":
        """Rebuild a table, replaying every row through the index check"""
        if not isinstance(data, dict):
            raise SchemaError(f"Snapshot table entry must be an object, got {type(data).__name__}")
        missing = [key for key in ('name', 'columns', 'rows') if key not in data]
        if missing:
            raise SchemaError(f"Snapshot table entry is missing {', '.join(missing)}")
        if not isinstance(data['columns'], list) or not isinstance(data['rows'], list):
            raise SchemaError(f"Snapshot table '{data['name']}' needs list columns and rows")

        columns = [Column.from_dict(col) for col in data['columns']]
        table = cls(data['name'], columns, refresh_indexes=refresh_indexes)
        names = set(table.column_names)

        for row in data['rows']:
            if not isinstance(row, dict):
                raise SchemaError(f"Snapshot row for table '{table.name}' is not an object: {row!r}")
            if not all(isinstance(value, _SCALARS) for value in row.values()):
                raise SchemaError(f"Snapshot row for table '{table.name}' holds a non-scalar value: {row!r}")
            if set(row.keys()) != names:
                raise SchemaError(
                    f"Snapshot row for table '{table.name}' has columns {sorted(row.keys())}, "
                    f"expected {sorted(names)}"
                )
            row = {name: row[name] for name in table.column_names}
            table.index_manager.insert(row)
            table.rows.append(row)

        return table

    def get_stats(self) -> Dict[str, Any]:
        """Get table statistics"""
        return {
            'name': self.name,
            'row_count': len(self.rows),
            'columns': [str(col) for col in self.columns],
            'indexes': self.index_manager.list_indexes(),
        }
