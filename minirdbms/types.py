"""
Type definitions and data structures for MiniRDBMS
"""

from typing import Dict, List, Any, Optional
from dataclasses import dataclass, asdict
from enum import Enum

from minirdbms.errors import SchemaError

# A row maps column name to value; built only through Table.insert
Row = Dict[str, Any]

# Result returned for commands that do not produce rows
OK = "OK"


class CommandType(Enum):
    """Parsed command kinds"""
    CREATE_TABLE = "CREATE_TABLE"
    INSERT = "INSERT"
    SELECT = "SELECT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SHOW_INDEX = "SHOW_INDEX"


@dataclass
class Column:
    """Column definition for table schema"""
    name: str
    type: str
    primary: bool = False
    unique: bool = False

    @property
    def indexed(self) -> bool:
        return self.primary or self.unique

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        if not isinstance(data, dict) or not isinstance(data.get('name'), str):
            raise SchemaError(f"Invalid column definition: {data!r}")
        return cls(
            name=data['name'],
            type=data.get('type'),
            primary=bool(data.get('primary', False)),
            unique=bool(data.get('unique', False)),
        )

    def __str__(self) -> str:
        flags = []
        if self.primary:
            flags.append('PRIMARY')
        if self.unique:
            flags.append('UNIQUE')
        return f"{self.name} {self.type} {' '.join(flags)}".strip()


@dataclass
class IndexInfo:
    """Index information as reported by SHOW INDEX"""
    column: str
    unique: bool

    def to_dict(self) -> Dict[str, Any]:
        return {'column': self.column, 'unique': self.unique}


@dataclass
class QueryResult:
    """Standardized query result"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    columns: Optional[List[str]] = None
    message: Optional[str] = None
    row_count: int = 0
    execution_time: float = 0.0

    @classmethod
    def from_value(cls, value: Any, execution_time: float = 0.0) -> "QueryResult":
        """Wrap a Database.execute result"""
        if isinstance(value, list):
            columns = list(value[0].keys()) if value else []
            return cls(
                success=True,
                data=value,
                columns=columns,
                message='Query executed successfully',
                row_count=len(value),
                execution_time=execution_time,
            )
        return cls(success=True, message=str(value), execution_time=execution_time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API-friendly dictionary"""
        return {
            'success': self.success,
            'data': self.data or [],
            'columns': self.columns or [],
            'message': self.message or '',
            'row_count': self.row_count,
            'execution_time': self.execution_time
        }
