"""
Custom exception classes for MiniRDBMS
"""


class MiniRDBMSError(Exception):
    """Base exception for MiniRDBMS"""
    pass


class ParseError(MiniRDBMSError):
    """Query parsing error"""
    pass


class EmptyInputError(ParseError):
    """Query text is empty or whitespace only"""

    def __init__(self):
        super().__init__("Empty SQL statement")


class UnsupportedCommandError(ParseError):
    """First token is not a known command keyword"""

    def __init__(self, command=None):
        self.command = command
        if command is None:
            super().__init__("Invalid SQL: no command given")
        else:
            super().__init__(f"Unsupported command: {command}")


class MissingClauseError(ParseError):
    """A required keyword or clause is absent"""

    def __init__(self, clause: str, message: str = None):
        self.clause = clause
        super().__init__(message or f"Missing {clause} clause")


class ExecutionError(MiniRDBMSError):
    """Query execution error"""
    pass


class TableExistsError(ExecutionError):
    """CREATE TABLE for a name already in use"""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' already exists")


class StorageError(MiniRDBMSError):
    """Persistence collaborator failure"""
    pass


class SchemaError(MiniRDBMSError):
    """Schema validation error"""
    pass


class ColumnCountMismatchError(SchemaError):
    """INSERT value count differs from the table's column count"""

    def __init__(self, table: str, expected: int, got: int):
        self.table = table
        self.expected = expected
        self.got = got
        super().__init__(
            f"Column count mismatch for table '{table}': expected {expected} values, got {got}"
        )


class UnknownColumnError(SchemaError):
    """Column named by a command is not part of the table schema"""

    def __init__(self, table: str, column: str):
        self.table = table
        self.column = column
        super().__init__(f"Table '{table}' has no column '{column}'")


class ConstraintError(MiniRDBMSError):
    """Constraint violation error"""
    pass


class DuplicateValueError(ConstraintError):
    """Indexed column already holds the value"""

    def __init__(self, column: str, value=None, table: str = None):
        self.column = column
        self.value = value
        self.table = table
        where = f"{table}.{column}" if table else column
        super().__init__(f"Duplicate value for {where}: {value!r}")


class TableNotFoundError(MiniRDBMSError):
    """Table does not exist"""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' does not exist")
