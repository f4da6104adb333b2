"""
Query parser for MiniRDBMS

Turns a token list into one of six command variants. Each sub-parser reads
its clauses at fixed offsets from a few anchor keywords (FROM, JOIN, WHERE,
SET); only the keywords checked explicitly below raise on mismatch.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, List, Optional, Sequence, Tuple

from minirdbms.errors import MissingClauseError, UnsupportedCommandError
from minirdbms.tokenizer import tokenize
from minirdbms.types import Column, CommandType, Row

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r'[+-]?\d+')
_DECIMAL = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')
_INFINITY = re.compile(r'[+-]?Infinity')
_RADIX = re.compile(r'0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+')


def is_numeric(token: Optional[str]) -> bool:
    """True when the token reads as a number in the query dialect"""
    if token is None:
        return False
    text = token.strip()
    if not text:
        return True
    return bool(
        _DECIMAL.fullmatch(text)
        or _INFINITY.fullmatch(text)
        or _RADIX.fullmatch(text)
    )


def to_number(token: Optional[str]) -> float:
    """Convert a token to a number; non-numeric input yields nan"""
    if not is_numeric(token):
        return math.nan
    text = token.strip()
    if not text:
        return 0
    if _RADIX.fullmatch(text):
        return int(text, 0)
    if _INTEGER.fullmatch(text):
        return int(text)
    return float(text)


def coerce_number(token: Optional[str]) -> Any:
    """Convert numeric-looking tokens, leave everything else as is"""
    if is_numeric(token):
        return to_number(token)
    return token


def _at(tokens: Sequence[str], index: int) -> Optional[str]:
    """Token at a position, or None when out of range"""
    if 0 <= index < len(tokens):
        return tokens[index]
    return None


def _index_of(tokens: Sequence[str], keyword: str) -> int:
    try:
        return tokens.index(keyword)
    except ValueError:
        return -1


def _split_ref(token: Optional[str], clause: str) -> Tuple[str, Optional[str]]:
    """Split a table.column reference"""
    if token is None:
        raise MissingClauseError(clause, f"Incomplete {clause} clause")
    parts = token.split('.')
    return parts[0], parts[1] if len(parts) > 1 else None


@dataclass
class WhereClause:
    """Single equality filter"""
    column: Optional[str]
    value: Any

    def matches(self, row: Row) -> bool:
        return row.get(self.column) == self.value


@dataclass
class JoinClause:
    """Inner equality join against a second table"""
    table: Optional[str]
    left_table: str
    left_column: Optional[str]
    right_table: str
    right_column: Optional[str]


@dataclass
class Command:
    """Base class for parsed commands"""
    command_type: ClassVar[CommandType]


@dataclass
class CreateTableCommand(Command):
    """Parsed CREATE TABLE"""
    command_type: ClassVar[CommandType] = CommandType.CREATE_TABLE
    table: Optional[str] = None
    columns: List[Column] = field(default_factory=list)


@dataclass
class InsertCommand(Command):
    """Parsed INSERT"""
    command_type: ClassVar[CommandType] = CommandType.INSERT
    table: Optional[str] = None
    values: List[Any] = field(default_factory=list)


@dataclass
class SelectCommand(Command):
    """Parsed SELECT"""
    command_type: ClassVar[CommandType] = CommandType.SELECT
    table: Optional[str] = None
    columns: List[str] = field(default_factory=list)
    where: Optional[WhereClause] = None
    join: Optional[JoinClause] = None


@dataclass
class UpdateCommand(Command):
    """Parsed UPDATE"""
    command_type: ClassVar[CommandType] = CommandType.UPDATE
    table: Optional[str] = None
    column: Optional[str] = None
    value: Any = None
    where: Optional[WhereClause] = None


@dataclass
class DeleteCommand(Command):
    """Parsed DELETE"""
    command_type: ClassVar[CommandType] = CommandType.DELETE
    table: Optional[str] = None
    where: Optional[WhereClause] = None


@dataclass
class ShowIndexCommand(Command):
    """Parsed SHOW INDEX FROM"""
    command_type: ClassVar[CommandType] = CommandType.SHOW_INDEX
    table: Optional[str] = None


class QueryParser:
    """Positional parser for the query dialect"""

    @staticmethod
    def parse(tokens: Sequence[str]) -> Command:
        """Route tokens to the sub-parser named by the first token"""
        command = tokens[0].upper() if tokens and tokens[0] else None
        if command is None:
            raise UnsupportedCommandError()

        parsers = {
            'CREATE': QueryParser._parse_create,
            'INSERT': QueryParser._parse_insert,
            'SELECT': QueryParser._parse_select,
            'UPDATE': QueryParser._parse_update,
            'DELETE': QueryParser._parse_delete,
            'SHOW': QueryParser._parse_show,
        }
        if command not in parsers:
            raise UnsupportedCommandError(command)

        parsed = parsers[command](list(tokens))
        logger.debug(f"Parsed {parsed.command_type.value}: {parsed}")
        return parsed

    @staticmethod
    def _open_paren(tokens: List[str]) -> int:
        position = _index_of(tokens, '(')
        if position == -1:
            raise MissingClauseError('(', "Expected '('")
        return position + 1

    @staticmethod
    def _check_open(tokens: List[str], position: int):
        if position >= len(tokens):
            raise MissingClauseError(')', "Expected ')'")

    @staticmethod
    def _parse_where(tokens: List[str], convert) -> Optional[WhereClause]:
        position = _index_of(tokens, 'WHERE')
        if position == -1:
            return None
        return WhereClause(
            column=_at(tokens, position + 1),
            value=convert(_at(tokens, position + 3)),
        )

    @staticmethod
    def _parse_create(tokens: List[str]) -> CreateTableCommand:
        if _at(tokens, 1) != 'TABLE':
            raise MissingClauseError('TABLE', "Expected TABLE")

        columns = []
        i = QueryParser._open_paren(tokens)
        while _at(tokens, i) != ')':
            QueryParser._check_open(tokens, i)
            name = tokens[i]
            column_type = _at(tokens, i + 1)
            i += 2

            primary = False
            unique = False
            while i < len(tokens) and tokens[i] not in (',', ')'):
                if tokens[i] == 'PRIMARY':
                    primary = True
                elif tokens[i] == 'UNIQUE':
                    unique = True
                i += 1

            columns.append(Column(name, column_type, primary, unique))
            if _at(tokens, i) == ',':
                i += 1

        return CreateTableCommand(table=_at(tokens, 2), columns=columns)

    @staticmethod
    def _parse_insert(tokens: List[str]) -> InsertCommand:
        values = []
        i = QueryParser._open_paren(tokens)
        while _at(tokens, i) != ')':
            QueryParser._check_open(tokens, i)
            values.append(coerce_number(tokens[i]))
            i += 1
            if _at(tokens, i) == ',':
                i += 1

        return InsertCommand(table=_at(tokens, 2), values=values)

    @staticmethod
    def _parse_select(tokens: List[str]) -> SelectCommand:
        from_position = _index_of(tokens, 'FROM')
        if from_position == -1:
            raise MissingClauseError('FROM')

        join = None
        join_position = _index_of(tokens, 'JOIN')
        if join_position != -1:
            left_table, left_column = _split_ref(_at(tokens, join_position + 3), 'JOIN')
            right_table, right_column = _split_ref(_at(tokens, join_position + 5), 'JOIN')
            join = JoinClause(
                table=_at(tokens, join_position + 1),
                left_table=left_table,
                left_column=left_column,
                right_table=right_table,
                right_column=right_column,
            )

        return SelectCommand(
            table=_at(tokens, from_position + 1),
            columns=tokens[1:from_position],
            where=QueryParser._parse_where(tokens, coerce_number),
            join=join,
        )

    @staticmethod
    def _parse_update(tokens: List[str]) -> UpdateCommand:
        set_position = _index_of(tokens, 'SET')
        if set_position == -1:
            raise MissingClauseError('SET')

        return UpdateCommand(
            table=_at(tokens, 1),
            column=_at(tokens, set_position + 1),
            value=coerce_number(_at(tokens, set_position + 3)),
            where=QueryParser._parse_where(tokens, to_number),
        )

    @staticmethod
    def _parse_delete(tokens: List[str]) -> DeleteCommand:
        return DeleteCommand(
            table=_at(tokens, 2),
            where=QueryParser._parse_where(tokens, to_number),
        )

    @staticmethod
    def _parse_show(tokens: List[str]) -> ShowIndexCommand:
        if (_at(tokens, 1) or '').upper() != 'INDEX':
            raise MissingClauseError('INDEX', "Expected INDEX")
        if (_at(tokens, 2) or '').upper() != 'FROM':
            raise MissingClauseError('FROM', "Expected FROM")
        return ShowIndexCommand(table=_at(tokens, 3))


def parse(tokens: Sequence[str]) -> Command:
    """Parse a token list into a command"""
    return QueryParser.parse(tokens)


def parse_query(text: str) -> Command:
    """Tokenize and parse query text"""
    return QueryParser.parse(tokenize(text))
