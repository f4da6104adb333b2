"""
Tokenizer for the MiniRDBMS query dialect
"""

import re
from typing import List

from minirdbms.errors import EmptyInputError

_DELIMITERS = re.compile(r'([(),])')


def _strip_quotes(token: str) -> str:
    """Remove one leading and one trailing double quote"""
    if token.startswith('"'):
        token = token[1:]
    if token.endswith('"'):
        token = token[:-1]
    return token


def tokenize(text: str) -> List[str]:
    """Split query text into a flat list of string tokens.

    Parentheses and commas become tokens of their own, semicolons are
    dropped, and double quotes are stripped at token boundaries only.
    Keywords are left exactly as written.
    """
    if not text or not text.strip():
        raise EmptyInputError()

    spaced = _DELIMITERS.sub(r' \1 ', text).replace(';', '')
    return [_strip_quotes(token) for token in spaced.split()]
