"""
========================
SQL literal escaping.
========================

Turns Python values into MySQL-safe literal text using PyMySQL's own
converters, so the builder renders exactly what the driver would.

Functions:
- escape: scalar value to literal text
- escape_all: recursive, structure-preserving escape of lists and dicts
- escape_id: backtick-quote an identifier
- format: substitute ``?`` / ``??`` placeholders in a raw template

Usage:
    from fluentsql.escaper import escape, escape_id, format

    escape("O'Brien")                  # "'O\\'Brien'"
    escape_id("users.id")              # "`users`.`id`"
    format("age > ? AND ?? = ?", [18, "name", "bob"])
"""

import re
from typing import Any, Mapping, Sequence

from pymysql.converters import escape_item

from core.exceptions import UnsupportedValueError

CHARSET = 'utf8mb4'

_PLACEHOLDER = re.compile(r'\?\??')
_PLAIN_IDENTIFIER = re.compile(r'^[\w$]+(\.[\w$]+)*$')


def escape(value: Any) -> str:
    """Render a scalar as a SQL literal.

    Strings are quoted with quotes and backslashes escaped, numbers are
    unquoted, booleans become 1/0 and None becomes NULL. Sequences render
    as a comma-separated list.

    Raises:
        UnsupportedValueError: For mappings, which have no literal form
    """
    if isinstance(value, Mapping):
        raise UnsupportedValueError(f"Cannot use a mapping as a SQL literal: {value!r}")
    if isinstance(value, (list, tuple, set, frozenset)):
        return ', '.join(escape(item) for item in value)
    return escape_item(value, CHARSET)


def escape_all(value: Any) -> Any:
    """Escape a value or object graph, keeping its shape.

    Args:
        value: Scalar, sequence or mapping

    Returns:
        Escaped literal for scalars, a list of escaped elements for
        sequences, or a dict with the same keys and escaped values

    Example:
        >>> escape_all({'name': "a'b", 'tags': [1, 'x']})
        {'name': "'a\\\\'b'", 'tags': ['1', "'x'"]}
    """
    if isinstance(value, dict):
        return {key: escape_all(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [escape_all(item) for item in value]
    return escape(value)


def escape_id(name: str) -> str:
    """Backtick-quote an identifier.

    Dotted names are quoted per part. ``*`` and anything that already
    looks like an expression (spaces, parentheses, backticks) is returned
    unchanged.
    """
    name = str(name).strip()
    if name == '*' or not _PLAIN_IDENTIFIER.match(name):
        return name
    return '.'.join(f"`{part}`" for part in name.split('.'))


def format(template: str, values: Sequence[Any] = ()) -> str:
    """Substitute positional placeholders into a raw SQL template.

    ``??`` consumes the next value as an identifier, ``?`` as a literal.
    Placeholders without a matching value are left untouched. The result
    is not escaped again, so the template itself must be trusted.
    """
    remaining = iter(values or ())

    def substitute(match):
        try:
            value = next(remaining)
        except StopIteration:
            return match.group(0)
        if match.group(0) == '??':
            return escape_id(value)
        return escape(value)

    return _PLACEHOLDER.sub(substitute, template)
