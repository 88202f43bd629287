"""
=============================
Per-query fragment storage.
=============================

A QuerySession holds one string per SQL clause for a single statement in
progress. Clause builders write into it, the assembler reads from it.

Slot conventions:
    - order, group, limit, offset, union, delete and join carry their own
      keyword prefix (``ORDER BY ...``, ``INNER JOIN ...``)
    - where and having hold bare predicates; the assembler adds the keyword
    - insert and update hold ``col = literal`` assignment lists
    - raw, when set, replaces the whole statement
"""

from dataclasses import dataclass, fields
from enum import Enum


class StatementMode(str, Enum):
    """Statement shape selected at assembly time."""
    RAW = 'raw'
    INSERT = 'insert'
    UPDATE = 'update'
    DELETE = 'delete'
    SELECT = 'select'


@dataclass
class QuerySession:
    """Mutable clause store for one logical statement."""

    table: str = ''
    select: str = ''
    join: str = ''
    where: str = ''
    group: str = ''
    having: str = ''
    order: str = ''
    limit: str = ''
    offset: str = ''
    insert: str = ''
    update: str = ''
    delete: str = ''
    union: str = ''
    raw: str = ''
    # last join segment already carries an ON clause
    join_on: bool = False

    def reset(self) -> None:
        """Empty every slot."""
        for slot in fields(self):
            setattr(self, slot.name, slot.default)

    @property
    def mode(self) -> StatementMode:
        """Active statement mode, highest precedence first."""
        if self.raw:
            return StatementMode.RAW
        if self.insert:
            return StatementMode.INSERT
        if self.update:
            return StatementMode.UPDATE
        if self.delete:
            return StatementMode.DELETE
        return StatementMode.SELECT

    def is_empty(self, slot: str) -> bool:
        return not getattr(self, slot).strip()

    def append(self, slot: str, text: str) -> None:
        """Append text to a slot, separated by a single space."""
        current = getattr(self, slot)
        setattr(self, slot, f"{current} {text}" if current else text)
