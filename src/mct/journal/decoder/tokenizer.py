# noqa: D100

from typing import NamedTuple

from mct.journal.errors import EmptyClauseError


class ClauseTokens(NamedTuple):
    head: bytes
    args: tuple[bytes, ...]


def split_fields(span: bytes | bytearray | memoryview) -> list[bytes]:
    """Split a span on runs of whitespace.

    The returned tokens are fresh ``bytes`` objects, independent of ``span``.
    """
    return bytes(span).split()


def tokenize_clause(span: bytes | bytearray | memoryview, clause: str = "clause") -> ClauseTokens:
    """Break one clause into its head token and argument tokens."""
    fields = split_fields(span)
    if not fields:
        raise EmptyClauseError(clause)
    return ClauseTokens(head=fields[0], args=tuple(fields[1:]))


__all__ = ["ClauseTokens", "split_fields", "tokenize_clause"]
