"""Exceptions raised while decoding and encoding journals."""

from __future__ import annotations


class JournalError(Exception):
    """Base class for every journal error."""


class JournalDecodeError(JournalError, ValueError):
    """A line (or one of its clauses) could not be decoded."""


class EmptyLineError(JournalDecodeError):
    """A line is blank after trimming."""

    def __init__(self, message: str = "empty line"):
        super().__init__(message)


class EmptyClauseError(JournalDecodeError):
    """A command, action or revert span is blank after trimming."""

    def __init__(self, clause: str = "clause"):
        self.clause = clause
        super().__init__(f"empty {clause}")


class MissingActionError(JournalDecodeError):
    """A non-REM line has no "&&" separator."""

    def __init__(self, message: str = "missing action"):
        super().__init__(message)


class UnknownInstructionError(JournalDecodeError):
    """A head token is not part of the instruction vocabulary."""

    kind = "instruction"

    def __init__(self, token: object):
        self.token = token
        if isinstance(token, (bytes, bytearray)):
            shown = '"' + bytes(token).decode("utf-8", errors="replace") + '"'
        else:
            shown = repr(token)
        super().__init__(f"unknown {self.kind}: {shown}")


class UnknownActionInstructionError(UnknownInstructionError):
    """A head token is not part of the action vocabulary."""

    kind = "action instruction"


class ClauseError(JournalDecodeError):
    """Wraps a lower-level error with the clause that failed."""

    clause = "clause"

    def __init__(self, cause: JournalDecodeError):
        self.cause = cause
        super().__init__(f"parse {self.clause}: {cause}")


class ParseCommandError(ClauseError):
    clause = "command"


class ParseActionError(ClauseError):
    clause = "action"


class ParseRevertError(ClauseError):
    clause = "undo/revert command"


class JournalLineError(JournalDecodeError):
    """A decode error annotated with its 1-based line number."""

    def __init__(self, lineno: int, line: bytes, cause: JournalDecodeError):
        self.lineno = lineno
        self.line = line
        self.cause = cause
        super().__init__(f"parse entry (line {lineno}): {cause}")


class DecodeCancelledError(JournalError):
    """The caller cancelled a stream before it was exhausted."""

    def __init__(self, lineno: int | None = None):
        self.lineno = lineno
        message = "decode cancelled"
        if lineno is not None:
            message = f"{message} (line {lineno})"
        super().__init__(message)


class ChannelClosedError(JournalError):
    """An entry was sent to, or close() called on, a closed channel."""
