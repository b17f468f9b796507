# flake8: noqa: E241
from collections.abc import Callable

from mct.journal.entities.command import Action, Command
from mct.journal.entities.entry import Entry
from mct.journal.errors import (ClauseError, JournalDecodeError,
                                ParseActionError, ParseCommandError,
                                ParseRevertError)

from .defs import REM_PREFIX, ClauseKind
from .helpers.ins_helpers import get_action_instruction, get_instruction
from .helpers.parse_result import find_clauses
from .tokenizer import tokenize_clause

# Head decoder, model and error wrapper for each clause position.
dispatch_map: dict[ClauseKind, tuple[Callable, type, type[ClauseError]]] = {
    ClauseKind.COMMAND: (get_instruction,        Command, ParseCommandError),
    ClauseKind.ACTION:  (get_action_instruction, Action,  ParseActionError),
    ClauseKind.REVERT:  (get_instruction,        Command, ParseRevertError),
}


def parse_clause(span: bytes, kind: ClauseKind) -> Command | Action:
    """Parse a single clause against the vocabulary of its position.

    Raises EmptyClauseError or UnknownInstructionError (unwrapped).
    """
    decode_head, model, _ = dispatch_map[kind]
    tokens = tokenize_clause(span, kind.value)
    return model(instruction=decode_head(tokens.head), args=tokens.args)


def parse_command(span: bytes) -> Command:
    return parse_clause(span, ClauseKind.COMMAND)


def _parse_wrapped(span: bytes, kind: ClauseKind):
    _, _, wrapper = dispatch_map[kind]
    try:
        return parse_clause(span, kind)
    except JournalDecodeError as err:
        raise wrapper(err) from err


# ──────────────────────────────────────────────────────────────────────────────
def parse_entry(line: bytes) -> Entry:
    """Assemble an Entry from one trimmed, non-empty line.

    Lines starting with "REM" are remarks: the whole line is one command
    clause and is never split on "&&". Every other line is split into
    ``command && action [&& revert]`` by the first and last separator.
    """
    if line.startswith(REM_PREFIX):
        return Entry(command=parse_command(line))

    spans = find_clauses(line)

    command = _parse_wrapped(spans.command, ClauseKind.COMMAND)
    action = _parse_wrapped(spans.action, ClauseKind.ACTION)
    revert = None
    if spans.revert is not None:
        revert = _parse_wrapped(spans.revert, ClauseKind.REVERT)

    return Entry(command=command, action=action, revert=revert)
