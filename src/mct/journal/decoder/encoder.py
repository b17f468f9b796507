from collections.abc import Iterable

from mct.journal.entities.command import Action, Command
from mct.journal.entities.entry import Entry

from .defs import SEPARATOR
from .helpers.ins_helpers import action_instruction_text, instruction_text


def encode_command(command: Command) -> bytes:
    """Canonical text of a command: the instruction, then each argument."""
    head = instruction_text(command.instruction).encode("ascii")
    return b" ".join((head, *command.args))


def encode_action(action: Action) -> bytes:
    head = action_instruction_text(action.instruction).encode("ascii")
    return b" ".join((head, *action.args))


def encode_entry(entry: Entry) -> bytes:
    """Render ``command && action [&& revert]`` (a remark is just its command)."""
    parts = [encode_command(entry.command)]
    if entry.action is not None:
        parts += [SEPARATOR, encode_action(entry.action)]
    if entry.revert is not None:
        parts += [SEPARATOR, encode_command(entry.revert)]
    return b" ".join(parts)


def encode_journal(entries: Iterable[Entry]) -> bytes:
    return b"".join(encode_entry(entry) + b"\n" for entry in entries)
