from mct.journal.decoder.defs import (ACTION_INSTRUCTIONS, INSTRUCTIONS,
                                     ActionInstruction, Instruction)
from mct.journal.errors import (UnknownActionInstructionError,
                                UnknownInstructionError)


def _as_token(token: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(token, str):
        return token.encode("utf-8")
    return bytes(token)


def get_instruction(token: bytes | bytearray | memoryview | str) -> Instruction:
    """Decode a command head token. Matching is exact and case-sensitive."""
    key = _as_token(token)
    try:
        return INSTRUCTIONS[key]
    except KeyError:
        raise UnknownInstructionError(key) from None


def get_action_instruction(token: bytes | bytearray | memoryview | str) -> ActionInstruction:
    """Decode an action head token. Matching is exact and case-sensitive."""
    key = _as_token(token)
    try:
        return ACTION_INSTRUCTIONS[key]
    except KeyError:
        raise UnknownActionInstructionError(key) from None


def instruction_text(ins: Instruction) -> str:
    """Canonical text of a command instruction."""
    if not isinstance(ins, Instruction):
        raise UnknownInstructionError(ins)
    return ins.value


def action_instruction_text(ins: ActionInstruction) -> str:
    """Canonical text of an action instruction."""
    if not isinstance(ins, ActionInstruction):
        raise UnknownActionInstructionError(ins)
    return ins.value
