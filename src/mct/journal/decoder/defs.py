# -----------------------------------------------------------------------------
# Instruction vocabularies and grammar constants
# -----------------------------------------------------------------------------
# flake8: noqa: E221
from enum import Enum


class Instruction(Enum):
    """Head token of a command (or revert) clause."""

    REM   = "REM"    # Remark, never clause-split
    MKDIR = "MKDIR"
    COPY  = "COPY"
    CHMOD = "CHMOD"
    CHOWN = "CHOWN"
    CHGRP = "CHGRP"
    RM    = "RM"
    EXEC  = "EXEC"


class ActionInstruction(Enum):
    """Head token of an action clause."""

    NOP    = "NOP"
    SYSCTL = "SYSCTL"


class ClauseKind(Enum):
    COMMAND = "command"
    ACTION = "action"
    REVERT = "revert"


# Clause separator, matched as a literal substring (no quoting or escaping).
SEPARATOR = b"&&"

# A line starting with this text is a remark and is parsed as one clause.
REM_PREFIX = Instruction.REM.value.encode("ascii")

# Process-wide lookup tables, keyed by the raw token bytes.
INSTRUCTIONS: dict[bytes, Instruction] = {
    member.value.encode("ascii"): member for member in Instruction
}
ACTION_INSTRUCTIONS: dict[bytes, ActionInstruction] = {
    member.value.encode("ascii"): member for member in ActionInstruction
}
