from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from mct.journal.decoder.defs import ActionInstruction, Instruction


def copy_args(value: Any) -> Any:
    """Detach arguments from any mutable source buffer."""
    if isinstance(value, (list, tuple)):
        return tuple(bytes(arg) if isinstance(arg, (bytearray, memoryview)) else arg for arg in value)
    return value


class Command(BaseModel):
    """A command (or revert) clause: an instruction and its raw arguments."""

    instruction: Instruction
    args: tuple[bytes, ...] = ()
    model_config = ConfigDict(frozen=True)

    @field_validator("args", mode="before")
    @classmethod
    def validate_args(cls, v):
        return copy_args(v)


class Action(BaseModel):
    """An action clause: the side effect performed when applying a command."""

    instruction: ActionInstruction
    args: tuple[bytes, ...] = ()
    model_config = ConfigDict(frozen=True)

    @field_validator("args", mode="before")
    @classmethod
    def validate_args(cls, v):
        return copy_args(v)
