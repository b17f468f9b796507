from pydantic import BaseModel, ConfigDict, model_validator

from mct.journal.decoder.defs import Instruction
from mct.journal.entities.command import Action, Command


class Entry(BaseModel):
    """One journal line: a command, the action applying it, and how to undo it.

    A remark (REM) entry carries neither action nor revert; every other entry
    has an action. The revert is optional.
    """

    command: Command
    action: Action | None = None
    revert: Command | None = None
    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_clauses(self):
        if self.command.instruction is Instruction.REM:
            if self.action is not None or self.revert is not None:
                raise ValueError("REM entries cannot have an action or revert")
        elif self.action is None:
            raise ValueError(f"{self.command.instruction.value} entry requires an action")
        return self

    @property
    def is_remark(self) -> bool:
        return self.command.instruction is Instruction.REM
