"""Decoding and encoding of configuration journals.

A journal holds one entry per line, ``command && action [&& revert]``, or a
``REM`` remark.
"""

from mct.journal.decoder.channel import EntryChannel
from mct.journal.decoder.decoder import (decode_entry, decode_journal,
                                         decode_stream, iter_entries,
                                         read_from)
from mct.journal.decoder.defs import ActionInstruction, Instruction
from mct.journal.decoder.encoder import encode_entry, encode_journal
from mct.journal.entities.command import Action, Command
from mct.journal.entities.entry import Entry

__all__ = [
    "Action",
    "ActionInstruction",
    "Command",
    "Entry",
    "EntryChannel",
    "Instruction",
    "decode_entry",
    "decode_journal",
    "decode_stream",
    "encode_entry",
    "encode_journal",
    "iter_entries",
    "read_from",
]
