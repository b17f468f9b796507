from typing import NamedTuple

from mct.journal.decoder.defs import SEPARATOR
from mct.journal.errors import MissingActionError


class ClauseSpans(NamedTuple):
    command: bytes          # text before the first "&&"
    action: bytes           # text between the first and last "&&" (or to end of line)
    revert: bytes | None    # text after the last "&&", when there are two or more


def find_clauses(line: bytes) -> ClauseSpans:
    """Split a full (non-REM) line into its clause spans.

    Boundaries are the first and last literal occurrence of "&&". Any "&&"
    in between belongs to the action span, and a "&&" inside an argument is
    treated as a separator like any other.
    """
    action_sep = line.find(SEPARATOR)
    if action_sep == -1:
        raise MissingActionError()

    action_start = action_sep + len(SEPARATOR)
    revert_sep = line.rfind(SEPARATOR)
    if revert_sep == action_sep:
        return ClauseSpans(command=line[:action_sep], action=line[action_start:], revert=None)

    return ClauseSpans(
        command=line[:action_sep],
        action=line[action_start:revert_sep],
        revert=line[revert_sep + len(SEPARATOR):],
    )
