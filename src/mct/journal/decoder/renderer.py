from pathlib import Path

import yaml
from jinja2 import Template

from mct.journal.entities.command import Action, Command
from mct.journal.entities.entry import Entry

from .encoder import encode_action, encode_command

# Load once at module import
with open(Path(__file__).parent / "templates.yml", encoding="utf-8") as f:
    _cfg = yaml.safe_load(f)

TEMPLATES = {
    tpl_id: Template(tpl_text)
    for tpl_id, tpl_text in _cfg["templates"].items()
}
STEP_TYPES = _cfg["step_types"]


def _text(raw: bytes, encoding: str) -> str:
    return raw.decode(encoding, errors="replace")


def render_clause(clause: Command | Action, encoding: str = "utf-8") -> str:
    """Describe one clause in English.

    Falls back to the canonical text when no template exists for the
    instruction.
    """
    name = clause.instruction.value
    tpl: Template | None = TEMPLATES.get(name)
    if tpl is None:
        raw = encode_action(clause) if isinstance(clause, Action) else encode_command(clause)
        return _text(raw, encoding)
    return tpl.render(name=name, args=[_text(arg, encoding) for arg in clause.args]).strip()


def render_entry(entry: Entry, encoding: str = "utf-8") -> str:
    """Describe a whole entry in English, prefixed with its step-type label."""
    name = entry.command.instruction.value
    step_label = STEP_TYPES.get(name, name)
    body = TEMPLATES["ENTRY"].render(
        command=render_clause(entry.command, encoding),
        action=render_clause(entry.action, encoding) if entry.action is not None else "",
        revert=render_clause(entry.revert, encoding) if entry.revert is not None else "",
    )
    return f"{step_label}: {body.strip()}"


def render_row(entry: Entry, encoding: str = "utf-8") -> list[str]:
    """Table cells for one entry: instruction, arguments, "&&", action, revert."""
    args = " ".join(_text(arg, encoding) for arg in entry.command.args)
    row = [entry.command.instruction.value.rjust(8), f"[{args}]"]
    if entry.action is None:
        return row + ["", "", ""]
    row += ["&&", _text(encode_action(entry.action), encoding)]
    row.append(_text(encode_command(entry.revert), encoding) if entry.revert is not None else "")
    return row


def format_table(rows: list[list[str]], padding: int = 1) -> list[str]:
    """Left-align cells into columns, trimming trailing blanks from each line."""
    if not rows:
        return []
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    return [
        (" " * padding).join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    ]
