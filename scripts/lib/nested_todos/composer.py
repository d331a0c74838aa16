"""Render todos back to markdown and place them in a note."""

from __future__ import annotations

import logging
import re

from .models import TodoForest, TodoNode

logger = logging.getLogger(__name__)

_EMPTY_TODO_RE = re.compile(r"^\s*- \[ \]\s*$", re.MULTILINE)


def todo_to_lines(todo: TodoNode, indent_level: int = 0) -> list[str]:
    """Render a todo and its children depth-first, one tab per nesting level."""
    lines = []
    pending = [(todo, indent_level)]
    while pending:
        node, depth = pending.pop()
        indent = "\t" * depth
        lines.append(f"{indent}- [{node.state}] {node.item}")
        pending.extend((child, depth + 1) for child in reversed(node.children))
    return lines


def todos_to_string(todos: list[TodoNode]) -> str:
    lines: list[str] = []
    for todo in todos:
        lines.extend(todo_to_lines(todo))
    return "\n".join(lines)


def insert_incomplete_todos(incomplete_todos: TodoForest, by_section: bool, note_text: str) -> str:
    """
    Return ``note_text`` with the given todos added.

    With ``by_section`` each section's todos go directly under the first
    occurrence of its heading text. The match is a plain substring search,
    so a heading that also appears earlier inside other text will match
    there. Sections whose heading cannot be found, and every section when
    ``by_section`` is off, are appended to the end after a blank line.
    """
    logger.info("Adding missing todos to today's note")
    new_note_text = note_text

    if not by_section:
        logger.debug("Adding incomplete todos to end of note")
        for section_todos in incomplete_todos.values():
            new_note_text += "\n" + todos_to_string(section_todos)
        return new_note_text

    for section_title, section_todos in incomplete_todos.items():
        rendered = todos_to_string(section_todos)
        if section_title not in new_note_text:
            logger.warning(
                "Failed to find header: %s in new note. Adding items to end of note",
                section_title,
            )
            new_note_text += "\n" + rendered
            continue

        logger.debug("Adding todos for section %s under matching header", section_title)
        before, after = new_note_text.split(section_title, 1)
        new_note_text = f"{before}{section_title}\n{rendered}{after}"

    return new_note_text


def remove_empty_todos(note_text: str) -> str:
    """Strip checkbox lines that have no label (``- [ ]``)."""
    logger.info("Removing empty todos from today's note")
    return _EMPTY_TODO_RE.sub("", note_text)
