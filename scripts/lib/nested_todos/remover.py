"""Strip carried-forward todos out of an earlier note."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import UNTITLED_SECTION, TodoForest
from .parser import build_todo_regex, parse_for_todos, parse_line_for_title
from .reconciler import todo_has_incomplete_item

logger = logging.getLogger(__name__)


def remove_incomplete_todos(
    previous_text: str,
    incomplete_todos: TodoForest,
    by_section: bool,
    allowed_chars: Iterable[str],
    complete_chars: Iterable[str],
) -> str:
    """
    Return ``previous_text`` without the todos listed in ``incomplete_todos``.

    A matching todo is dropped together with all of its nested lines, unless
    it is complete with nothing open beneath it: that copy was finished here
    and stays. Children are not compared, so a removed todo whose children
    differ from the carried version loses them for good.
    """
    allowed_chars = set(allowed_chars)
    complete_chars = set(complete_chars)
    todo_re = build_todo_regex(allowed_chars)
    lines = previous_text.split("\n")
    updated_lines: list[str] = []

    section_title: str | None = None

    i = 0
    while i < len(lines):
        todo, num_items = parse_for_todos(
            allowed_chars, complete_chars, lines, i, -1, todo_re
        )
        if todo is None or not todo.item:
            if todo is None:
                title = parse_line_for_title(lines[i])
                if title is not None:
                    section_title = title
            updated_lines.append(lines[i])
            i += 1
            continue

        if by_section and section_title is not None:
            section_to_check = section_title
        else:
            section_to_check = UNTITLED_SECTION

        targets = incomplete_todos.get(section_to_check, [])
        block = lines[i:i + num_items]
        if not any(target.item == todo.item for target in targets):
            updated_lines.extend(block)
        elif not todo_has_incomplete_item(todo):
            logger.info("Not removing %s because it is complete", todo.item)
            updated_lines.extend(block)
        else:
            logger.info("Removing %s because it is incomplete and was added to today's note", todo.item)
        i += num_items

    return "\n".join(updated_lines)
