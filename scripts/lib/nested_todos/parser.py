"""Markdown checkbox outline parser."""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable

from .models import UNTITLED_SECTION, TodoForest, TodoNode

_TITLE_RE = re.compile(r"^#+\s(.+)")

# Characters that change meaning inside a [...] character class
_CLASS_SPECIAL_CHARS = ("-", "^", "\\", "[", "]")


def _escape_class_char(char: str) -> str:
    if char in _CLASS_SPECIAL_CHARS:
        return "\\" + char
    return char


def build_todo_regex(allowed_chars: Iterable[str]) -> re.Pattern:
    """Regex matching ``- [c] label`` where ``c`` is one of ``allowed_chars``."""
    chars = "".join(_escape_class_char(c) for c in sorted(allowed_chars))
    if not chars:
        # Nothing is a todo; never match
        return re.compile(r"(?!)")
    return re.compile(rf"^\s*- \[([{chars}])\] (.*)")


def _match_todo(
    todo_re: re.Pattern,
    complete_chars: Collection[str],
    lines: list[str],
    line_num: int,
    level: int,
) -> tuple[TodoNode | None, int]:
    """Node and indentation for ``lines[line_num]``, or (None, -1) if it isn't a todo deeper than ``level``."""
    if line_num >= len(lines):
        return None, -1

    line = lines[line_num]
    match = todo_re.match(line)
    if not match:
        return None, -1

    indent_level = line.index("-")
    if indent_level <= level:
        return None, -1

    state, text = match.group(1), match.group(2)
    return TodoNode(item=text, state=state, complete=state in complete_chars), indent_level


def parse_for_todos(
    allowed_chars: Iterable[str],
    complete_chars: Iterable[str],
    lines: list[str],
    line_num: int,
    level: int = -1,
    _todo_re: re.Pattern | None = None,
) -> tuple[TodoNode | None, int]:
    """
    Parse the todo on ``lines[line_num]`` together with everything nested in it.

    A line only belongs here when its indentation (characters before the
    first ``-``) is deeper than ``level``; a shallower or equal line ends the
    run and is left for the caller. Each following todo line hangs off the
    nearest open ancestor that is indented less than it.

    Returns:
        tuple: (node, num_items) where num_items counts the node's own line plus
        every descendant line, or (None, 0) when the line is not part of this run.
    """
    todo_re = _todo_re or build_todo_regex(allowed_chars)
    if not isinstance(complete_chars, (set, frozenset)):
        complete_chars = set(complete_chars)

    root, root_indent = _match_todo(todo_re, complete_chars, lines, line_num, level)
    if root is None:
        return None, 0

    # (indent, node, kept); blank-labelled children are dropped with their subtree
    stack = [(root_indent, root, True)]
    num_items = 1

    while True:
        node, indent_level = _match_todo(
            todo_re, complete_chars, lines, line_num + num_items, root_indent
        )
        if node is None:
            break
        while stack[-1][0] >= indent_level:
            stack.pop()
        _, parent, kept = stack[-1]
        kept = kept and bool(node.item)
        if kept:
            parent.children.append(node)
        stack.append((indent_level, node, kept))
        num_items += 1

    return root, num_items


def parse_line_for_title(line: str) -> str | None:
    """Return the whole heading line (e.g. ``## Work``), or None for other lines."""
    if _TITLE_RE.match(line):
        return line
    return None


def parse_text_for_todos(
    text: str,
    group_by_section: bool,
    allowed_chars: Iterable[str],
    complete_chars: Iterable[str],
) -> TodoForest:
    """
    Parse note text into top-level todos grouped by the heading above them.

    Todos before any heading, or every todo when ``group_by_section`` is off,
    go under UNTITLED_SECTION. A heading stays current until the next one.
    """
    allowed_chars = set(allowed_chars)
    complete_chars = set(complete_chars)
    todo_re = build_todo_regex(allowed_chars)
    lines = text.split("\n")

    section_title: str | None = None
    todos_by_section: TodoForest = {}

    i = 0
    while i < len(lines):
        todo, num_items = parse_for_todos(
            allowed_chars, complete_chars, lines, i, -1, todo_re
        )
        if todo is None:
            title = parse_line_for_title(lines[i])
            if title is not None:
                section_title = title
        elif todo.item:
            if group_by_section and section_title is not None:
                section = section_title
            else:
                section = UNTITLED_SECTION
            todos_by_section.setdefault(section, []).append(todo)
            i += num_items
            continue
        i += 1

    return todos_by_section
