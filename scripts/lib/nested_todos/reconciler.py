"""Fold several days of todos into the set still left open."""

from __future__ import annotations

from collections.abc import Iterable

from .models import TodoForest, TodoNode


def todo_has_incomplete_item(node: TodoNode) -> bool:
    """True if the node or any descendant is not complete."""
    pending = [node]
    while pending:
        current = pending.pop()
        if not current.complete:
            return True
        pending.extend(current.children)
    return False


def _index_of_item(todos: list[TodoNode], item: str) -> int:
    for index, todo in enumerate(todos):
        if todo.item == item:
            return index
    return -1


def calculate_remaining_incomplete_todos(previous_todos: Iterable[TodoForest]) -> TodoForest:
    """
    Return the todos that were still open the last time they appeared.

    Days must be given oldest first. Within a section:
    - an open todo replaces any earlier one with the same label (children
      are taken from the newer day, never merged), otherwise it is appended
    - a fully complete todo cancels any earlier open one with that label

    A section whose todos were all cancelled stays in the result with an
    empty list.
    """
    incomplete_todos: TodoForest = {}

    for day_of_todos in previous_todos:
        for section_title, section_todos in day_of_todos.items():
            for todo in section_todos:
                if todo_has_incomplete_item(todo):
                    if section_title in incomplete_todos:
                        existing = incomplete_todos[section_title]
                        index = _index_of_item(existing, todo.item)
                        if index != -1:
                            existing[index] = todo
                        else:
                            existing.append(todo)
                    else:
                        incomplete_todos[section_title] = [todo]
                elif section_title in incomplete_todos:
                    existing = incomplete_todos[section_title]
                    index = _index_of_item(existing, todo.item)
                    if index != -1:
                        del existing[index]

    return incomplete_todos
