"""Drop carried todos that today's note already has."""

from __future__ import annotations

from .models import TodoForest


def filter_out_existing_todos(previous_todos: TodoForest, existing_todos: TodoForest) -> TodoForest:
    """
    Remove todos whose label already appears in the same section of ``existing_todos``.

    Sections that ``existing_todos`` lacks pass through untouched. A section
    that loses every todo to the filter is left out of the result.
    """
    remaining: TodoForest = {}

    for section_title, entries in previous_todos.items():
        existing_entries = existing_todos.get(section_title)
        if existing_entries is None:
            remaining[section_title] = entries
            continue

        existing_items = {entry.item for entry in existing_entries}
        new_entries = [entry for entry in entries if entry.item not in existing_items]
        if new_entries:
            remaining[section_title] = new_entries

    return remaining
