"""Todo outline data types."""

from __future__ import annotations

from dataclasses import dataclass, field

UNTITLED_SECTION = "Untitled"


@dataclass
class TodoNode:
    """A single checkbox item and the items nested beneath it.

    ``item`` is the label after the checkbox and the only thing compared
    when matching todos across notes. ``state`` is the raw marker character.
    """

    item: str
    state: str
    complete: bool
    children: list[TodoNode] = field(default_factory=list)


# Section key (heading line or UNTITLED_SECTION) -> top-level todos, in note order
TodoForest = dict[str, list[TodoNode]]


def count_todos(forest: TodoForest) -> int:
    """Number of top-level todos across all sections."""
    return sum(len(todos) for todos in forest.values())
